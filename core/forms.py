# forms.py
# Montagem dos registros a partir dos formulários (produto e pedido sob medida)

import uuid
from datetime import date
from typing import Optional, Tuple
from urllib.parse import quote

from core.models import (
    Customer, CustomOrderDetails, Order, Product,
    IN_STOCK, OUT_OF_STOCK, MIRROR_SHAPES, MIRROR_TYPES, PAYMENT_METHODS,
    ORDER_CUSTOM, STATUS_NEW,
)


def new_id(prefix: str) -> str:
    """
    Gera o identificador no cliente: "{prefixo}-{uuid4 hex}".
    Duas chamadas no mesmo milissegundo nunca colidem.
    """
    return f"{prefix}-{uuid.uuid4().hex}"


def build_product(
    name: str,
    price: float,
    stock: int,
    type: str = "Wall Mirror",
    shape: str = "Rectangle",
    dimensions: str = "",
    image: str = "",
) -> Product:
    """
    Cria o produto do formulário "Add New Product".

    Raises:
        ValueError: nome vazio, preço/estoque negativos ou tipo/formato desconhecido
    """
    name = (name or "").strip()
    if not name:
        raise ValueError("Nome do produto é obrigatório")
    price = float(price)
    stock = int(stock)
    if price < 0:
        raise ValueError("Preço não pode ser negativo")
    if stock < 0:
        raise ValueError("Estoque não pode ser negativo")
    if type not in MIRROR_TYPES:
        raise ValueError(f"Tipo de espelho inválido: {type}")
    if shape not in MIRROR_SHAPES:
        raise ValueError(f"Formato inválido: {shape}")

    return Product(
        id=new_id("p"),
        name=name,
        # Imagem de marcação quando nenhuma foi enviada
        image=image or f"https://via.placeholder.com/200?text={quote(name)}",
        type=type,
        shape=shape,
        dimensions=dimensions or "Standard",
        price=price,
        stock=stock,
        status=IN_STOCK if stock > 0 else OUT_OF_STOCK,
        is_visible=True,
    )


def build_custom_order(
    customer_name: str,
    phone: str,
    address: str,
    city: str,
    width: float,
    height: float,
    total_price: float,
    paid_amount: float = 0,
    shape: str = "Rectangle",
    frame_type: str = "Wood",
    frame_color: str = "Black",
    installation_required: bool = False,
    payment_method: str = "Cash",
    order_date: Optional[date] = None,
) -> Tuple[Order, Customer]:
    """
    Cria o pedido sob medida e o cliente que o acompanha.
    O cliente nasce com orderCount=1 e totalSpent=total do pedido; se o telefone
    já existir, o controlador soma no cadastro existente em vez de usar este.
    """
    if not (customer_name or "").strip():
        raise ValueError("Nome do cliente é obrigatório")
    if not (phone or "").strip():
        raise ValueError("Telefone é obrigatório")
    if payment_method not in PAYMENT_METHODS:
        raise ValueError(f"Forma de pagamento inválida: {payment_method}")

    customer = Customer(
        id=new_id("c"),
        name=customer_name.strip(),
        phone=phone.strip(),
        address=address,
        city=city,
        total_spent=total_price,
        order_count=1,
    )

    order = Order(
        id=new_id("ord"),
        customer_id=customer.id,
        customer_name=customer.name,
        type=ORDER_CUSTOM,
        date=(order_date or date.today()).isoformat(),
        total_price=total_price,
        paid_amount=paid_amount,
        status=STATUS_NEW,
        payment_method=payment_method,
        custom_details=CustomOrderDetails(
            width=width,
            height=height,
            shape=shape,
            frame_type=frame_type,
            frame_color=frame_color,
            is_installation_required=installation_required,
        ),
    )
    return order, customer
