# models.py
# Definições de dataclasses e modelos de domínio

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

# Valores enumerados (mantidos em inglês, são os valores trafegados na API)
MIRROR_TYPES = ("Wall Mirror", "Decorative", "LED Mirror", "Custom Cut")
MIRROR_SHAPES = ("Round", "Square", "Rectangle", "Oval", "Custom")
PAYMENT_METHODS = ("Cash", "Transfer", "Card")

IN_STOCK = "In Stock"
LOW_STOCK = "Low Stock"
OUT_OF_STOCK = "Out of Stock"
STOCK_STATUSES = (IN_STOCK, LOW_STOCK, OUT_OF_STOCK)

ORDER_STANDARD = "Standard"
ORDER_CUSTOM = "Custom Project"
ORDER_TYPES = (ORDER_STANDARD, ORDER_CUSTOM)

STATUS_NEW = "New"
STATUS_IN_PRODUCTION = "In Production"
STATUS_READY = "Ready"
STATUS_INSTALLED = "Installed"
STATUS_COMPLETED = "Completed"
STATUS_CANCELLED = "Cancelled"

# Ordem do fluxo de produção; Cancelled fica fora da sequência
STATUS_FLOW = (STATUS_NEW, STATUS_IN_PRODUCTION, STATUS_READY, STATUS_INSTALLED, STATUS_COMPLETED)
ORDER_STATUSES = STATUS_FLOW + (STATUS_CANCELLED,)
TERMINAL_STATUSES = (STATUS_COMPLETED, STATUS_CANCELLED)


def _build_transitions() -> Dict[str, frozenset]:
    """
    Tabela de transições de status.
    Avanços podem pular etapas (pedido Standard vai de New direto para Completed),
    Cancelled é alcançável de qualquer status não terminal.
    """
    table: Dict[str, frozenset] = {}
    for i, status in enumerate(STATUS_FLOW):
        if status in TERMINAL_STATUSES:
            table[status] = frozenset()
        else:
            table[status] = frozenset(STATUS_FLOW[i + 1:] + (STATUS_CANCELLED,))
    table[STATUS_CANCELLED] = frozenset()
    return table


ORDER_TRANSITIONS = _build_transitions()


class InvalidStatusTransition(ValueError):
    """Mudança de status não permitida pela tabela ORDER_TRANSITIONS"""

    def __init__(self, current: str, new: str):
        super().__init__(f"Transição de status inválida: {current} -> {new}")
        self.current = current
        self.new = new


def can_transition(current: str, new: str) -> bool:
    """Retorna True se o pedido pode ir de `current` para `new`."""
    if current == new:
        return new in ORDER_STATUSES
    # Status desconhecido gravado no registro (dado legado): só permite valores válidos
    if current not in ORDER_TRANSITIONS:
        return new in ORDER_STATUSES
    return new in ORDER_TRANSITIONS[current]


def check_transition(current: str, new: str) -> None:
    if not can_transition(current, new):
        raise InvalidStatusTransition(current, new)


@dataclass
class Product:
    id: str
    name: str
    image: str
    type: str
    shape: str
    dimensions: str
    price: float
    stock: int
    # Retrato do status no momento da criação; a tela usa analytics.stock_status
    status: str = IN_STOCK
    is_visible: bool = True

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "image": self.image,
            "type": self.type,
            "shape": self.shape,
            "dimensions": self.dimensions,
            "price": self.price,
            "stock": self.stock,
            "status": self.status,
            "isVisible": self.is_visible,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Product":
        return cls(
            id=str(data["id"]),
            name=data.get("name", ""),
            image=data.get("image", ""),
            type=data.get("type", MIRROR_TYPES[0]),
            shape=data.get("shape", "Rectangle"),
            dimensions=data.get("dimensions", ""),
            price=data.get("price", 0),
            stock=int(data.get("stock", 0)),
            status=data.get("status", IN_STOCK),
            is_visible=bool(data.get("isVisible", True)),
        )


@dataclass
class Customer:
    id: str
    name: str
    phone: str
    address: str
    city: str
    total_spent: float = 0
    order_count: int = 0
    email: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "phone": self.phone,
            "address": self.address,
            "city": self.city,
            "totalSpent": self.total_spent,
            "orderCount": self.order_count,
        }
        if self.email is not None:
            data["email"] = self.email
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Customer":
        return cls(
            id=str(data["id"]),
            name=data.get("name", ""),
            phone=data.get("phone", ""),
            address=data.get("address", ""),
            city=data.get("city", ""),
            total_spent=data.get("totalSpent", 0),
            order_count=int(data.get("orderCount", 0)),
            email=data.get("email"),
        )


@dataclass
class CustomOrderDetails:
    width: float
    height: float
    shape: str
    frame_type: str
    frame_color: str
    is_installation_required: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "width": self.width,
            "height": self.height,
            "shape": self.shape,
            "frameType": self.frame_type,
            "frameColor": self.frame_color,
            "isInstallationRequired": self.is_installation_required,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CustomOrderDetails":
        return cls(
            width=data.get("width", 0),
            height=data.get("height", 0),
            shape=data.get("shape", "Rectangle"),
            frame_type=data.get("frameType", ""),
            frame_color=data.get("frameColor", ""),
            is_installation_required=bool(data.get("isInstallationRequired", False)),
        )


@dataclass
class Order:
    id: str
    customer_id: str
    customer_name: str  # cópia desnormalizada para exibição
    type: str
    date: str
    total_price: float
    paid_amount: float
    status: str = STATUS_NEW
    payment_method: str = "Cash"
    items: Optional[List[Product]] = None
    custom_details: Optional[CustomOrderDetails] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "id": self.id,
            "customerId": self.customer_id,
            "customerName": self.customer_name,
            "type": self.type,
            "date": self.date,
            "totalPrice": self.total_price,
            "paidAmount": self.paid_amount,
            "status": self.status,
            "paymentMethod": self.payment_method,
        }
        if self.items is not None:
            data["items"] = [p.to_dict() for p in self.items]
        if self.custom_details is not None:
            data["customDetails"] = self.custom_details.to_dict()
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Order":
        items = data.get("items")
        details = data.get("customDetails")
        return cls(
            id=str(data["id"]),
            customer_id=str(data.get("customerId", "")),
            customer_name=data.get("customerName", ""),
            type=data.get("type", ORDER_STANDARD),
            date=data.get("date", ""),
            total_price=data.get("totalPrice", 0),
            paid_amount=data.get("paidAmount", 0),
            status=data.get("status", STATUS_NEW),
            payment_method=data.get("paymentMethod", "Cash"),
            items=[Product.from_dict(p) for p in items] if items is not None else None,
            custom_details=CustomOrderDetails.from_dict(details) if details else None,
        )


@dataclass
class KPI:
    revenue_today: float = 0
    revenue_month: float = 0
    total_orders: int = 0
    active_custom_projects: int = 0
    in_stock: int = 0
    out_of_stock: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "revenueToday": self.revenue_today,
            "revenueMonth": self.revenue_month,
            "totalOrders": self.total_orders,
            "activeCustomProjects": self.active_custom_projects,
            "inStock": self.in_stock,
            "outOfStock": self.out_of_stock,
        }


@dataclass
class WeekdaySales:
    name: str  # abreviação do dia (Mon, Tue...)
    date: str
    sales: float = 0
