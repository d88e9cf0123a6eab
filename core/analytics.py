# analytics.py
# Estado derivado: status de estoque, KPIs e saldo devedor.
# Tudo é recalculado a partir dos registros atuais, nada é gravado de volta.

from datetime import date, timedelta
from typing import Iterable, List, Optional

from core.models import (
    KPI, Order, Product, WeekdaySales,
    IN_STOCK, LOW_STOCK, OUT_OF_STOCK,
    ORDER_CUSTOM, STATUS_CANCELLED, STATUS_INSTALLED,
)

DEFAULT_LOW_STOCK_THRESHOLD = 5


def stock_status(stock: int, threshold: int = DEFAULT_LOW_STOCK_THRESHOLD) -> str:
    """
    Status de estoque para exibição.
    O campo `status` gravado no produto é só um retrato da criação e não é usado aqui.
    """
    if stock <= 0:
        return OUT_OF_STOCK
    if stock <= threshold:
        return LOW_STOCK
    return IN_STOCK


def balance_due(order: Order) -> float:
    """Saldo a receber do pedido"""
    return order.total_price - order.paid_amount


def low_stock_products(products: Iterable[Product], threshold: int = DEFAULT_LOW_STOCK_THRESHOLD) -> List[Product]:
    """Produtos com estoque baixo (acima de zero e até o limite), ordenados por nome"""
    low = [p for p in products if stock_status(p.stock, threshold) == LOW_STOCK]
    return sorted(low, key=lambda p: p.name)


def _parse_date(value: str) -> Optional[date]:
    try:
        return date.fromisoformat(value[:10])
    except (TypeError, ValueError):
        return None


def compute_kpis(
    orders: List[Order],
    products: List[Product],
    today: Optional[date] = None,
    month_mode: str = "all",
) -> KPI:
    """
    Calcula os indicadores do painel.

    Args:
        orders: pedidos atuais
        products: produtos atuais
        today: data de referência (padrão: hoje)
        month_mode: "all" soma todos os pedidos não cancelados (comportamento herdado);
            "calendar" soma só os pedidos do mês corrente
    """
    today = today or date.today()
    today_iso = today.isoformat()

    valid = [o for o in orders if o.status != STATUS_CANCELLED]
    revenue_today = sum(o.paid_amount for o in valid if o.date == today_iso)

    if month_mode == "calendar":
        month_orders = []
        for o in valid:
            d = _parse_date(o.date)
            if d and d.year == today.year and d.month == today.month:
                month_orders.append(o)
    else:
        month_orders = valid
    revenue_month = sum(o.paid_amount for o in month_orders)

    active_custom = [
        o for o in orders
        if o.type == ORDER_CUSTOM and o.status not in (STATUS_INSTALLED, STATUS_CANCELLED)
    ]

    return KPI(
        revenue_today=revenue_today,
        revenue_month=revenue_month,
        total_orders=len(orders),
        active_custom_projects=len(active_custom),
        in_stock=len([p for p in products if p.stock > 0]),
        out_of_stock=len([p for p in products if p.stock <= 0]),
    )


def weekly_sales(orders: List[Order], today: Optional[date] = None) -> List[WeekdaySales]:
    """
    Valor recebido por dia nos últimos 7 dias (hoje incluído), do mais antigo ao mais recente.
    Pedidos cancelados ficam de fora.
    """
    today = today or date.today()
    days = [today - timedelta(days=offset) for offset in range(6, -1, -1)]
    series = {d.isoformat(): WeekdaySales(name=d.strftime("%a"), date=d.isoformat()) for d in days}

    for order in orders:
        if order.status == STATUS_CANCELLED:
            continue
        d = _parse_date(order.date)
        if d is None:
            continue
        bucket = series.get(d.isoformat())
        if bucket is not None:
            bucket.sales += order.paid_amount

    return [series[d.isoformat()] for d in days]
