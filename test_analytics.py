"""
Testes do estado derivado (status de estoque, KPIs, saldo devedor)
"""

from datetime import date

import pytest

from core.analytics import balance_due, compute_kpis, low_stock_products, stock_status, weekly_sales
from core.models import Order, Product


def make_product(pid, stock, name=None):
    return Product(
        id=pid, name=name or pid, image="", type="Wall Mirror", shape="Round",
        dimensions="50cm", price=100, stock=stock,
    )


def make_order(oid, status="New", type="Standard", day="2024-05-20", total=1000, paid=1000):
    return Order(
        id=oid, customer_id="c1", customer_name="Cliente", type=type, date=day,
        total_price=total, paid_amount=paid, status=status,
    )


@pytest.mark.parametrize("stock, expected", [
    (0, "Out of Stock"),
    (1, "Low Stock"),
    (3, "Low Stock"),
    (5, "Low Stock"),
    (6, "In Stock"),
    (40, "In Stock"),
])
def test_stock_status_default_threshold(stock, expected):
    assert stock_status(stock, 5) == expected


def test_stock_status_follows_threshold():
    assert stock_status(8, 10) == "Low Stock"
    assert stock_status(8, 2) == "In Stock"
    # Limite zero: só existe "sem estoque" e "em estoque"
    assert stock_status(1, 0) == "In Stock"
    assert stock_status(0, 0) == "Out of Stock"


def test_stock_status_ignores_persisted_snapshot():
    product = make_product("p1", 2)
    product.status = "In Stock"  # retrato antigo gravado na criação
    assert stock_status(product.stock, 5) == "Low Stock"


def test_balance_due_recomputed_after_payment():
    order = make_order("o1", total=12000, paid=6000)
    assert balance_due(order) == 6000
    order.paid_amount = 9000
    assert balance_due(order) == 3000


def test_active_custom_projects_excludes_installed_and_cancelled():
    orders = [
        make_order("o1", status="New", type="Custom Project"),
        make_order("o2", status="Installed", type="Custom Project"),
        make_order("o3", status="In Production", type="Custom Project"),
        make_order("o4", status="Cancelled", type="Custom Project"),
        make_order("o5", status="New", type="Standard"),
    ]
    assert compute_kpis(orders, []).active_custom_projects == 2


def test_kpis_revenue_and_counts():
    today = date(2024, 5, 20)
    orders = [
        make_order("o1", day="2024-05-20", paid=500),
        make_order("o2", day="2024-05-20", paid=300, status="Cancelled"),
        make_order("o3", day="2024-05-02", paid=1000),
        make_order("o4", day="2023-10-25", paid=1500),
    ]
    products = [make_product("p1", 0), make_product("p2", 3), make_product("p3", 12)]

    kpi = compute_kpis(orders, products, today=today)

    assert kpi.revenue_today == 500
    # Modo herdado: soma todos os pedidos não cancelados, de qualquer data
    assert kpi.revenue_month == 3000
    assert kpi.total_orders == 4
    assert kpi.in_stock == 2
    assert kpi.out_of_stock == 1


def test_kpis_calendar_month_mode():
    today = date(2024, 5, 20)
    orders = [
        make_order("o1", day="2024-05-20", paid=500),
        make_order("o2", day="2024-05-02", paid=1000),
        make_order("o3", day="2024-04-30", paid=700),
        make_order("o4", day="sem data", paid=50),
    ]
    assert compute_kpis(orders, [], today=today, month_mode="calendar").revenue_month == 1500


def test_negative_stock_counts_as_out_of_stock():
    # O servidor grava o corpo sem validar: estoque negativo pode chegar
    products = [make_product("p1", -1), make_product("p2", 0), make_product("p3", 4)]
    kpi = compute_kpis([], products)

    assert stock_status(-1, 5) == "Out of Stock"
    assert kpi.out_of_stock == 2
    assert kpi.in_stock == 1


def test_kpis_to_dict_uses_wire_names():
    data = compute_kpis([], []).to_dict()
    assert set(data) == {
        "revenueToday", "revenueMonth", "totalOrders",
        "activeCustomProjects", "inStock", "outOfStock",
    }


def test_low_stock_products_sorted_by_name():
    products = [
        make_product("p1", 2, "Zeta"),
        make_product("p2", 0, "Alpha"),
        make_product("p3", 4, "Beta"),
        make_product("p4", 9, "Gamma"),
    ]
    assert [p.name for p in low_stock_products(products, 5)] == ["Beta", "Zeta"]


def test_weekly_sales_last_seven_days():
    today = date(2024, 5, 20)  # segunda-feira
    orders = [
        make_order("o1", day="2024-05-20", paid=400),
        make_order("o2", day="2024-05-20", paid=100),
        make_order("o3", day="2024-05-14", paid=250),
        make_order("o4", day="2024-05-13", paid=999),  # fora da janela
        make_order("o5", day="2024-05-18", paid=800, status="Cancelled"),
    ]

    series = weekly_sales(orders, today=today)

    assert [d.date for d in series][0] == "2024-05-14"
    assert series[-1].date == "2024-05-20"
    assert series[-1].name == "Mon"
    assert series[-1].sales == 500
    assert series[0].sales == 250
    assert sum(d.sales for d in series) == 750
