"""
Testes do cliente da API: servidor real em porta efêmera e servidor inexistente
"""

import threading

import pytest
from werkzeug.serving import make_server

from core.api_client import ApiClient
from core.database import MemoryStore
from core.forms import build_product
from core.models import Customer
from core.services import DashboardController
from core.web_server import WebServer

# Porta 1 em localhost: conexão recusada na hora
UNREACHABLE = "http://127.0.0.1:1/api"


@pytest.fixture
def live():
    """Sobe a API Flask numa thread e devolve (cliente, store)"""
    server = WebServer(MemoryStore())
    httpd = make_server("127.0.0.1", 0, server.app, threaded=True)
    thread = threading.Thread(target=httpd.serve_forever, daemon=True)
    thread.start()
    api = ApiClient(f"http://127.0.0.1:{httpd.server_port}/api", simulated_delay=0)
    yield api, server.store
    httpd.shutdown()
    thread.join(5)


@pytest.fixture
def offline():
    return ApiClient(UNREACHABLE, health_timeout=0.5, request_timeout=0.5, simulated_delay=0)


def test_health_live(live):
    api, _ = live
    assert api.check_health() is True


def test_health_offline(offline):
    assert offline.check_health() is False


def test_reads_live_data(live):
    api, store = live
    store.delete_product("p4")

    result = api.get_products()

    assert result.ok
    assert result.source == "remote"
    assert not result.offline
    assert [p.id for p in result.data] == ["p1", "p2", "p3"]


def test_reads_fall_back_to_sample_data(offline):
    products = offline.get_products()
    orders = offline.get_orders()
    customers = offline.get_customers()

    assert products.ok is False
    assert products.source == "fallback"
    assert products.error
    assert [p.id for p in products.data] == ["p1", "p2", "p3", "p4"]
    assert [o.id for o in orders.data] == ["ord-1001", "ord-1002", "ord-1003"]
    assert customers.data[0].total_spent == 4500


def test_fallback_data_is_fresh_each_call(offline):
    first = offline.get_products().data
    first[0].stock = 0
    assert offline.get_products().data[0].stock == 12


def test_writes_reach_the_server(live):
    api, store = live
    product = build_product("Arch", price=1800, stock=4)

    created = api.create_product(product)
    assert created.ok
    assert created.data == product
    assert store.list_products()[0]["id"] == product.id

    assert api.delete_product(product.id).ok
    assert product.id not in [p["id"] for p in store.list_products()]

    updated = api.update_order_status("ord-1002", "Ready")
    assert updated.ok
    assert updated.data.status == "Ready"
    assert updated.data.total_price == 12000


def test_customer_upsert_live(live):
    api, store = live
    customer = Customer(id="c-x", name="Amine Benali", phone="+212 661-123456",
                        address="12 Bd Zerktouni", city="Casablanca",
                        total_spent=6000, order_count=3)

    result = api.create_or_update_customer(customer)

    assert result.ok
    assert result.data.id == "c1"
    assert len(store.list_customers()) == 3


def test_missing_order_is_rejected_not_simulated(live, monkeypatch):
    delays = []
    monkeypatch.setattr("core.api_client.time.sleep", delays.append)
    api, _ = live
    api.simulated_delay = 0.6

    result = api.update_order_status("ord-missing", "Ready")

    assert result.ok is False
    assert result.rejected
    assert not result.offline
    assert result.status == 404
    assert "Pedido não encontrado" in result.error
    assert result.data is None
    assert delays == []


def test_invalid_transition_is_rejected(live):
    api, store = live
    result = api.update_order_status("ord-1001", "New")

    assert result.source == "rejected"
    assert result.status == 409
    orders = {o["id"]: o for o in store.list_orders()}
    assert orders["ord-1001"]["status"] == "Completed"


def test_controller_does_not_retry_server_rejection(live):
    api, _ = live
    # Controlador permissivo, servidor com validação: a recusa vem do servidor
    controller = DashboardController(api, confirm=lambda message: True, enforce_status_transitions=False)
    controller.load()

    controller.update_order_status("ord-1001", "New")
    controller.wait_for_sync(5)

    assert controller.sync_failures == []
    assert [(f.operation, f.status) for f in controller.rejected_writes] == [("update_order_status", 409)]
    assert controller.retry_failed() == 0


def test_writes_are_simulated_offline(offline):
    product = build_product("Arch", price=1800, stock=4)

    result = offline.create_product(product)
    assert result.ok is False
    assert result.source == "simulated"
    assert result.data is product

    assert offline.delete_product("p1").source == "simulated"

    updated = offline.update_order_status("ord-1003", "Completed")
    assert updated.data.id == "ord-1003"
    assert updated.data.status == "Completed"
    assert offline.update_order_status("ord-unknown", "Ready").data is None


def test_simulated_write_waits(offline, monkeypatch):
    delays = []
    monkeypatch.setattr("core.api_client.time.sleep", delays.append)
    offline.simulated_delay = 0.6

    offline.create_product(build_product("Arch", price=1, stock=1))

    assert delays == [0.6]
