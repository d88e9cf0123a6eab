# services.py
# Camada de serviços: estado do painel e atualização otimista

import threading
from concurrent.futures import Future, ThreadPoolExecutor, wait
from dataclasses import dataclass, field, replace
from datetime import date, datetime
from typing import Callable, Dict, List, Optional

from core import analytics
from core.api_client import ApiClient, ApiResult
from core.logger import log_error, log_event, log_warning
from core.models import (
    KPI, Customer, Order, Product, WeekdaySales,
    ORDER_STATUSES, check_transition,
)

OFFLINE_BANNER = "Offline Mode (Mock Data)"


@dataclass
class SyncFailure:
    """Escrita que não chegou ao servidor ou foi recusada (a mudança local foi mantida)"""
    operation: str
    args: tuple
    error: Optional[str]
    status: Optional[int] = None  # código HTTP quando o servidor recusou
    at: datetime = field(default_factory=datetime.now)


def ask_terminal(message: str) -> bool:
    """Confirmação interativa padrão"""
    answer = input(f"{message} [s/N] ")
    return answer.strip().lower() in ("s", "sim", "y", "yes")


class DashboardController:
    """
    Dono das cópias locais de produtos, pedidos e clientes.

    Toda ação do usuário altera o estado local primeiro e só depois dispara a
    escrita no servidor, sem esperar. As escritas rodam em um único worker, na
    ordem em que foram feitas. Falha remota nunca desfaz a mudança local: falta
    de conexão vai para `sync_failures` e pode ser reenviada com `retry_failed()`;
    recusa do servidor (4xx) vai para `rejected_writes` e não é reenviada.
    """

    def __init__(
        self,
        api: ApiClient,
        low_stock_threshold: int = analytics.DEFAULT_LOW_STOCK_THRESHOLD,
        confirm: Optional[Callable[[str], bool]] = None,
        month_mode: str = "all",
        enforce_status_transitions: bool = True,
    ):
        self.api = api
        self.confirm = confirm or ask_terminal
        self.month_mode = month_mode
        self.enforce_status_transitions = enforce_status_transitions
        self.low_stock_threshold = low_stock_threshold

        self.products: List[Product] = []
        self.orders: List[Order] = []
        self.customers: List[Customer] = []
        self.selected_order: Optional[Order] = None  # cópia aberta na tela de detalhes

        self.is_backend_connected = True
        self.sources: Dict[str, str] = {}
        self.sync_failures: List[SyncFailure] = []
        self.rejected_writes: List[SyncFailure] = []

        self._writer = ThreadPoolExecutor(max_workers=1, thread_name_prefix="reflect-sync")
        self._pending: List[Future] = []
        self._sync_lock = threading.Lock()

    # --- Carga inicial ---

    def load(self) -> None:
        """Verifica o servidor e busca as três coleções em paralelo (uma única vez)"""
        self.is_backend_connected = self.api.check_health()
        if not self.is_backend_connected:
            log_warning("⚠️ Servidor fora do ar: trabalhando com dados de exemplo")

        with ThreadPoolExecutor(max_workers=3) as pool:
            products_future = pool.submit(self.api.get_products)
            orders_future = pool.submit(self.api.get_orders)
            customers_future = pool.submit(self.api.get_customers)
            products = products_future.result()
            orders = orders_future.result()
            customers = customers_future.result()

        self.products = products.data
        self.orders = orders.data
        self.customers = customers.data
        self.sources = {
            "products": products.source,
            "orders": orders.source,
            "customers": customers.source,
        }
        log_event(
            f"Dados carregados: {len(self.products)} produtos, "
            f"{len(self.orders)} pedidos, {len(self.customers)} clientes"
        )

    @property
    def offline_banner(self) -> Optional[str]:
        return None if self.is_backend_connected else OFFLINE_BANNER

    # --- Sincronização em segundo plano ---

    def _dispatch(self, operation: str, *args) -> Future:
        """
        Enfileira a escrita remota sem bloquear o chamador.
        Um único worker executa as escritas na ordem em que foram enfileiradas.
        """
        future = self._writer.submit(self._run_sync, operation, args)
        with self._sync_lock:
            self._pending = [f for f in self._pending if not f.done()]
            self._pending.append(future)
        return future

    def _run_sync(self, operation: str, args: tuple) -> None:
        try:
            result: ApiResult = getattr(self.api, operation)(*args)
        except Exception as e:
            # O cliente não deveria lançar; se lançar, registra como falha de sincronização
            log_error(f"❌ Erro inesperado em {operation}", e)
            self._record_failure(operation, args, str(e))
            return
        if result.rejected:
            log_warning(f"🚫 Escrita recusada pelo servidor ({operation}): {result.error}")
            with self._sync_lock:
                self.rejected_writes.append(SyncFailure(operation, args, result.error, result.status))
        elif not result.ok:
            self._record_failure(operation, args, result.error)

    def _record_failure(self, operation: str, args: tuple, error: Optional[str]) -> None:
        log_warning(f"⚠️ Escrita não sincronizada ({operation}): {error}")
        with self._sync_lock:
            self.sync_failures.append(SyncFailure(operation, args, error))

    def wait_for_sync(self, timeout: Optional[float] = None) -> bool:
        """
        Aguarda as escritas em andamento.

        Returns:
            bool: True se todas terminaram dentro do timeout
        """
        with self._sync_lock:
            pending = list(self._pending)
        _, not_done = wait(pending, timeout)
        return not not_done

    def _retry_args(self, failure: SyncFailure, seen_phones: set) -> Optional[tuple]:
        """Argumentos do reenvio, ou None se a falha já está coberta por outra"""
        if failure.operation != "create_or_update_customer":
            return failure.args
        phone = failure.args[0].phone
        if phone in seen_phones:
            return None
        seen_phones.add(phone)
        # O servidor substitui os totais: manda o cliente local atual, não o retrato antigo
        current = self.find_customer_by_phone(phone)
        return (replace(current),) if current is not None else failure.args

    def retry_failed(self) -> int:
        """
        Reenvia as escritas que falharam por falta de conexão.
        Escritas recusadas pelo servidor (`rejected_writes`) não são reenviadas.
        Os reenvios entram na mesma fila das escritas novas, na ordem original.

        Returns:
            int: quantas escritas foram disparadas
        """
        with self._sync_lock:
            pending = self.sync_failures
            self.sync_failures = []

        seen_phones: set = set()
        sent = 0
        for failure in pending:
            args = self._retry_args(failure, seen_phones)
            if args is None:
                continue
            self._dispatch(failure.operation, *args)
            sent += 1
        if sent:
            log_event(f"🔄 Reenviando {sent} escrita(s) pendente(s)")
        return sent

    # --- Ações ---

    def find_customer_by_phone(self, phone: str) -> Optional[Customer]:
        return next((c for c in self.customers if c.phone == phone), None)

    def add_custom_order(self, order: Order, customer: Customer) -> Customer:
        """
        Registra o pedido e atualiza/cria o cliente localmente, depois sincroniza.

        Returns:
            Customer: o cliente local resultante (existente somado ou novo)
        """
        self.orders.insert(0, order)

        existing = self.find_customer_by_phone(customer.phone)
        if existing is None:
            self.customers.append(customer)
            resolved = customer
        else:
            existing.total_spent += order.total_price
            existing.order_count += 1
            order.customer_id = existing.id
            order.customer_name = existing.name
            resolved = existing

        # Cópias: a thread envia o retrato do momento, não o objeto vivo
        self._dispatch("create_or_update_customer", replace(resolved))
        self._dispatch("create_order", replace(order))
        return resolved

    def add_product(self, product: Product) -> None:
        self.products.insert(0, product)
        self._dispatch("create_product", replace(product))

    def delete_product(self, product_id: str) -> bool:
        """
        Remove o produto após confirmação.

        Returns:
            bool: False se o usuário cancelou
        """
        if not self.confirm("Are you sure you want to delete this product?"):
            return False
        self.products = [p for p in self.products if p.id != product_id]
        self._dispatch("delete_product", product_id)
        return True

    def update_order_status(self, order_id: str, status: str) -> Optional[Order]:
        """
        Troca o status do pedido local (e da cópia em detalhe) e sincroniza.

        Returns:
            O pedido atualizado, ou None se não existir localmente

        Raises:
            ValueError: status desconhecido
            InvalidStatusTransition: transição fora da tabela (se a validação estiver ativa)
        """
        if status not in ORDER_STATUSES:
            raise ValueError(f"Status desconhecido: {status}")

        order = next((o for o in self.orders if o.id == order_id), None)
        if order is None:
            log_warning(f"⚠️ Pedido {order_id} não encontrado no estado local")
            return None

        if self.enforce_status_transitions:
            check_transition(order.status, status)

        order.status = status
        if self.selected_order is not None and self.selected_order.id == order_id:
            self.selected_order.status = status

        self._dispatch("update_order_status", order_id, status)
        return order

    def open_order(self, order_id: str) -> Optional[Order]:
        order = next((o for o in self.orders if o.id == order_id), None)
        self.selected_order = replace(order) if order is not None else None
        return self.selected_order

    def close_order(self) -> None:
        self.selected_order = None

    # --- Estado derivado ---

    def set_low_stock_threshold(self, value: int) -> None:
        value = int(value)
        if value < 0:
            raise ValueError("Limite de estoque baixo não pode ser negativo")
        self.low_stock_threshold = value

    def stock_status(self, product: Product) -> str:
        return analytics.stock_status(product.stock, self.low_stock_threshold)

    def low_stock_products(self) -> List[Product]:
        return analytics.low_stock_products(self.products, self.low_stock_threshold)

    def balance_due(self, order: Order) -> float:
        return analytics.balance_due(order)

    def kpis(self, today: Optional[date] = None) -> KPI:
        return analytics.compute_kpis(self.orders, self.products, today, self.month_mode)

    def weekly_sales(self, today: Optional[date] = None) -> List[WeekdaySales]:
        return analytics.weekly_sales(self.orders, today)
