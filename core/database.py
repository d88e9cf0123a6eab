# database.py
# Armazenamento em memória do servidor (produtos, pedidos e clientes).
# Não há persistência: o estado volta aos dados de exemplo a cada reinício.

import copy
import threading
from typing import Any, Dict, List, Optional, Tuple

from core.models import check_transition
from core.sample_data import sample_customers, sample_orders, sample_products

Record = Dict[str, Any]


class MemoryStore:
    def __init__(self, seed: bool = True, enforce_status_transitions: bool = True):
        self.enforce_status_transitions = enforce_status_transitions
        # Um lock para o store inteiro: cada leitura-modificação-escrita é atômica
        self._lock = threading.Lock()
        self.products: List[Record] = sample_products() if seed else []
        self.orders: List[Record] = sample_orders() if seed else []
        self.customers: List[Record] = sample_customers() if seed else []

    # --- Produtos ---

    def list_products(self) -> List[Record]:
        with self._lock:
            return copy.deepcopy(self.products)

    def add_product(self, record: Record) -> Record:
        """Insere no início, sem validação (o id vem do cliente)"""
        with self._lock:
            self.products.insert(0, copy.deepcopy(record))
        return record

    def delete_product(self, product_id: str) -> int:
        """
        Remove todos os produtos com o id informado.
        Id inexistente não é erro.

        Returns:
            int: quantidade removida
        """
        with self._lock:
            before = len(self.products)
            self.products = [p for p in self.products if p.get("id") != product_id]
            return before - len(self.products)

    # --- Pedidos ---

    def list_orders(self) -> List[Record]:
        with self._lock:
            return copy.deepcopy(self.orders)

    def add_order(self, record: Record) -> Record:
        with self._lock:
            self.orders.insert(0, copy.deepcopy(record))
        return record

    def update_order(self, order_id: str, changes: Record) -> Optional[Record]:
        """
        Mescla (rasa) os campos informados no pedido.

        Returns:
            O pedido mesclado, ou None se não existir

        Raises:
            InvalidStatusTransition: se `status` mudar fora da tabela de transições
        """
        with self._lock:
            for i, order in enumerate(self.orders):
                if order.get("id") != order_id:
                    continue
                if self.enforce_status_transitions and "status" in changes:
                    check_transition(order.get("status", ""), changes["status"])
                merged = {**order, **changes}
                # O id da URL é a referência, não o do corpo
                merged["id"] = order_id
                self.orders[i] = merged
                return copy.deepcopy(merged)
        return None

    # --- Clientes ---

    def list_customers(self) -> List[Record]:
        with self._lock:
            return copy.deepcopy(self.customers)

    def upsert_customer(self, record: Record) -> Tuple[Record, bool]:
        """
        Cria ou atualiza cliente usando o telefone como chave.
        Na atualização os campos enviados substituem os gravados (sem somar);
        o cliente já manda totalSpent/orderCount acumulados. O id gravado é mantido.

        Returns:
            Tuple[Record, bool]: (registro resultante, criado)
        """
        phone = record.get("phone")
        with self._lock:
            for i, customer in enumerate(self.customers):
                if customer.get("phone") == phone:
                    merged = {**customer, **record}
                    merged["id"] = customer.get("id")
                    self.customers[i] = merged
                    return copy.deepcopy(merged), False
            self.customers.append(copy.deepcopy(record))
            return copy.deepcopy(record), True

    def reset(self) -> None:
        """Volta ao estado inicial (dados de exemplo)"""
        with self._lock:
            self.products = sample_products()
            self.orders = sample_orders()
            self.customers = sample_customers()
