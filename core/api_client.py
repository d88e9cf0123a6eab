# api_client.py
"""
Cliente da API da loja
Toda chamada de rede passa por aqui. Se o servidor não responder:
- leituras devolvem os dados de exemplo (fallback)
- escritas esperam um pouco e "confirmam" com o próprio dado enviado
Se o servidor responder com erro HTTP a escrita foi recusada: nada é simulado.
Nenhum método deixa escapar exceção de rede; o resultado diz de onde veio o dado.
"""

import http.client
import json
import socket
import time
import urllib.error
import urllib.parse
import urllib.request
from dataclasses import dataclass
from typing import Any, Callable, Generic, List, Optional, TypeVar

from core.logger import log_event, log_warning
from core.models import Customer, Order, Product
from core.sample_data import sample_customers, sample_orders, sample_products

T = TypeVar("T")

SOURCE_REMOTE = "remote"
SOURCE_FALLBACK = "fallback"
SOURCE_SIMULATED = "simulated"
SOURCE_REJECTED = "rejected"  # servidor respondeu com erro HTTP


@dataclass
class ApiResult(Generic[T]):
    """Resultado de uma chamada: dado + procedência"""
    data: T
    ok: bool
    source: str = SOURCE_REMOTE
    error: Optional[str] = None
    status: Optional[int] = None  # código HTTP quando recusado

    @property
    def offline(self) -> bool:
        return self.source in (SOURCE_FALLBACK, SOURCE_SIMULATED)

    @property
    def rejected(self) -> bool:
        return self.source == SOURCE_REJECTED


class ApiError(Exception):
    """Falha de comunicação com o servidor (rede, HTTP ou resposta inválida)"""


class ApiRejected(ApiError):
    """O servidor respondeu, mas recusou a requisição (4xx): reenviar não adianta"""

    def __init__(self, status: int, message: str):
        super().__init__(f"Erro HTTP {status}: {message}")
        self.status = status


def _http_error_message(error: urllib.error.HTTPError) -> str:
    """Mensagem do corpo `{"error": ...}` da API, ou o motivo HTTP"""
    try:
        body = json.loads(error.read().decode("utf-8"))
    except (OSError, ValueError):
        return str(error.reason)
    if isinstance(body, dict) and body.get("error"):
        return str(body["error"])
    return str(error.reason)


class ApiClient:
    def __init__(
        self,
        base_url: str = "http://localhost:3001/api",
        health_timeout: float = 2.0,
        request_timeout: float = 5.0,
        simulated_delay: float = 0.6,
    ):
        self.base_url = base_url.rstrip("/")
        self.health_timeout = health_timeout
        self.request_timeout = request_timeout
        self.simulated_delay = simulated_delay

    # --- HTTP ---

    def _url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    def _request(self, method: str, path: str, body: Any = None, timeout: Optional[float] = None) -> Any:
        """
        Executa a requisição e devolve o JSON decodificado.

        Raises:
            ApiRejected: o servidor recusou (status 4xx)
            ApiError: falha de rede, timeout, erro 5xx ou JSON inválido
        """
        headers = {"Accept": "application/json"}
        payload = None
        if body is not None:
            payload = json.dumps(body).encode("utf-8")
            headers["Content-Type"] = "application/json"

        req = urllib.request.Request(self._url(path), data=payload, headers=headers, method=method)
        timeout = timeout if timeout is not None else self.request_timeout

        try:
            with urllib.request.urlopen(req, timeout=timeout) as response:
                raw = response.read().decode("utf-8")
        except urllib.error.HTTPError as e:
            message = _http_error_message(e)
            if 400 <= e.code < 500:
                raise ApiRejected(e.code, message) from e
            raise ApiError(f"Erro HTTP {e.code}: {message}") from e
        except urllib.error.URLError as e:
            raise ApiError(f"Erro de conexão: {e.reason}") from e
        except socket.timeout as e:
            raise ApiError(f"Tempo limite excedido ({timeout}s)") from e
        except (OSError, http.client.HTTPException) as e:
            raise ApiError(f"Erro de comunicação: {e}") from e

        if not raw:
            return None
        try:
            return json.loads(raw)
        except json.JSONDecodeError as e:
            raise ApiError("Resposta inválida do servidor") from e

    def _simulate(self, data: T, error: str) -> ApiResult[T]:
        """Escrita offline: espera o atraso simulado e devolve o dado enviado"""
        if self.simulated_delay > 0:
            time.sleep(self.simulated_delay)
        return ApiResult(data=data, ok=False, source=SOURCE_SIMULATED, error=error)

    def _rejected(self, data: T, error: ApiRejected, what: str) -> ApiResult[T]:
        """Escrita recusada pelo servidor: sem atraso simulado e sem fingir sucesso"""
        log_warning(f"🚫 Servidor recusou {what}: {error}")
        return ApiResult(data=data, ok=False, source=SOURCE_REJECTED, error=str(error), status=error.status)

    def _read_collection(self, path: str, parse: Callable[[dict], T], fallback: Callable[[], List[dict]], label: str) -> ApiResult[List[T]]:
        try:
            rows = self._request("GET", path)
            if not isinstance(rows, list):
                raise ApiError("Resposta não é uma lista")
            return ApiResult(data=[parse(r) for r in rows], ok=True)
        except (ApiError, KeyError, TypeError, ValueError) as e:
            log_warning(f"⚠️ Servidor indisponível, usando {label} de exemplo ({e})")
            return ApiResult(
                data=[parse(r) for r in fallback()],
                ok=False,
                source=SOURCE_FALLBACK,
                error=str(e),
            )

    # --- Saúde ---

    def check_health(self) -> bool:
        """Servidor respondeu dentro do timeout curto? Sem novas tentativas."""
        try:
            self._request("GET", "health", timeout=self.health_timeout)
            return True
        except ApiError as e:
            log_warning(f"⚠️ Verificação de saúde falhou: {e}")
            return False

    # --- Produtos ---

    def get_products(self) -> ApiResult[List[Product]]:
        return self._read_collection("products", Product.from_dict, sample_products, "produtos")

    def create_product(self, product: Product) -> ApiResult[Product]:
        try:
            data = self._request("POST", "products", product.to_dict())
            return ApiResult(data=Product.from_dict(data), ok=True)
        except ApiRejected as e:
            return self._rejected(product, e, f"a criação do produto {product.id}")
        except (ApiError, KeyError, TypeError, ValueError) as e:
            log_warning(f"⚠️ Servidor indisponível, simulando criação do produto {product.id}")
            return self._simulate(product, str(e))

    def delete_product(self, product_id: str) -> ApiResult[None]:
        try:
            self._request("DELETE", f"products/{urllib.parse.quote(product_id, safe='')}")
            return ApiResult(data=None, ok=True)
        except ApiRejected as e:
            return self._rejected(None, e, f"a exclusão do produto {product_id}")
        except ApiError as e:
            log_warning(f"⚠️ Servidor indisponível, simulando exclusão do produto {product_id}")
            return self._simulate(None, str(e))

    # --- Pedidos ---

    def get_orders(self) -> ApiResult[List[Order]]:
        return self._read_collection("orders", Order.from_dict, sample_orders, "pedidos")

    def create_order(self, order: Order) -> ApiResult[Order]:
        try:
            data = self._request("POST", "orders", order.to_dict())
            return ApiResult(data=Order.from_dict(data), ok=True)
        except ApiRejected as e:
            return self._rejected(order, e, f"o pedido {order.id}")
        except (ApiError, KeyError, TypeError, ValueError) as e:
            log_warning(f"⚠️ Servidor indisponível, simulando criação do pedido {order.id}")
            return self._simulate(order, str(e))

    def update_order_status(self, order_id: str, status: str) -> ApiResult[Optional[Order]]:
        try:
            data = self._request("PUT", f"orders/{urllib.parse.quote(order_id, safe='')}", {"status": status})
            log_event(f"Pedido {order_id} atualizado no servidor: {status}")
            return ApiResult(data=Order.from_dict(data), ok=True)
        except ApiRejected as e:
            return self._rejected(None, e, f"o status {status} do pedido {order_id}")
        except (ApiError, KeyError, TypeError, ValueError) as e:
            log_warning(f"⚠️ Servidor indisponível, simulando atualização do pedido {order_id}")
            mock = next((o for o in sample_orders() if o["id"] == order_id), None)
            if mock is not None:
                mock["status"] = status
                return self._simulate(Order.from_dict(mock), str(e))
            return self._simulate(None, str(e))

    # --- Clientes ---

    def get_customers(self) -> ApiResult[List[Customer]]:
        return self._read_collection("customers", Customer.from_dict, sample_customers, "clientes")

    def create_or_update_customer(self, customer: Customer) -> ApiResult[Customer]:
        try:
            data = self._request("POST", "customers", customer.to_dict())
            return ApiResult(data=Customer.from_dict(data), ok=True)
        except ApiRejected as e:
            return self._rejected(customer, e, f"o cliente {customer.phone}")
        except (ApiError, KeyError, TypeError, ValueError) as e:
            log_warning(f"⚠️ Servidor indisponível, simulando gravação do cliente {customer.phone}")
            return self._simulate(customer, str(e))
