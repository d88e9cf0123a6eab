"""
Servidor Web Flask (API em memória)
===================================
Expõe produtos, pedidos e clientes do MemoryStore via REST/JSON
"""

from flask import Flask, jsonify, request
from flask_cors import CORS
from werkzeug.exceptions import HTTPException
import logging
import socket
from typing import Optional

from core.database import MemoryStore
from core.models import InvalidStatusTransition

logger = logging.getLogger("reflectmanager.web_server")


class WebServer:
    """Servidor web Flask com a API da loja"""

    def __init__(self, store: Optional[MemoryStore] = None, host: str = '0.0.0.0', port: int = 3001):
        """
        Inicializa o servidor web

        Args:
            store: Armazenamento em memória (padrão: novo store com dados de exemplo)
            host: Interface de escuta
            port: Porta para o servidor (padrão: 3001)
        """
        self.store = store if store is not None else MemoryStore()
        self.host = host
        self.port = port
        self.app = Flask(__name__)
        CORS(self.app)  # Permite requisições de qualquer origem

        # Configurar rotas
        self._setup_routes()

    def _setup_routes(self):
        """Configura as rotas da API"""
        store = self.store

        def json_body():
            data = request.get_json(silent=True)
            if not isinstance(data, dict):
                return None
            return data

        def bad_request():
            return jsonify({
                'success': False,
                'error': 'Corpo da requisição deve ser um objeto JSON'
            }), 400

        @self.app.errorhandler(Exception)
        def handle_unexpected(e):
            """Erros inesperados viram 500 com a mesma forma das demais respostas"""
            if isinstance(e, HTTPException):
                return e
            logger.error(f"Erro na API {request.method} {request.path}: {e}", exc_info=True)
            return jsonify({
                'success': False,
                'error': str(e)
            }), 500

        # API: Verificação de saúde
        @self.app.route('/api/health', methods=['GET'])
        def health():
            return jsonify({'status': 'ok'})

        # API: Produtos
        @self.app.route('/api/products', methods=['GET'])
        def get_products():
            """Retorna a lista completa de produtos"""
            return jsonify(store.list_products())

        @self.app.route('/api/products', methods=['POST'])
        def create_product():
            """Grava o produto como recebido (id gerado pelo cliente)"""
            data = json_body()
            if data is None:
                return bad_request()
            store.add_product(data)
            logger.info(f"✅ Produto criado: {data.get('name', '?')} ({data.get('id')})")
            return jsonify(data), 201

        @self.app.route('/api/products/<string:product_id>', methods=['DELETE'])
        def delete_product(product_id):
            """Remove o produto; id inexistente também responde sucesso"""
            removed = store.delete_product(product_id)
            if removed:
                logger.info(f"🗑️ Produto removido: {product_id}")
            return jsonify({'message': 'Deleted'}), 200

        # API: Pedidos
        @self.app.route('/api/orders', methods=['GET'])
        def get_orders():
            return jsonify(store.list_orders())

        @self.app.route('/api/orders', methods=['POST'])
        def create_order():
            data = json_body()
            if data is None:
                return bad_request()
            store.add_order(data)
            logger.info(f"✅ Pedido criado: {data.get('id')} ({data.get('type', '?')})")
            return jsonify(data), 201

        @self.app.route('/api/orders/<string:order_id>', methods=['PUT'])
        def update_order(order_id):
            """Mescla os campos enviados no pedido (ex.: {"status": "Ready"})"""
            data = json_body()
            if data is None:
                return bad_request()

            try:
                merged = store.update_order(order_id, data)
            except InvalidStatusTransition as e:
                return jsonify({
                    'success': False,
                    'error': str(e)
                }), 409

            if merged is None:
                return jsonify({
                    'success': False,
                    'error': 'Pedido não encontrado'
                }), 404

            if 'status' in data:
                logger.info(f"✅ Pedido {order_id} → {data['status']}")
            return jsonify(merged)

        # API: Clientes
        @self.app.route('/api/customers', methods=['GET'])
        def get_customers():
            return jsonify(store.list_customers())

        @self.app.route('/api/customers', methods=['POST'])
        def save_customer():
            """Cria o cliente ou atualiza o existente com o mesmo telefone"""
            data = json_body()
            if data is None:
                return bad_request()
            record, created = store.upsert_customer(data)
            if created:
                logger.info(f"✅ Cliente criado: {record.get('name', '?')}")
                return jsonify(record), 201
            logger.info(f"🔄 Cliente atualizado: {record.get('name', '?')}")
            return jsonify(record), 200

    def get_local_ip(self) -> str:
        """Retorna o IP local da máquina"""
        try:
            # Conectar a um endereço externo para descobrir o IP local
            s = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
            s.connect(("8.8.8.8", 80))
            local_ip = s.getsockname()[0]
            s.close()
            return local_ip
        except Exception:
            return "127.0.0.1"

    def run(self, debug: bool = False):
        """
        Inicia o servidor Flask

        Args:
            debug: Modo debug (padrão: False)
        """
        local_ip = self.get_local_ip()

        print("=" * 60)
        print("🌐 SERVIDOR DA API INICIADO")
        print("=" * 60)
        print(f"📱 Acesso Local:  http://localhost:{self.port}/api")
        print(f"🌍 Acesso Rede:   http://{local_ip}:{self.port}/api")
        print("⚠️  Dados em memória: tudo volta ao exemplo quando o servidor reinicia")
        print("=" * 60)

        self.app.run(
            host=self.host,
            port=self.port,
            debug=debug,
            use_reloader=False  # Importante: o reloader criaria um segundo store
        )


def start_server(host: str = '0.0.0.0', port: int = 3001, enforce_status_transitions: bool = True):
    """
    Função helper para criar o store e iniciar o servidor

    Args:
        host: Interface de escuta
        port: Porta do servidor
        enforce_status_transitions: valida mudanças de status dos pedidos
    """
    try:
        print(f"🔧 Configurando servidor Flask...")
        print(f"   - Porta: {port}")
        print(f"   - Validação de status: {'ativa' if enforce_status_transitions else 'desligada'}")

        store = MemoryStore(enforce_status_transitions=enforce_status_transitions)
        server = WebServer(store, host, port)
        print(f"✅ Servidor Flask configurado")
        print(f"🚀 Iniciando servidor na porta {port}...")
        server.run()
    except Exception as e:
        print(f"❌ ERRO CRÍTICO no servidor Flask: {e}")
        import traceback
        traceback.print_exc()
        raise
