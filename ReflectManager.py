# -*- coding: utf-8 -*-
# ReflectManager – Gestão de loja de espelhos (estoque, pedidos, clientes)
# -----------------------------------------------------
# Requisitos:
#   pip install -e .
#
# Observações:
# - O servidor guarda tudo em memória: reiniciou, voltou aos dados de exemplo.
# - O painel funciona mesmo sem servidor (modo offline com dados de exemplo).
#
# Como executar:
#   python ReflectManager.py server [--port 3001]
#   python ReflectManager.py dashboard

import argparse
import sys

from core.api_client import ApiClient
from core.config import get_settings
from core.logger import log_startup, setup_logging
from core.services import DashboardController


def format_money(value: float) -> str:
    return f"{value:,.2f} DH"


def run_server(settings: dict, port: int = None) -> None:
    from core.web_server import start_server
    start_server(
        host=settings["server_host"],
        port=port or int(settings["server_port"]),
        enforce_status_transitions=bool(settings["enforce_status_transitions"]),
    )


def run_dashboard(settings: dict) -> None:
    api = ApiClient(
        base_url=settings["api_base_url"],
        health_timeout=float(settings["health_timeout"]),
        request_timeout=float(settings["request_timeout"]),
        simulated_delay=float(settings["simulated_delay"]),
    )
    controller = DashboardController(
        api,
        low_stock_threshold=int(settings["low_stock_threshold"]),
        month_mode=settings["revenue_month_mode"],
        enforce_status_transitions=bool(settings["enforce_status_transitions"]),
    )
    controller.load()

    print("=" * 60)
    print("🪞 REFLECT MANAGER - PAINEL")
    print("=" * 60)
    if controller.offline_banner:
        print(f"📴 {controller.offline_banner}")
        print("=" * 60)

    kpi = controller.kpis()
    print(f"💰 Receita hoje:          {format_money(kpi.revenue_today)}")
    print(f"💰 Receita do mês:        {format_money(kpi.revenue_month)}")
    print(f"🧾 Total de pedidos:      {kpi.total_orders}")
    print(f"🛠️  Projetos sob medida:   {kpi.active_custom_projects}")
    print(f"📦 Em estoque:            {kpi.in_stock}")
    print(f"❌ Sem estoque:           {kpi.out_of_stock}")
    print("=" * 60)

    low = controller.low_stock_products()
    if low:
        names = ", ".join(f"{p.name}({p.stock})" for p in low)
        print(f"⚠️  Estoque baixo (≤ {controller.low_stock_threshold}): {names}")
    else:
        print("✅ Estoque OK")

    pending = [o for o in controller.orders if controller.balance_due(o) > 0]
    if pending:
        print("")
        print("📋 Saldos a receber:")
        for order in pending:
            print(f"   • {order.id} {order.customer_name}: {format_money(controller.balance_due(order))}")
    print("=" * 60)


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(prog="ReflectManager", description="Gestão de loja de espelhos")
    sub = parser.add_subparsers(dest="command")
    server_parser = sub.add_parser("server", help="inicia a API em memória")
    server_parser.add_argument("--port", type=int, default=None)
    sub.add_parser("dashboard", help="mostra os indicadores do painel")
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    log_path = setup_logging()
    log_startup(log_path)
    settings = get_settings()

    if args.command == "server":
        run_server(settings, args.port)
    else:
        run_dashboard(settings)
    return 0


if __name__ == "__main__":
    sys.exit(main())
