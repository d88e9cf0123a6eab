# config.py
# Configurações globais e leitura de YAML

from typing import Dict, Any, Optional
import yaml
import os
import sys

from core.logger import log_warning

# Valores usados quando a chave não existe no config.yaml
DEFAULTS: Dict[str, Any] = {
    "api_base_url": "http://localhost:3001/api",
    "health_timeout": 2.0,
    "request_timeout": 5.0,
    "simulated_delay": 0.6,
    "server_host": "0.0.0.0",
    "server_port": 3001,
    "low_stock_threshold": 5,
    "revenue_month_mode": "all",  # "all" ou "calendar"
    "enforce_status_transitions": True,
}

REVENUE_MONTH_MODES = ("all", "calendar")


def get_app_data_directory() -> str:
    """
    Retorna o diretório de dados da aplicação.
    No Windows usa o AppData local; nos demais sistemas ~/.reflectmanager
    """
    if sys.platform == 'win32':
        base = os.getenv('LOCALAPPDATA', os.path.expanduser("~"))
        return os.path.join(base, "ReflectManager")
    return os.path.expanduser("~/.reflectmanager")


def get_config_path() -> str:
    """Caminho do config.yaml (REFLECT_CONFIG tem prioridade)"""
    env_path = os.getenv("REFLECT_CONFIG")
    if env_path:
        return env_path
    return os.path.join(get_app_data_directory(), 'config.yaml')


def load_config(path: Optional[str] = None) -> Dict[str, Any]:
    """
    Carrega as configurações do arquivo YAML.

    Returns:
        Dict[str, Any]: Dicionário com as configurações (vazio se não existir)
    """
    path = path or get_config_path()
    if not os.path.exists(path):
        return {}
    with open(path, 'r', encoding='utf-8') as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        log_warning(f"⚠️ Configuração inválida em {path}, usando padrões")
        return {}
    return data


def save_config(data: Dict[str, Any], path: Optional[str] = None) -> None:
    """
    Salva as configurações no arquivo YAML.

    Args:
        data: Dicionário com as configurações para salvar
    """
    path = path or get_config_path()
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)
    with open(path, 'w', encoding='utf-8') as f:
        yaml.safe_dump(data, f, allow_unicode=True)


def get_settings(path: Optional[str] = None) -> Dict[str, Any]:
    """Configuração efetiva: arquivo do usuário sobre DEFAULTS"""
    settings = dict(DEFAULTS)
    settings.update(load_config(path))

    if settings["revenue_month_mode"] not in REVENUE_MONTH_MODES:
        log_warning(f"⚠️ revenue_month_mode desconhecido: {settings['revenue_month_mode']}, usando 'all'")
        settings["revenue_month_mode"] = "all"
    return settings


def set_low_stock_threshold(value: int, path: Optional[str] = None) -> None:
    """
    Salva o limite de estoque baixo nas configurações.

    Raises:
        ValueError: se o valor for negativo
    """
    value = int(value)
    if value < 0:
        raise ValueError("Limite de estoque baixo não pode ser negativo")
    config = load_config(path)
    config["low_stock_threshold"] = value
    save_config(config, path)
