# logger.py
# Logger da aplicação (arquivo diário + console)

import logging
import os
import sys
from datetime import datetime
from typing import Optional

LOGGER_NAME = "reflectmanager"
LOG_FORMAT = '%(asctime)s [%(levelname)s] %(message)s'

logger = logging.getLogger(LOGGER_NAME)


def get_log_dir() -> str:
    """Retorna o diretório de logs do usuário"""
    if sys.platform == 'win32':
        app_data = os.getenv('LOCALAPPDATA', os.getenv('APPDATA', ''))
        if app_data:
            return os.path.join(app_data, 'ReflectManager', 'logs')
    return os.path.expanduser('~/.reflectmanager/logs')


def setup_logging(level: int = logging.INFO, log_dir: Optional[str] = None) -> str:
    """
    Instala os handlers de arquivo e console no logger da aplicação.
    Chamado uma vez pelo ponto de entrada; bibliotecas e testes só usam os helpers.

    Returns:
        str: caminho do arquivo de log do dia
    """
    log_dir = log_dir or get_log_dir()
    os.makedirs(log_dir, exist_ok=True)
    log_path = os.path.join(log_dir, f'reflectmanager_{datetime.now().strftime("%Y%m%d")}.log')

    logger.setLevel(level)
    # Evita handlers duplicados se for chamado de novo
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    file_handler = logging.FileHandler(log_path, encoding='utf-8')
    file_handler.setFormatter(logging.Formatter(LOG_FORMAT, '%Y-%m-%d %H:%M:%S'))
    logger.addHandler(file_handler)

    # Saída no console para acompanhar o servidor
    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter(LOG_FORMAT, '%H:%M:%S'))
    logger.addHandler(console_handler)

    return log_path


def log_event(msg: str):
    """Registra evento informativo"""
    logger.info(msg)


def log_error(msg: str, exc: Exception = None):
    """Registra erro com traceback opcional"""
    if exc:
        logger.error(f"{msg}: {str(exc)}", exc_info=True)
    else:
        logger.error(msg)


def log_warning(msg: str):
    """Registra aviso"""
    logger.warning(msg)


def log_debug(msg: str):
    """Registra mensagem de debug"""
    logger.debug(msg)


def log_startup(log_path: str = ""):
    """Registra informações de inicialização do sistema"""
    logger.info("=" * 60)
    logger.info("REFLECT MANAGER - SISTEMA INICIADO")
    logger.info("=" * 60)
    logger.info(f"Versão Python: {sys.version}")
    logger.info(f"Sistema Operacional: {sys.platform}")
    if log_path:
        logger.info(f"Arquivo de log: {log_path}")
    logger.info("=" * 60)
