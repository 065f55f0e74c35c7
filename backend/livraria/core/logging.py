"""
Configuração de logging da aplicação.

Nível via LOG_LEVEL. Formato: timestamp | nível | logger | mensagem.
Com DEBUG=true o SQL emitido pelo SQLAlchemy também é registrado.
"""

import logging
import sys
from typing import Optional

from livraria.core.config import get_settings

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Loggers de terceiros que só interessam em WARNING ou acima
NOISY_LOGGERS = ("uvicorn.access", "aiosqlite", "asyncio")


def setup_logging(level: Optional[str] = None) -> None:
    """
    Configura o logger raiz com saída em stdout.

    Args:
        level: Nível de logging. Se não fornecido, usa LOG_LEVEL do .env
    """
    settings = get_settings()
    log_level = (level or settings.LOG_LEVEL).upper()

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    # Remove handlers existentes para evitar duplicação no reload
    root_logger.handlers.clear()
    root_logger.addHandler(handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logging.getLogger("sqlalchemy.engine").setLevel(
        logging.INFO if settings.DEBUG else logging.WARNING
    )

    get_logger(__name__).info(
        f"Logging configurado com nível {log_level} ({settings.ENVIRONMENT})"
    )


def get_logger(name: str) -> logging.Logger:
    """Logger do módulo (use __name__)."""
    return logging.getLogger(name)
