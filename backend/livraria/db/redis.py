"""
Conexão com Redis para cache de estatísticas e rate limiting.

O Redis é opcional: sem ele, cache e rate limit ficam desligados
(fail-open). Quem usa o cliente deve lê-lo via módulo
(`redis_db.redis_client`), pois ele só existe depois do startup.
"""

import logging
from typing import Optional

import redis.asyncio as redis

from livraria.core.config import get_settings

logger = logging.getLogger(__name__)
settings = get_settings()

# Inicializado no startup (init_redis), None até lá ou após close_redis
redis_client: Optional[redis.Redis] = None


async def init_redis() -> redis.Redis:
    """Cria o cliente Redis a partir de REDIS_URL."""
    global redis_client
    redis_client = redis.from_url(
        settings.REDIS_URL,
        encoding="utf-8",
        decode_responses=True,
        socket_connect_timeout=2,
    )
    return redis_client


async def close_redis() -> None:
    """Fecha a conexão com o Redis, se aberta."""
    global redis_client
    if redis_client is not None:
        await redis_client.aclose()
        redis_client = None


async def check_redis_connection() -> bool:
    """Retorna True se o Redis responde ao PING."""
    if redis_client is None:
        return False
    try:
        await redis_client.ping()
        return True
    except Exception as e:
        logger.warning(f"Redis indisponível: {e}")
        return False
