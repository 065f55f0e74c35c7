"""
Cache service usando Redis.

Cacheia as estatísticas de reservas (GET /reservas/estatisticas).
Configurável via variáveis de ambiente:
    - CACHE_ENABLED: bool (default: True) - Habilita/desabilita cache
    - CACHE_STATS_TTL_SECONDS: int (default: 30) - TTL do cache de estatísticas

Uso:
    data = await cache_service.get_stats()
    if data:
        return data

    result = await compute_stats()
    await cache_service.set_stats(result)
    return result

Invalidação:
    # Após criar, cancelar ou confirmar reserva
    await cache_service.invalidate_stats()

Falhas do Redis nunca propagam: o cache é apenas uma otimização.
"""

import json
import logging
from typing import Optional

from livraria.core.config import get_settings
from livraria.db import redis as redis_db

logger = logging.getLogger(__name__)
settings = get_settings()


class CacheService:
    """Service para operações de cache usando Redis."""

    KEY_STATS = "cache:reservas:estatisticas"

    def __init__(self, ttl: Optional[int] = None):
        """
        Args:
            ttl: TTL padrão em segundos (default: config)
        """
        self.ttl = ttl or settings.CACHE_STATS_TTL_SECONDS

    @staticmethod
    def _client():
        if not settings.CACHE_ENABLED:
            return None
        return redis_db.redis_client

    async def get_stats(self) -> Optional[dict]:
        """Busca estatísticas do cache; None se ausente ou indisponível."""
        client = self._client()
        if client is None:
            return None

        try:
            data = await client.get(self.KEY_STATS)
            if data:
                return json.loads(data)
            return None
        except Exception as e:
            logger.warning(f"Erro ao buscar cache de estatísticas: {e}")
            return None

    async def set_stats(self, data: dict, ttl: Optional[int] = None) -> bool:
        """Salva estatísticas no cache. Retorna True se salvou."""
        client = self._client()
        if client is None:
            return False

        try:
            await client.setex(
                self.KEY_STATS,
                ttl or self.ttl,
                json.dumps(data, default=str),
            )
            return True
        except Exception as e:
            logger.warning(f"Erro ao salvar cache de estatísticas: {e}")
            return False

    async def invalidate_stats(self) -> bool:
        """
        Invalida o cache de estatísticas.

        Deve ser chamado após:
            - criação de reserva
            - cancelamento de reserva
            - confirmação de email
        """
        client = self._client()
        if client is None:
            return False

        try:
            await client.delete(self.KEY_STATS)
            return True
        except Exception as e:
            logger.warning(f"Erro ao invalidar cache de estatísticas: {e}")
            return False


# Instância global para uso nos services
cache_service = CacheService()
