"""
Repository para operações de Favorite no banco de dados.
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from livraria.models.favorite import Favorite
from livraria.repositories.base import BaseRepository


class FavoriteRepository(BaseRepository[Favorite]):
    """Repository para operações de Favorite."""

    def __init__(self, db: AsyncSession):
        super().__init__(Favorite, db)

    async def get_by_user_and_book(self, usuario_id: int, livro_id: int) -> Favorite | None:
        """Busca o favorito de um usuário para um livro."""
        result = await self.db.execute(
            select(Favorite).where(
                Favorite.usuario_id == usuario_id,
                Favorite.livro_id == livro_id,
            )
        )
        return result.scalar_one_or_none()

    async def list_by_user(self, usuario_id: int | None = None) -> list[Favorite]:
        """Lista favoritos, opcionalmente de um usuário."""
        query = select(Favorite).order_by(Favorite.criado_em.desc(), Favorite.id.desc())
        if usuario_id is not None:
            query = query.where(Favorite.usuario_id == usuario_id)
        result = await self.db.execute(query)
        return list(result.scalars().all())
