"""
Repository para operações de Rating no banco de dados.
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from livraria.models.rating import Rating
from livraria.repositories.base import BaseRepository


class RatingRepository(BaseRepository[Rating]):
    """Repository para operações de Rating."""

    def __init__(self, db: AsyncSession):
        super().__init__(Rating, db)

    async def list_filtered(
        self,
        livro_id: int | None = None,
        usuario_id: int | None = None,
    ) -> list[Rating]:
        """Lista avaliações, opcionalmente por livro e/ou usuário."""
        query = select(Rating).order_by(Rating.criado_em.desc(), Rating.id.desc())
        if livro_id is not None:
            query = query.where(Rating.livro_id == livro_id)
        if usuario_id is not None:
            query = query.where(Rating.usuario_id == usuario_id)
        result = await self.db.execute(query)
        return list(result.scalars().all())
