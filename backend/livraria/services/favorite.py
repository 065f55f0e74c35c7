"""
Service para livros favoritos dos usuários.
"""

from datetime import date
from typing import Callable

from sqlalchemy.ext.asyncio import AsyncSession

from livraria.core.exceptions import Conflict, NotFound
from livraria.core.logging import get_logger
from livraria.db.session import transaction
from livraria.repositories.book import BookRepository
from livraria.repositories.favorite import FavoriteRepository
from livraria.repositories.user import UserRepository
from livraria.schemas.favorite import FavoriteCreate, FavoriteRead

logger = get_logger(__name__)


class FavoriteService:
    """Service para operações de Favorite."""

    def __init__(self, db: AsyncSession, today: Callable[[], date] = date.today):
        self.db = db
        self._today = today
        self.repo = FavoriteRepository(db)
        self.user_repo = UserRepository(db)
        self.book_repo = BookRepository(db)

    async def create(self, data: FavoriteCreate) -> FavoriteRead:
        """
        Marca um livro como favorito do usuário.

        Raises:
            NotFound: Usuário ou livro não encontrado
            Conflict: Livro já está nos favoritos do usuário
        """
        async with transaction(self.db):
            if await self.user_repo.get_by_id(data.usuario_id) is None:
                raise NotFound("Usuário não encontrado", reason="user_not_found")
            if await self.book_repo.get_by_id(data.livro_id) is None:
                raise NotFound("Livro não encontrado", reason="book_not_found")

            existing = await self.repo.get_by_user_and_book(data.usuario_id, data.livro_id)
            if existing is not None:
                raise Conflict(
                    "Livro já está nos favoritos do usuário",
                    reason="duplicate",
                    fields=["usuario_id", "livro_id"],
                )

            favorite = await self.repo.add(
                usuario_id=data.usuario_id,
                livro_id=data.livro_id,
                data_favoritado=data.data_favoritado or self._today(),
            )
            result = FavoriteRead.model_validate(favorite)

        logger.info(f"Favorito {result.id}: usuário {result.usuario_id}, livro {result.livro_id}")
        return result

    async def list_all(self, usuario_id: int | None = None) -> list[FavoriteRead]:
        async with transaction(self.db):
            favorites = await self.repo.list_by_user(usuario_id)
            return [FavoriteRead.model_validate(f) for f in favorites]

    async def delete(self, favorite_id: int) -> int:
        """
        Remove um favorito.

        Raises:
            NotFound: Favorito não encontrado
        """
        async with transaction(self.db):
            favorite = await self.repo.get_by_id(favorite_id)
            if favorite is None:
                raise NotFound("Favorito não encontrado", reason="favorite_not_found")
            await self.repo.delete(favorite)

        logger.info(f"Favorito {favorite_id} removido")
        return favorite_id
