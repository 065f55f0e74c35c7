"""
Service para avaliações de livros.

Avaliações são apenas inseridas e listadas; não há edição nem remoção.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from livraria.core.exceptions import NotFound
from livraria.core.logging import get_logger
from livraria.db.session import transaction
from livraria.repositories.book import BookRepository
from livraria.repositories.rating import RatingRepository
from livraria.repositories.user import UserRepository
from livraria.schemas.rating import RatingCreate, RatingRead

logger = get_logger(__name__)


class RatingService:
    """Service para operações de Rating."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.repo = RatingRepository(db)
        self.user_repo = UserRepository(db)
        self.book_repo = BookRepository(db)

    async def create(self, data: RatingCreate) -> RatingRead:
        """
        Registra uma avaliação.

        Raises:
            NotFound: Usuário ou livro não encontrado
        """
        async with transaction(self.db):
            if await self.user_repo.get_by_id(data.usuario_id) is None:
                raise NotFound("Usuário não encontrado", reason="user_not_found")
            if await self.book_repo.get_by_id(data.livro_id) is None:
                raise NotFound("Livro não encontrado", reason="book_not_found")

            rating = await self.repo.add(
                usuario_id=data.usuario_id,
                livro_id=data.livro_id,
                nota=data.nota,
                comentario=data.comentario,
            )
            result = RatingRead.model_validate(rating)

        logger.info(
            f"Avaliação {result.id} registrada: livro {result.livro_id}, nota {result.nota}"
        )
        return result

    async def list_all(
        self,
        livro_id: int | None = None,
        usuario_id: int | None = None,
    ) -> list[RatingRead]:
        async with transaction(self.db):
            ratings = await self.repo.list_filtered(livro_id=livro_id, usuario_id=usuario_id)
            return [RatingRead.model_validate(r) for r in ratings]
