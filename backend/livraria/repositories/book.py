"""
Repository para operações de Book no banco de dados.
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from livraria.models.book import Book
from livraria.repositories.base import BaseRepository


class BookRepository(BaseRepository[Book]):
    """Repository para operações CRUD de Book."""

    def __init__(self, db: AsyncSession):
        super().__init__(Book, db)

    async def isbn_exists(self, isbn: str) -> bool:
        """Verifica se o ISBN já está cadastrado."""
        result = await self.db.execute(select(Book.id).where(Book.isbn == isbn))
        return result.first() is not None
