"""
Service para lógica de negócio de Book.

O flag `disponivel` não é editável por aqui: ele é mantido pelo
ReservationService (falso na criação de reserva, recalculado no
cancelamento).
"""

from datetime import date
from typing import Callable

from sqlalchemy.ext.asyncio import AsyncSession

from livraria.core.exceptions import Conflict, InvalidState, NotFound
from livraria.core.logging import get_logger
from livraria.db.session import transaction
from livraria.repositories.book import BookRepository
from livraria.repositories.reservation import ReservationRepository
from livraria.schemas.base import PaginatedResponse
from livraria.schemas.book import BookCreate, BookRead, BookUpdate

logger = get_logger(__name__)


class BookService:
    """Service para operações de Book."""

    def __init__(self, db: AsyncSession, today: Callable[[], date] = date.today):
        self.db = db
        self._today = today
        self.repo = BookRepository(db)
        self.reservation_repo = ReservationRepository(db)

    async def get_by_id(self, book_id: int) -> BookRead:
        """
        Busca livro por ID.

        Raises:
            NotFound: Livro não encontrado
        """
        async with transaction(self.db):
            book = await self.repo.get_by_id(book_id)
            if book is None:
                raise NotFound("Livro não encontrado", reason="book_not_found")
            return BookRead.model_validate(book)

    async def create(self, data: BookCreate) -> BookRead:
        """
        Cadastra novo livro, disponível e sem reservas.

        Raises:
            Conflict: ISBN já cadastrado
        """
        async with transaction(self.db):
            if data.isbn and await self.repo.isbn_exists(data.isbn):
                raise Conflict(
                    "ISBN já cadastrado",
                    reason="duplicate",
                    fields=["isbn"],
                )
            book = await self.repo.add(
                titulo=data.titulo,
                autor=data.autor,
                isbn=data.isbn,
                ativo=data.ativo,
                disponivel=True,
            )
            result = BookRead.model_validate(book)

        logger.info(f"Livro {result.id} cadastrado: {result.titulo}")
        return result

    async def update(self, book_id: int, data: BookUpdate) -> BookRead:
        """
        Atualiza dados do livro.

        Tirar o livro do catálogo (ativo=False) bloqueia novas reservas,
        mas mantém as existentes.

        Raises:
            NotFound: Livro não encontrado
            Conflict: ISBN já cadastrado em outro livro
        """
        async with transaction(self.db):
            book = await self.repo.get_by_id(book_id, for_update=True)
            if book is None:
                raise NotFound("Livro não encontrado", reason="book_not_found")

            if data.isbn and data.isbn != book.isbn and await self.repo.isbn_exists(data.isbn):
                raise Conflict(
                    "ISBN já cadastrado",
                    reason="duplicate",
                    fields=["isbn"],
                )

            book = await self.repo.update(
                book,
                titulo=data.titulo,
                autor=data.autor,
                isbn=data.isbn,
                ativo=data.ativo,
            )
            result = BookRead.model_validate(book)

        logger.info(f"Livro {book_id} atualizado")
        return result

    async def delete(self, book_id: int) -> int:
        """
        Remove livro do acervo, junto com avaliações e favoritos.

        Raises:
            NotFound: Livro não encontrado
            InvalidState: Livro com reserva ativa
        """
        async with transaction(self.db):
            book = await self.repo.get_by_id(book_id, for_update=True)
            if book is None:
                raise NotFound("Livro não encontrado", reason="book_not_found")

            if await self.reservation_repo.book_has_active(book_id, self._today()):
                raise InvalidState(
                    "Livro possui reservas ativas e não pode ser removido",
                    reason="has_active_reservations",
                )

            await self.repo.delete(book)

        logger.info(f"Livro {book_id} removido")
        return book_id

    async def list_paginated(
        self,
        pagina: int = 1,
        limite: int = 10,
    ) -> PaginatedResponse[BookRead]:
        """Lista livros com paginação."""
        async with transaction(self.db):
            books = await self.repo.get_all(skip=(pagina - 1) * limite, limit=limite)
            total = await self.repo.count()
            itens = [BookRead.model_validate(b) for b in books]

        return PaginatedResponse[BookRead].create(
            itens=itens,
            total=total,
            pagina=pagina,
            limite=limite,
        )
