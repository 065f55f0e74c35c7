"""
Service para lógica de negócio de User.
"""

from datetime import date
from typing import Callable

from sqlalchemy.ext.asyncio import AsyncSession

from livraria.core.exceptions import Conflict, InvalidState, NotFound
from livraria.core.logging import get_logger
from livraria.db.session import transaction
from livraria.repositories.reservation import ReservationRepository
from livraria.repositories.user import UserRepository
from livraria.schemas.base import PaginatedResponse
from livraria.schemas.user import UserCreate, UserRead, UserUpdate

logger = get_logger(__name__)


class UserService:
    """Service para operações de User."""

    def __init__(self, db: AsyncSession, today: Callable[[], date] = date.today):
        self.db = db
        self._today = today
        self.repo = UserRepository(db)
        self.reservation_repo = ReservationRepository(db)

    async def get_by_id(self, user_id: int) -> UserRead:
        """
        Busca usuário por ID.

        Raises:
            NotFound: Usuário não encontrado
        """
        async with transaction(self.db):
            user = await self.repo.get_by_id(user_id)
            if user is None:
                raise NotFound("Usuário não encontrado", reason="user_not_found")
            return UserRead.model_validate(user)

    async def create(self, data: UserCreate) -> UserRead:
        """
        Cadastra novo usuário.

        Raises:
            Conflict: Email já cadastrado
        """
        async with transaction(self.db):
            if await self.repo.email_exists(data.email):
                raise Conflict(
                    "Email já cadastrado",
                    reason="duplicate",
                    fields=["email"],
                )
            user = await self.repo.add(
                nome=data.nome,
                email=data.email,
                ativo=data.ativo,
            )
            result = UserRead.model_validate(user)

        logger.info(f"Usuário {result.id} cadastrado")
        return result

    async def update(self, user_id: int, data: UserUpdate) -> UserRead:
        """
        Atualiza usuário.

        Raises:
            NotFound: Usuário não encontrado
            Conflict: Email já cadastrado por outro usuário
        """
        async with transaction(self.db):
            user = await self.repo.get_by_id(user_id, for_update=True)
            if user is None:
                raise NotFound("Usuário não encontrado", reason="user_not_found")

            if data.email and data.email != user.email and await self.repo.email_exists(data.email):
                raise Conflict(
                    "Email já cadastrado",
                    reason="duplicate",
                    fields=["email"],
                )

            user = await self.repo.update(
                user,
                nome=data.nome,
                email=data.email,
                ativo=data.ativo,
            )
            result = UserRead.model_validate(user)

        logger.info(f"Usuário {user_id} atualizado")
        return result

    async def delete(self, user_id: int) -> int:
        """
        Remove usuário, junto com avaliações e favoritos.

        Raises:
            NotFound: Usuário não encontrado
            InvalidState: Usuário com reserva ativa
        """
        async with transaction(self.db):
            user = await self.repo.get_by_id(user_id, for_update=True)
            if user is None:
                raise NotFound("Usuário não encontrado", reason="user_not_found")

            if await self.reservation_repo.count_active_by_user(user_id, self._today()):
                raise InvalidState(
                    "Usuário possui reservas ativas e não pode ser removido",
                    reason="has_active_reservations",
                )

            await self.repo.delete(user)

        logger.info(f"Usuário {user_id} removido")
        return user_id

    async def list_paginated(
        self,
        pagina: int = 1,
        limite: int = 10,
    ) -> PaginatedResponse[UserRead]:
        """Lista usuários com paginação."""
        async with transaction(self.db):
            users = await self.repo.get_all(skip=(pagina - 1) * limite, limit=limite)
            total = await self.repo.count()
            itens = [UserRead.model_validate(u) for u in users]

        return PaginatedResponse[UserRead].create(
            itens=itens,
            total=total,
            pagina=pagina,
            limite=limite,
        )
