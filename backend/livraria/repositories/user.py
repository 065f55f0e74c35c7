"""
Repository para operações de User no banco de dados.
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from livraria.models.user import User
from livraria.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    """Repository para operações CRUD de User."""

    def __init__(self, db: AsyncSession):
        super().__init__(User, db)

    async def get_by_email(self, email: str) -> User | None:
        """Busca usuário por email."""
        result = await self.db.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()

    async def email_exists(self, email: str) -> bool:
        """Verifica se email já está cadastrado."""
        user = await self.get_by_email(email)
        return user is not None
