"""
Model de usuário da biblioteca.
"""

from sqlalchemy import Boolean, String, true
from sqlalchemy.orm import Mapped, mapped_column

from livraria.db.session import Base
from livraria.models.base import IntIdMixin, CreatedAtMixin


class User(Base, IntIdMixin, CreatedAtMixin):
    """
    Usuário da biblioteca.

    Criado e removido fora do fluxo de reservas; para as reservas
    é somente leitura.

    Attributes:
        id: ID do usuário
        nome: Nome completo
        email: Email único
        ativo: Usuários inativos não podem criar reservas
    """
    __tablename__ = "usuarios"

    nome: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        nullable=False,
        index=True,
    )
    ativo: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=True,
        server_default=true(),
    )

    def __repr__(self) -> str:
        return f"<User {self.email}>"
