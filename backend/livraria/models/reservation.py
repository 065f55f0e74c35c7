"""
Model de reserva de livros.
"""

from datetime import date
from typing import TYPE_CHECKING

from sqlalchemy import DDL, Boolean, CheckConstraint, Date, ForeignKey, Index, event, false
from sqlalchemy.orm import Mapped, mapped_column, relationship

from livraria.db.session import Base
from livraria.models.base import IntIdMixin, CreatedAtMixin

if TYPE_CHECKING:
    from livraria.models.user import User
    from livraria.models.book import Book


class Reservation(Base, IntIdMixin, CreatedAtMixin):
    """
    Reserva de um livro por um usuário para um período fechado
    [data_retirada, data_devolucao].

    Ciclo de vida:
        1. Criada pelo fluxo de alocação, depois de todas as checagens
        2. confirmado_email pode passar de False para True uma única vez
        3. Removida no cancelamento, permitido só antes da data de retirada

    Regras de negócio:
        - data_devolucao > data_retirada
        - data_retirada >= hoje na criação
        - duração <= RESERVATION_MAX_WINDOW_DAYS
        - sem sobreposição de períodos para o mesmo livro
        - no máximo RESERVATION_MAX_ACTIVE reservas ativas por usuário

    Attributes:
        id: ID da reserva
        usuario_id: FK para o usuário
        livro_id: FK para o livro
        data_retirada: Data de retirada
        data_devolucao: Data de devolução
        confirmado_email: Email de confirmação já confirmado
        criado_em: Data/hora da criação
    """
    __tablename__ = "reservas"

    usuario_id: Mapped[int] = mapped_column(
        ForeignKey("usuarios.id", ondelete="CASCADE"),
        nullable=False,
    )
    livro_id: Mapped[int] = mapped_column(
        ForeignKey("livros.id", ondelete="CASCADE"),
        nullable=False,
    )
    data_retirada: Mapped[date] = mapped_column(Date, nullable=False)
    data_devolucao: Mapped[date] = mapped_column(Date, nullable=False)
    confirmado_email: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        server_default=false(),
    )

    # Relationships
    user: Mapped["User"] = relationship("User", lazy="selectin")
    book: Mapped["Book"] = relationship("Book", lazy="selectin")

    __table_args__ = (
        CheckConstraint(
            "data_devolucao > data_retirada",
            name="ck_reservas_periodo_valido",
        ),
        Index("ix_reservas_usuario_id", "usuario_id"),
        # Checagem de sobreposição: reservas de um livro por período
        Index("ix_reservas_livro_periodo", "livro_id", "data_retirada", "data_devolucao"),
        # Contagem de reservas ativas de um usuário
        Index("ix_reservas_usuario_devolucao", "usuario_id", "data_devolucao"),
        Index("ix_reservas_criado_em", "criado_em"),
    )

    def __repr__(self) -> str:
        return f"<Reservation {self.id} livro={self.livro_id} {self.data_retirada}..{self.data_devolucao}>"

    def has_started(self, today: date) -> bool:
        """Reserva iniciada: data de retirada hoje ou antes."""
        return self.data_retirada <= today


# Sobreposição barrada pelo próprio PostgreSQL (mesma constraint da migration
# 0001). Só é criada em create_all contra PostgreSQL; no SQLite a garantia
# fica com as checagens do service.
EXCLUSION_CONSTRAINT = "ex_reservas_livro_periodo"

event.listen(
    Base.metadata,
    "before_create",
    DDL("CREATE EXTENSION IF NOT EXISTS btree_gist").execute_if(dialect="postgresql"),
)
event.listen(
    Reservation.__table__,
    "after_create",
    DDL(
        f"ALTER TABLE reservas ADD CONSTRAINT {EXCLUSION_CONSTRAINT} "
        "EXCLUDE USING gist (livro_id WITH =, "
        "daterange(data_retirada, data_devolucao, '[]') WITH &&)"
    ).execute_if(dialect="postgresql"),
)
