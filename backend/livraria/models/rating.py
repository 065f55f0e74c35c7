"""
Model de avaliação de livro.
"""

from typing import Optional

from sqlalchemy import CheckConstraint, ForeignKey, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from livraria.db.session import Base
from livraria.models.base import IntIdMixin, CreatedAtMixin


class Rating(Base, IntIdMixin, CreatedAtMixin):
    """
    Avaliação de um livro por um usuário. Apenas inserção e listagem.

    Attributes:
        nota: Nota de 1 a 5
        comentario: Texto livre
    """
    __tablename__ = "avaliacoes"

    usuario_id: Mapped[int] = mapped_column(
        ForeignKey("usuarios.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    livro_id: Mapped[int] = mapped_column(
        ForeignKey("livros.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    nota: Mapped[int] = mapped_column(Integer, nullable=False)
    comentario: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    __table_args__ = (
        CheckConstraint("nota BETWEEN 1 AND 5", name="ck_avaliacoes_nota"),
    )

    def __repr__(self) -> str:
        return f"<Rating livro={self.livro_id} nota={self.nota}>"
