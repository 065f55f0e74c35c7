"""
Model de livro favorito.
"""

from datetime import date

from sqlalchemy import Date, ForeignKey, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from livraria.db.session import Base
from livraria.models.base import IntIdMixin, CreatedAtMixin


class Favorite(Base, IntIdMixin, CreatedAtMixin):
    """Livro marcado como favorito por um usuário."""
    __tablename__ = "favoritos"

    usuario_id: Mapped[int] = mapped_column(
        ForeignKey("usuarios.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    livro_id: Mapped[int] = mapped_column(
        ForeignKey("livros.id", ondelete="CASCADE"),
        nullable=False,
    )
    data_favoritado: Mapped[date] = mapped_column(Date, nullable=False)

    __table_args__ = (
        UniqueConstraint("usuario_id", "livro_id", name="uq_favoritos_usuario_livro"),
    )

    def __repr__(self) -> str:
        return f"<Favorite usuario={self.usuario_id} livro={self.livro_id}>"
