"""
Model de livro do acervo.
"""

from typing import Optional

from sqlalchemy import Boolean, String, true
from sqlalchemy.orm import Mapped, mapped_column

from livraria.db.session import Base
from livraria.models.base import IntIdMixin, CreatedAtMixin


class Book(Base, IntIdMixin, CreatedAtMixin):
    """
    Livro do acervo.

    Dois flags distintos:
        - ativo: flag de catálogo. Livro retirado do acervo (ativo=False)
          não aceita novas reservas.
        - disponivel: cache derivado, False enquanto o livro tiver ao menos
          uma reserva ativa. Atualizado na criação e no cancelamento de
          reservas; nunca é usado para bloquear uma reserva. A
          disponibilidade de um período é decidida só pela checagem de
          sobreposição.

    Attributes:
        id: ID do livro
        titulo: Título
        autor: Nome do autor
        isbn: ISBN (único, opcional)
    """
    __tablename__ = "livros"

    titulo: Mapped[str] = mapped_column(String(500), nullable=False)
    autor: Mapped[str] = mapped_column(String(255), nullable=False)
    isbn: Mapped[Optional[str]] = mapped_column(String(20), unique=True, nullable=True)
    ativo: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=True,
        server_default=true(),
    )
    disponivel: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=True,
        server_default=true(),
    )

    def __repr__(self) -> str:
        return f"<Book {self.titulo}>"
