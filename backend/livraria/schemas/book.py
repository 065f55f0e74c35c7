"""
Schemas Pydantic para Book.
"""

from datetime import datetime

from pydantic import Field

from livraria.schemas.base import BaseSchema


class BookCreate(BaseSchema):
    """Schema para cadastro de livro."""
    titulo: str = Field(..., min_length=1, max_length=500, examples=["Dom Casmurro"])
    autor: str = Field(..., min_length=1, max_length=255, examples=["Machado de Assis"])
    isbn: str | None = Field(None, min_length=10, max_length=20, examples=["9788535910663"])
    ativo: bool = True


class BookUpdate(BaseSchema):
    """Schema para atualização de livro. Campos omitidos não mudam."""
    titulo: str | None = Field(None, min_length=1, max_length=500)
    autor: str | None = Field(None, min_length=1, max_length=255)
    isbn: str | None = Field(None, min_length=10, max_length=20)
    ativo: bool | None = None


class BookRead(BaseSchema):
    """Schema para leitura de livro."""
    id: int
    titulo: str
    autor: str
    isbn: str | None
    ativo: bool
    disponivel: bool
    criado_em: datetime
