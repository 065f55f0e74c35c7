"""
Schemas Pydantic para Rating (avaliação).
"""

from datetime import datetime

from pydantic import Field

from livraria.schemas.base import BaseSchema


class RatingCreate(BaseSchema):
    """Schema para criação de avaliação."""
    usuario_id: int = Field(..., ge=1)
    livro_id: int = Field(..., ge=1)
    nota: int = Field(..., ge=1, le=5)
    comentario: str | None = Field(None, max_length=2000)


class RatingRead(BaseSchema):
    """Schema para leitura de avaliação."""
    id: int
    usuario_id: int
    livro_id: int
    nota: int
    comentario: str | None
    criado_em: datetime
