"""
Schemas Pydantic para Favorite.
"""

from datetime import date, datetime

from pydantic import Field

from livraria.schemas.base import BaseSchema


class FavoriteCreate(BaseSchema):
    """Schema para marcar livro como favorito."""
    usuario_id: int = Field(..., ge=1)
    livro_id: int = Field(..., ge=1)
    data_favoritado: date | None = Field(None, description="Padrão: hoje")


class FavoriteRead(BaseSchema):
    """Schema para leitura de favorito."""
    id: int
    usuario_id: int
    livro_id: int
    data_favoritado: date
    criado_em: datetime
