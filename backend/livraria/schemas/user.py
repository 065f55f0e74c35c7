"""
Schemas Pydantic para User.
"""

from datetime import datetime

from pydantic import EmailStr, Field

from livraria.schemas.base import BaseSchema


class UserCreate(BaseSchema):
    """Schema para cadastro de usuário."""
    nome: str = Field(..., min_length=1, max_length=255, examples=["Maria Silva"])
    email: EmailStr = Field(..., examples=["maria@exemplo.com"])
    ativo: bool = True


class UserUpdate(BaseSchema):
    """Schema para atualização de usuário."""
    nome: str | None = Field(None, min_length=1, max_length=255)
    email: EmailStr | None = None
    ativo: bool | None = None


class UserRead(BaseSchema):
    """Schema para leitura de usuário."""
    id: int
    nome: str
    email: str
    ativo: bool
    criado_em: datetime
