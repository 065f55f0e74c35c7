"""
Dependencies FastAPI compartilhadas pelos endpoints.
"""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from livraria.core.exceptions import ValidationError
from livraria.db.session import get_db
from livraria.services.validation import parse_id

# Type alias para uso nos endpoints
DbSession = Annotated[AsyncSession, Depends(get_db)]


def parse_path_id(raw_id: str, label: str = "registro") -> int:
    """
    Converte o ID do path para inteiro.

    Raises:
        ValidationError 400: ID ausente ou não numérico
    """
    parsed = parse_id(raw_id)
    if parsed is None:
        raise ValidationError(
            f"ID do {label} é obrigatório e deve ser um número",
            reason="invalid_id",
            fields=["id"],
        )
    return parsed
