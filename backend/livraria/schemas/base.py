"""
Schemas base reutilizáveis em toda a aplicação.
"""

from typing import Generic, List, TypeVar

from pydantic import BaseModel, ConfigDict

T = TypeVar("T")


class BaseSchema(BaseModel):
    """Schema base com configurações padrão."""
    model_config = ConfigDict(
        from_attributes=True,
        str_strip_whitespace=True,
    )


class PaginatedResponse(BaseModel, Generic[T]):
    """
    Resposta paginada genérica.

    Uso nos endpoints:
        @router.get("/reservas", response_model=PaginatedResponse[ReservationDetail])
        async def list_reservations(...) -> PaginatedResponse[ReservationDetail]:
            ...
    """
    itens: List[T]
    total: int
    pagina: int
    limite: int
    paginas: int

    model_config = ConfigDict(from_attributes=True)

    @classmethod
    def create(
        cls,
        itens: List[T],
        total: int,
        pagina: int,
        limite: int,
    ) -> "PaginatedResponse[T]":
        """Factory method para criar resposta paginada."""
        paginas = (total + limite - 1) // limite if limite > 0 else 0
        return cls(
            itens=itens,
            total=total,
            pagina=pagina,
            limite=limite,
            paginas=paginas,
        )


class ErrorResponse(BaseModel):
    """
    Resposta de erro padrão, gerada a partir de um LibraryError.

    Exemplo:
        {
            "error": "validation_error",
            "reason": "missing_fields",
            "message": "Campos obrigatórios faltando",
            "fields": ["usuario_id", "data_retirada"]
        }
    """
    error: str
    reason: str
    message: str
    fields: List[str] | None = None
    detail: str | None = None


class MessageResponse(BaseModel):
    """Resposta simples com mensagem."""
    mensagem: str


class OperationResponse(MessageResponse):
    """Resposta de operação sobre um registro (cancelamento, confirmação)."""
    id: int
