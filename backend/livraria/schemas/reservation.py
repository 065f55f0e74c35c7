"""
Schemas Pydantic para Reservation.
"""

from datetime import date, datetime
from typing import Any

from pydantic import ConfigDict, Field

from livraria.schemas.base import BaseSchema


class ReservationCreate(BaseSchema):
    """
    Corpo bruto da criação de reserva.

    Os campos são aceitos sem tipagem para que a validação de negócio
    (services/validation.py) reporte cada falha com seu código próprio,
    na ordem definida, em vez de um erro genérico de parsing.
    """
    usuario_id: Any = None
    livro_id: Any = None
    data_retirada: Any = None
    data_devolucao: Any = None
    confirmado_email: Any = None

    model_config = ConfigDict(
        extra="ignore",
        json_schema_extra={
            "examples": [
                {
                    "usuario_id": 1,
                    "livro_id": 1,
                    "data_retirada": "2026-11-02",
                    "data_devolucao": "2026-11-09",
                    "confirmado_email": False,
                }
            ]
        },
    )


class ReservationRead(BaseSchema):
    """Schema para leitura de reserva."""
    id: int
    usuario_id: int
    livro_id: int
    data_retirada: date
    data_devolucao: date
    confirmado_email: bool
    criado_em: datetime


class ReservationDetail(ReservationRead):
    """Reserva com dados do usuário e do livro."""
    usuario_nome: str | None = None
    usuario_email: str | None = None
    livro_titulo: str | None = None
    livro_autor: str | None = None
    livro_isbn: str | None = None

    @classmethod
    def from_reservation(cls, reservation) -> "ReservationDetail":
        """Constrói a partir de um model Reservation com relações carregadas."""
        user = reservation.user
        book = reservation.book
        return cls(
            id=reservation.id,
            usuario_id=reservation.usuario_id,
            livro_id=reservation.livro_id,
            data_retirada=reservation.data_retirada,
            data_devolucao=reservation.data_devolucao,
            confirmado_email=reservation.confirmado_email,
            criado_em=reservation.criado_em,
            usuario_nome=user.nome if user else None,
            usuario_email=user.email if user else None,
            livro_titulo=book.titulo if book else None,
            livro_autor=book.autor if book else None,
            livro_isbn=book.isbn if book else None,
        )


class ReservationCreateResponse(BaseSchema):
    """Resposta da criação de reserva."""
    mensagem: str
    reserva: ReservationDetail


class ReservationFilters(BaseSchema):
    """Filtros da listagem de reservas."""
    usuario_id: int | None = None
    livro_id: int | None = None
    ativas: bool | None = Field(None, description="True: devolução >= hoje; False: devolução < hoje")
    confirmadas: bool | None = None
    pagina: int = Field(1, ge=1)
    limite: int = Field(10, ge=1, le=100)


class ReservationStats(BaseSchema):
    """Contadores agregados de reservas."""
    total_reservas: int
    reservas_futuras: int
    reservas_ativas: int
    emails_confirmados: int
    emails_pendentes: int
