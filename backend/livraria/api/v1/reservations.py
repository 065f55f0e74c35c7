"""
Endpoints de Reservas.

Contratos:
    - POST /reservas: Cria reserva
    - GET /reservas: Lista reservas com filtros e paginação
    - GET /reservas/estatisticas: Contadores agregados
    - GET /reservas/{id}: Detalhes da reserva
    - DELETE /reservas/{id}: Cancela reserva (antes da data de retirada)
    - PATCH|POST /reservas/{id}/confirmar: Confirma email da reserva

Rate Limiting aplicado:
    - POST /reservas: RATE_LIMIT_REQUESTS por janela, por IP

Status codes:
    - 200: Sucesso
    - 201: Criado com sucesso
    - 400: Erro de validação, limite de reservas ou estado inválido
    - 404: Reserva, usuário ou livro não encontrado
    - 409: Livro indisponível ou período já reservado
    - 429: Rate limit excedido
"""

from fastapi import APIRouter, Body, Depends, Query, status

from livraria.core.deps import DbSession, parse_path_id
from livraria.core.rate_limit import rate_limit_reservations
from livraria.schemas.base import ErrorResponse, OperationResponse, PaginatedResponse
from livraria.schemas.reservation import (
    ReservationCreate,
    ReservationCreateResponse,
    ReservationDetail,
    ReservationFilters,
    ReservationStats,
)
from livraria.services.reservation import ReservationService

router = APIRouter(
    prefix="/reservas",
    tags=["Reservas"],
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)


@router.post(
    "",
    response_model=ReservationCreateResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Criar reserva",
    description="Reserva um livro para o período [data_retirada, data_devolucao].",
    responses={409: {"model": ErrorResponse}},
)
async def create_reservation(
    db: DbSession,
    data: ReservationCreate | None = Body(default=None),
    _: None = Depends(rate_limit_reservations),
) -> ReservationCreateResponse:
    """
    Cria nova reserva.

    Regras:
        - Retirada a partir de hoje, devolução depois da retirada
        - Período de no máximo RESERVATION_MAX_WINDOW_DAYS dias
        - Período não pode cruzar outra reserva do mesmo livro
        - Usuário com no máximo RESERVATION_MAX_ACTIVE reservas ativas

    Raises:
        400: Dados inválidos, usuário inativo ou limite atingido
        404: Usuário ou livro não encontrado
        409: Livro indisponível ou já reservado no período
    """
    service = ReservationService(db)
    # Corpo vazio segue para a validação, que reporta os campos obrigatórios
    payload = data.model_dump() if data is not None else {}
    reservation = await service.create_reservation(payload)
    return ReservationCreateResponse(
        mensagem="Reserva criada com sucesso",
        reserva=reservation,
    )


@router.get(
    "",
    response_model=PaginatedResponse[ReservationDetail],
    summary="Listar reservas",
    description="Lista reservas, mais recentes primeiro, com filtros opcionais.",
)
async def list_reservations(
    db: DbSession,
    usuario_id: int | None = Query(None, ge=1, description="Filtrar por usuário"),
    livro_id: int | None = Query(None, ge=1, description="Filtrar por livro"),
    ativas: bool | None = Query(
        None,
        description="true: devolução hoje ou depois; false: já devolvidas",
    ),
    confirmadas: bool | None = Query(None, description="Filtrar por email confirmado"),
    pagina: int = Query(1, ge=1, description="Número da página"),
    limite: int = Query(10, ge=1, le=100, description="Itens por página"),
) -> PaginatedResponse[ReservationDetail]:
    filters = ReservationFilters(
        usuario_id=usuario_id,
        livro_id=livro_id,
        ativas=ativas,
        confirmadas=confirmadas,
        pagina=pagina,
        limite=limite,
    )
    service = ReservationService(db)
    return await service.list_reservations(filters)


# Declarada antes de /{reservation_id} para não ser capturada como ID
@router.get(
    "/estatisticas",
    response_model=ReservationStats,
    summary="Estatísticas de reservas",
)
async def reservation_statistics(db: DbSession) -> ReservationStats:
    """
    Totais de reservas: futuras, em andamento e situação dos emails.

    Resultado cacheado no Redis por CACHE_STATS_TTL_SECONDS.
    """
    service = ReservationService(db)
    return await service.statistics()


@router.get(
    "/{reservation_id}",
    response_model=ReservationDetail,
    summary="Detalhes da reserva",
)
async def get_reservation(reservation_id: str, db: DbSession) -> ReservationDetail:
    service = ReservationService(db)
    return await service.get_reservation(parse_path_id(reservation_id, "reserva"))


@router.delete(
    "/{reservation_id}",
    response_model=OperationResponse,
    summary="Cancelar reserva",
    description="Remove a reserva. Só é permitido antes da data de retirada.",
)
async def cancel_reservation(reservation_id: str, db: DbSession) -> OperationResponse:
    """
    Cancela uma reserva.

    Raises:
        400: ID inválido ou reserva já iniciada
        404: Reserva não encontrada
    """
    service = ReservationService(db)
    cancelled_id = await service.cancel_reservation(parse_path_id(reservation_id, "reserva"))
    return OperationResponse(mensagem="Reserva cancelada com sucesso", id=cancelled_id)


@router.api_route(
    "/{reservation_id}/confirmar",
    methods=["PATCH", "POST"],
    response_model=OperationResponse,
    summary="Confirmar email da reserva",
)
async def confirm_reservation_email(reservation_id: str, db: DbSession) -> OperationResponse:
    """
    Marca o email da reserva como confirmado.

    Raises:
        400: ID inválido ou email já confirmado
        404: Reserva não encontrada
    """
    service = ReservationService(db)
    confirmed_id = await service.confirm_email(parse_path_id(reservation_id, "reserva"))
    return OperationResponse(mensagem="Email confirmado com sucesso", id=confirmed_id)
