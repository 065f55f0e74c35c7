"""
Endpoints de Avaliações.

Contratos:
    - POST /avaliacoes: Registra avaliação (nota de 1 a 5)
    - GET /avaliacoes: Lista avaliações, com filtro por livro/usuário
"""

from fastapi import APIRouter, Query, status

from livraria.core.deps import DbSession
from livraria.schemas.base import ErrorResponse
from livraria.schemas.rating import RatingCreate, RatingRead
from livraria.services.rating import RatingService

router = APIRouter(prefix="/avaliacoes", tags=["Avaliações"])


@router.post(
    "",
    response_model=RatingRead,
    status_code=status.HTTP_201_CREATED,
    summary="Avaliar livro",
    responses={404: {"model": ErrorResponse}},
)
async def create_rating(data: RatingCreate, db: DbSession) -> RatingRead:
    """
    Registra uma avaliação de um livro por um usuário.

    Raises:
        404: Usuário ou livro não encontrado
    """
    service = RatingService(db)
    return await service.create(data)


@router.get(
    "",
    response_model=list[RatingRead],
    summary="Listar avaliações",
)
async def list_ratings(
    db: DbSession,
    livro_id: int | None = Query(None, ge=1, description="Filtrar por livro"),
    usuario_id: int | None = Query(None, ge=1, description="Filtrar por usuário"),
) -> list[RatingRead]:
    service = RatingService(db)
    return await service.list_all(livro_id=livro_id, usuario_id=usuario_id)
