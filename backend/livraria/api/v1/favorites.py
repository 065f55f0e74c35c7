"""
Endpoints de Favoritos.

Contratos:
    - POST /favoritos: Marca livro como favorito
    - GET /favoritos: Lista favoritos (opcionalmente de um usuário)
    - DELETE /favoritos/{id}: Remove favorito

Status codes:
    - 200: Sucesso
    - 201: Criado com sucesso
    - 400: ID inválido
    - 404: Usuário, livro ou favorito não encontrado
    - 409: Livro já favoritado pelo usuário
"""

from fastapi import APIRouter, Query, status

from livraria.core.deps import DbSession, parse_path_id
from livraria.schemas.base import ErrorResponse, OperationResponse
from livraria.schemas.favorite import FavoriteCreate, FavoriteRead
from livraria.services.favorite import FavoriteService

router = APIRouter(prefix="/favoritos", tags=["Favoritos"])


@router.post(
    "",
    response_model=FavoriteRead,
    status_code=status.HTTP_201_CREATED,
    summary="Marcar favorito",
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def create_favorite(data: FavoriteCreate, db: DbSession) -> FavoriteRead:
    service = FavoriteService(db)
    return await service.create(data)


@router.get(
    "",
    response_model=list[FavoriteRead],
    summary="Listar favoritos",
)
async def list_favorites(
    db: DbSession,
    usuario_id: int | None = Query(None, ge=1, description="Filtrar por usuário"),
) -> list[FavoriteRead]:
    service = FavoriteService(db)
    return await service.list_all(usuario_id)


@router.delete(
    "/{favorite_id}",
    response_model=OperationResponse,
    summary="Remover favorito",
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def delete_favorite(favorite_id: str, db: DbSession) -> OperationResponse:
    service = FavoriteService(db)
    deleted_id = await service.delete(parse_path_id(favorite_id, "favorito"))
    return OperationResponse(mensagem="Favorito removido com sucesso", id=deleted_id)
