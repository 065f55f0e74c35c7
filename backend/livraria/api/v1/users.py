"""
Endpoints de Usuários.

Contratos:
    - POST /usuarios: Cadastra usuário
    - GET /usuarios: Lista usuários paginado
    - GET /usuarios/{id}: Detalhes do usuário
    - PUT /usuarios/{id}: Atualiza usuário
    - DELETE /usuarios/{id}: Remove usuário sem reservas ativas

Status codes:
    - 200: Sucesso
    - 201: Criado com sucesso
    - 400: ID inválido ou usuário com reservas ativas
    - 404: Usuário não encontrado
    - 409: Email já cadastrado
"""

from fastapi import APIRouter, Query, status

from livraria.core.deps import DbSession, parse_path_id
from livraria.schemas.base import ErrorResponse, OperationResponse, PaginatedResponse
from livraria.schemas.user import UserCreate, UserRead, UserUpdate
from livraria.services.user import UserService

router = APIRouter(prefix="/usuarios", tags=["Usuários"])


@router.post(
    "",
    response_model=UserRead,
    status_code=status.HTTP_201_CREATED,
    summary="Cadastrar usuário",
    responses={409: {"model": ErrorResponse}},
)
async def create_user(data: UserCreate, db: DbSession) -> UserRead:
    service = UserService(db)
    return await service.create(data)


@router.get(
    "",
    response_model=PaginatedResponse[UserRead],
    summary="Listar usuários",
)
async def list_users(
    db: DbSession,
    pagina: int = Query(1, ge=1, description="Número da página"),
    limite: int = Query(10, ge=1, le=100, description="Itens por página"),
) -> PaginatedResponse[UserRead]:
    service = UserService(db)
    return await service.list_paginated(pagina, limite)


@router.get(
    "/{user_id}",
    response_model=UserRead,
    summary="Detalhes do usuário",
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def get_user(user_id: str, db: DbSession) -> UserRead:
    service = UserService(db)
    return await service.get_by_id(parse_path_id(user_id, "usuário"))


@router.put(
    "/{user_id}",
    response_model=UserRead,
    summary="Atualizar usuário",
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    },
)
async def update_user(user_id: str, data: UserUpdate, db: DbSession) -> UserRead:
    """
    Atualiza nome, email ou status do usuário.

    Desativar o usuário (ativo=false) impede novas reservas.
    """
    service = UserService(db)
    return await service.update(parse_path_id(user_id, "usuário"), data)


@router.delete(
    "/{user_id}",
    response_model=OperationResponse,
    summary="Remover usuário",
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def delete_user(user_id: str, db: DbSession) -> OperationResponse:
    service = UserService(db)
    deleted_id = await service.delete(parse_path_id(user_id, "usuário"))
    return OperationResponse(mensagem="Usuário removido com sucesso", id=deleted_id)
