"""
Endpoints de Livros.

Contratos:
    - POST /livros: Cadastra livro
    - GET /livros: Lista livros paginado
    - GET /livros/{id}: Detalhes do livro
    - PUT /livros/{id}: Atualiza livro
    - DELETE /livros/{id}: Remove livro sem reservas ativas

O campo `disponivel` é somente leitura: indica se o livro tem alguma
reserva ativa, e é mantido pelas operações de reserva.

Status codes:
    - 200: Sucesso
    - 201: Criado com sucesso
    - 400: ID inválido ou livro com reservas ativas
    - 404: Livro não encontrado
    - 409: ISBN já cadastrado
"""

from fastapi import APIRouter, Query, status

from livraria.core.deps import DbSession, parse_path_id
from livraria.schemas.base import ErrorResponse, OperationResponse, PaginatedResponse
from livraria.schemas.book import BookCreate, BookRead, BookUpdate
from livraria.services.book import BookService

router = APIRouter(prefix="/livros", tags=["Livros"])


@router.post(
    "",
    response_model=BookRead,
    status_code=status.HTTP_201_CREATED,
    summary="Cadastrar livro",
    responses={409: {"model": ErrorResponse}},
)
async def create_book(data: BookCreate, db: DbSession) -> BookRead:
    service = BookService(db)
    return await service.create(data)


@router.get(
    "",
    response_model=PaginatedResponse[BookRead],
    summary="Listar livros",
)
async def list_books(
    db: DbSession,
    pagina: int = Query(1, ge=1, description="Número da página"),
    limite: int = Query(10, ge=1, le=100, description="Itens por página"),
) -> PaginatedResponse[BookRead]:
    service = BookService(db)
    return await service.list_paginated(pagina, limite)


@router.get(
    "/{book_id}",
    response_model=BookRead,
    summary="Detalhes do livro",
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def get_book(book_id: str, db: DbSession) -> BookRead:
    service = BookService(db)
    return await service.get_by_id(parse_path_id(book_id, "livro"))


@router.put(
    "/{book_id}",
    response_model=BookRead,
    summary="Atualizar livro",
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    },
)
async def update_book(book_id: str, data: BookUpdate, db: DbSession) -> BookRead:
    """
    Atualiza os campos enviados do livro.

    Raises:
        404: Livro não encontrado
        409: ISBN já cadastrado em outro livro
    """
    service = BookService(db)
    return await service.update(parse_path_id(book_id, "livro"), data)


@router.delete(
    "/{book_id}",
    response_model=OperationResponse,
    summary="Remover livro",
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def delete_book(book_id: str, db: DbSession) -> OperationResponse:
    """
    Remove o livro com suas avaliações e favoritos.

    Raises:
        400: Livro possui reservas ativas
        404: Livro não encontrado
    """
    service = BookService(db)
    deleted_id = await service.delete(parse_path_id(book_id, "livro"))
    return OperationResponse(mensagem="Livro removido com sucesso", id=deleted_id)
