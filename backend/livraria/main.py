"""
Ponto de entrada da aplicação FastAPI.

Este módulo configura a aplicação FastAPI, inclui rotas, registra os
handlers de erro e define o ciclo de vida (startup/shutdown).
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from livraria.api.v1.router import api_router
from livraria.core.config import get_settings
from livraria.core.exceptions import LibraryError, StorageError
from livraria.core.logging import setup_logging, get_logger
from livraria.db.session import check_database_connection, engine
from livraria.db.redis import init_redis, close_redis, check_redis_connection
from livraria.schemas.base import ErrorResponse
from livraria.schemas.health import HealthResponse

settings = get_settings()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Gerencia o ciclo de vida da aplicação.

    Startup:
        - Configura logging
        - Conecta ao Redis
        - Verifica conexão com PostgreSQL

    Shutdown:
        - Fecha conexão com Redis
        - Fecha pool de conexões do banco
    """
    # Startup
    setup_logging()
    logger.info(f"Iniciando {settings.APP_NAME} em ambiente {settings.ENVIRONMENT}")

    # Inicializa Redis
    try:
        await init_redis()
        if await check_redis_connection():
            logger.info("Conexão com Redis estabelecida")
        else:
            logger.warning("Redis não disponível - cache e rate limit desabilitados")
    except Exception as e:
        logger.warning(f"Falha ao conectar ao Redis: {e}")

    # Verifica PostgreSQL
    success, error = await check_database_connection()
    if success:
        logger.info("Conexão com PostgreSQL estabelecida")
    else:
        logger.warning(f"PostgreSQL não disponível: {error}")

    yield

    # Shutdown
    logger.info(f"Encerrando {settings.APP_NAME}")
    await close_redis()
    await engine.dispose()


app = FastAPI(
    title=settings.APP_NAME,
    description="API REST de reservas de livros da livraria",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan,
)


@app.exception_handler(LibraryError)
async def library_error_handler(request: Request, exc: LibraryError) -> JSONResponse:
    """
    Converte erros de domínio em resposta JSON.

    O detalhe técnico de StorageError só é exposto fora de produção.
    """
    body = ErrorResponse(
        error=exc.error,
        reason=exc.reason,
        message=exc.message,
        fields=exc.fields,
    )
    if isinstance(exc, StorageError) and not settings.is_production:
        body.detail = exc.detail

    content = body.model_dump()
    if content["detail"] is None:
        content.pop("detail")

    return JSONResponse(status_code=exc.status_code, content=content)


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(
    request: Request,
    exc: RequestValidationError,
) -> JSONResponse:
    """
    Erros de parsing do FastAPI (corpo, query, path) no mesmo formato
    dos erros de domínio: 400 com os nomes dos campos inválidos.
    """
    fields: list[str] = []
    for error in exc.errors():
        # Último nome do caminho; índices de lista e posições no JSON são ignorados
        name = next(
            (part for part in reversed(error.get("loc", ())) if isinstance(part, str)),
            "body",
        )
        if name not in fields:
            fields.append(name)

    body = ErrorResponse(
        error="validation_error",
        reason="invalid_request",
        message="Dados da requisição inválidos: " + ", ".join(fields),
        fields=fields,
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=body.model_dump(exclude={"detail"}),
    )


# Inclui rotas da API
app.include_router(api_router)


@app.get(
    "/health",
    response_model=HealthResponse,
    tags=["Health"],
    summary="Verifica status da aplicação",
    description="Retorna o status da aplicação e das conexões com banco e Redis.",
)
async def health_check() -> HealthResponse:
    """
    Endpoint de healthcheck para monitoramento.

    Útil para load balancers e sistemas de monitoramento. Sem banco o
    status é "degraded"; Redis indisponível não afeta o status.
    """
    db_ok, _ = await check_database_connection()
    redis_ok = await check_redis_connection()

    return HealthResponse(
        status="healthy" if db_ok else "degraded",
        app_name=settings.APP_NAME,
        environment=settings.ENVIRONMENT,
        database="ok" if db_ok else "unavailable",
        redis="ok" if redis_ok else "unavailable",
    )
