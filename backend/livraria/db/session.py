"""
Configuração de sessão do banco de dados com SQLAlchemy async.

Este módulo fornece o engine async, session factory, a dependency
para injeção de sessão nos endpoints e a unidade de trabalho
transacional usada pelos services.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator, AsyncIterator

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from livraria.core.config import get_settings
from livraria.core.exceptions import LibraryError, StorageError, translate_storage_error
from livraria.core.logging import get_logger

settings = get_settings()
logger = get_logger(__name__)

# Engine async com pool de conexões
engine = create_async_engine(
    settings.DATABASE_URL,
    echo=False,
    pool_pre_ping=True,
    pool_size=5,
    max_overflow=10,
)

# Factory de sessões async
async_session_factory = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autocommit=False,
    autoflush=False,
)


class Base(DeclarativeBase):
    """Classe base para todos os modelos SQLAlchemy."""
    pass


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency que fornece uma sessão de banco de dados.

    Uso nos endpoints:
        @app.get("/items")
        async def get_items(db: AsyncSession = Depends(get_db)):
            ...

    A sessão é automaticamente fechada após o request.
    """
    async with async_session_factory() as session:
        try:
            yield session
        finally:
            await session.close()


@asynccontextmanager
async def transaction(session: AsyncSession) -> AsyncIterator[AsyncSession]:
    """
    Unidade de trabalho atômica sobre a sessão.

    Faz commit ao sair normalmente e rollback em qualquer saída por
    exceção, inclusive erros de domínio levantados no meio do bloco.
    Erros do SQLAlchemy são traduzidos para erros de domínio
    (ver translate_storage_error).

    Uso:
        async with transaction(self.db):
            ...
    """
    try:
        yield session
        await session.commit()
    except LibraryError:
        await session.rollback()
        raise
    except SQLAlchemyError as exc:
        await session.rollback()
        error = translate_storage_error(exc)
        if isinstance(error, StorageError):
            logger.exception("Falha inesperada do banco de dados")
        else:
            logger.info(f"Violação de constraint traduzida: {error.reason}")
        raise error from exc
    except BaseException:
        await session.rollback()
        raise


async def check_database_connection() -> tuple[bool, str | None]:
    """
    Verifica se a conexão com o banco de dados está funcionando.

    Returns:
        Tupla (sucesso, mensagem_erro)
    """
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        return True, None
    except Exception as e:
        return False, str(e)
