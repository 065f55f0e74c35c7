"""
Fixtures compartilhadas para testes.

Os testes rodam contra um SQLite temporário (aiosqlite), com o schema
criado a partir dos models a cada teste. Cada sessão abre sua própria
conexão (NullPool), como acontece com o PostgreSQL em produção.
"""

from datetime import date, timedelta
from typing import AsyncGenerator

import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import NullPool

from livraria import models  # noqa: F401 - registra os models no metadata
from livraria.db.session import Base, get_db
from livraria.main import app
from livraria.models.book import Book
from livraria.models.reservation import Reservation
from livraria.models.user import User


# ==========================================
# Event loop configuration
# ==========================================

@pytest.fixture(scope="session")
def anyio_backend():
    return "asyncio"


# ==========================================
# Database fixtures
# ==========================================

@pytest.fixture
async def test_engine(tmp_path):
    """Engine de teste com banco SQLite novo por teste."""
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'livraria_test.db'}",
        echo=False,
        poolclass=NullPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
def session_factory(test_engine):
    return async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


@pytest.fixture
async def test_db(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Sessão de banco para testes de service."""
    async with session_factory() as session:
        yield session


# ==========================================
# HTTP Client fixtures
# ==========================================

@pytest.fixture
async def client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    """
    Cliente HTTP assíncrono para testes.

    Substitui a dependency get_db para usar o engine de teste.
    """
    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
            finally:
                await session.close()

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


# ==========================================
# Data fixtures
# ==========================================

@pytest.fixture
def today() -> date:
    return date.today()


@pytest.fixture
def make_user(session_factory):
    """Factory que insere usuários diretamente no banco."""
    counter = {"n": 0}

    async def _make(nome: str = "Leitor Teste", ativo: bool = True) -> User:
        counter["n"] += 1
        async with session_factory() as session:
            user = User(nome=nome, email=f"leitor{counter['n']}@teste.com", ativo=ativo)
            session.add(user)
            await session.commit()
            await session.refresh(user)
            return user

    return _make


@pytest.fixture
def make_book(session_factory):
    """Factory que insere livros diretamente no banco."""
    counter = {"n": 0}

    async def _make(titulo: str = "Livro Teste", ativo: bool = True) -> Book:
        counter["n"] += 1
        async with session_factory() as session:
            book = Book(
                titulo=f"{titulo} {counter['n']}",
                autor="Autor Teste",
                isbn=f"97800000000{counter['n']:02d}",
                ativo=ativo,
                disponivel=True,
            )
            session.add(book)
            await session.commit()
            await session.refresh(book)
            return book

    return _make


@pytest.fixture
def make_reservation(session_factory):
    """
    Insere reservas sem passar pelas regras de negócio.

    Usado para montar cenários impossíveis de criar pela API, como
    reservas que já começaram ou já terminaram.
    """
    async def _make(
        usuario_id: int,
        livro_id: int,
        data_retirada: date,
        data_devolucao: date | None = None,
        confirmado_email: bool = False,
    ) -> Reservation:
        async with session_factory() as session:
            reservation = Reservation(
                usuario_id=usuario_id,
                livro_id=livro_id,
                data_retirada=data_retirada,
                data_devolucao=data_devolucao or data_retirada + timedelta(days=5),
                confirmado_email=confirmado_email,
            )
            session.add(reservation)
            await session.commit()
            await session.refresh(reservation)
            return reservation

    return _make
