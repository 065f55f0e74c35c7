"""
Script de seed para criar dados iniciais no banco.

Uso:
    python -m livraria.db.seed

Cria usuários e livros de exemplo que ainda não existam (por email e
ISBN). Pode ser executado mais de uma vez.
"""

import asyncio
import logging

from livraria.db.session import async_session_factory, transaction
from livraria.repositories.book import BookRepository
from livraria.repositories.user import UserRepository

logger = logging.getLogger(__name__)

SAMPLE_USERS = [
    {"nome": "Ana Souza", "email": "ana.souza@exemplo.com"},
    {"nome": "Bruno Lima", "email": "bruno.lima@exemplo.com"},
    {"nome": "Carla Mendes", "email": "carla.mendes@exemplo.com"},
]

SAMPLE_BOOKS = [
    {"titulo": "Dom Casmurro", "autor": "Machado de Assis", "isbn": "9788535910663"},
    {"titulo": "Grande Sertão: Veredas", "autor": "João Guimarães Rosa", "isbn": "9788535908770"},
    {"titulo": "Vidas Secas", "autor": "Graciliano Ramos", "isbn": "9788501067339"},
    {"titulo": "A Hora da Estrela", "autor": "Clarice Lispector", "isbn": "9788532508120"},
    {"titulo": "Capitães da Areia", "autor": "Jorge Amado", "isbn": "9788535914061"},
]


async def seed_users() -> int:
    """Cria os usuários de exemplo ausentes. Retorna quantos foram criados."""
    created = 0
    async with async_session_factory() as db:
        repo = UserRepository(db)
        async with transaction(db):
            for data in SAMPLE_USERS:
                if await repo.email_exists(data["email"]):
                    logger.info(f"Usuário já existe: {data['email']}")
                    continue
                user = await repo.add(**data)
                logger.info(f"Usuário criado: {user.email} (ID: {user.id})")
                created += 1
    return created


async def seed_books() -> int:
    """Cria os livros de exemplo ausentes. Retorna quantos foram criados."""
    created = 0
    async with async_session_factory() as db:
        repo = BookRepository(db)
        async with transaction(db):
            for data in SAMPLE_BOOKS:
                if await repo.isbn_exists(data["isbn"]):
                    logger.info(f"Livro já existe: {data['titulo']}")
                    continue
                book = await repo.add(**data)
                logger.info(f"Livro criado: {book.titulo} (ID: {book.id})")
                created += 1
    return created


async def main() -> None:
    """Executa todos os seeds."""
    logging.basicConfig(level=logging.INFO, format="%(message)s")
    logger.info("Executando seeds...")
    users = await seed_users()
    books = await seed_books()
    logger.info(f"Seeds concluídos! {users} usuário(s), {books} livro(s)")


if __name__ == "__main__":
    asyncio.run(main())
