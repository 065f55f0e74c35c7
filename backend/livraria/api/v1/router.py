"""
Router principal da API.

Inclui todos os routers de endpoints. As rotas ficam na raiz
(/reservas, /livros, ...), sem prefixo de versão.
"""

from fastapi import APIRouter

from livraria.api.v1.books import router as books_router
from livraria.api.v1.favorites import router as favorites_router
from livraria.api.v1.ratings import router as ratings_router
from livraria.api.v1.reservations import router as reservations_router
from livraria.api.v1.users import router as users_router

api_router = APIRouter()

api_router.include_router(users_router)
api_router.include_router(books_router)
api_router.include_router(reservations_router)
api_router.include_router(ratings_router)
api_router.include_router(favorites_router)
