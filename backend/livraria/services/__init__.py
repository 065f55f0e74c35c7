"""
Módulo de serviços - lógica de negócio.
"""

from livraria.services.user import UserService
from livraria.services.book import BookService
from livraria.services.reservation import ReservationService
from livraria.services.rating import RatingService
from livraria.services.favorite import FavoriteService

__all__ = [
    "UserService",
    "BookService",
    "ReservationService",
    "RatingService",
    "FavoriteService",
]
