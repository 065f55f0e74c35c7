"""
Módulo de repositórios - acesso a dados.
"""

from livraria.repositories.base import BaseRepository
from livraria.repositories.user import UserRepository
from livraria.repositories.book import BookRepository
from livraria.repositories.reservation import ReservationRepository
from livraria.repositories.rating import RatingRepository
from livraria.repositories.favorite import FavoriteRepository

__all__ = [
    "BaseRepository",
    "UserRepository",
    "BookRepository",
    "ReservationRepository",
    "RatingRepository",
    "FavoriteRepository",
]
