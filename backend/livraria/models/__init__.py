"""
Models SQLAlchemy da aplicação.

Importar todos os models aqui para que o Alembic detecte as mudanças.
"""

from livraria.models.user import User
from livraria.models.book import Book
from livraria.models.reservation import Reservation
from livraria.models.rating import Rating
from livraria.models.favorite import Favorite

__all__ = [
    "User",
    "Book",
    "Reservation",
    "Rating",
    "Favorite",
]
