"""
Schemas Pydantic da aplicação.
"""

from livraria.schemas.base import (
    BaseSchema,
    ErrorResponse,
    MessageResponse,
    OperationResponse,
    PaginatedResponse,
)
from livraria.schemas.health import HealthResponse
from livraria.schemas.user import UserCreate, UserRead, UserUpdate
from livraria.schemas.book import BookCreate, BookRead, BookUpdate
from livraria.schemas.reservation import (
    ReservationCreate,
    ReservationCreateResponse,
    ReservationDetail,
    ReservationFilters,
    ReservationRead,
    ReservationStats,
)
from livraria.schemas.rating import RatingCreate, RatingRead
from livraria.schemas.favorite import FavoriteCreate, FavoriteRead

__all__ = [
    # Base
    "BaseSchema",
    "ErrorResponse",
    "MessageResponse",
    "OperationResponse",
    "PaginatedResponse",
    # Health
    "HealthResponse",
    # User
    "UserCreate",
    "UserRead",
    "UserUpdate",
    # Book
    "BookCreate",
    "BookRead",
    "BookUpdate",
    # Reservation
    "ReservationCreate",
    "ReservationCreateResponse",
    "ReservationDetail",
    "ReservationFilters",
    "ReservationRead",
    "ReservationStats",
    # Rating
    "RatingCreate",
    "RatingRead",
    # Favorite
    "FavoriteCreate",
    "FavoriteRead",
]
