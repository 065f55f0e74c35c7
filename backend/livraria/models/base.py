"""
Mixins compartilhados pelos models SQLAlchemy.
"""

from datetime import datetime

from sqlalchemy import DateTime, Integer, func
from sqlalchemy.orm import Mapped, mapped_column


class IntIdMixin:
    """Mixin que adiciona ID inteiro autoincremental como primary key."""
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)


class CreatedAtMixin:
    """Mixin que adiciona o timestamp de criação (criado_em)."""
    criado_em: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
