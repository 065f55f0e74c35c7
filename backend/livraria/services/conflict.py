"""
Detecção de conflito entre períodos de reserva.

Um período é o intervalo fechado [retirada, devolução] que a reserva
ocupa para um livro. Dois períodos se sobrepõem quando compartilham ao
menos um dia.
"""

from datetime import date
from typing import NamedTuple

from sqlalchemy.ext.asyncio import AsyncSession

from livraria.core.logging import get_logger
from livraria.repositories.reservation import ReservationRepository

logger = get_logger(__name__)


class DateWindow(NamedTuple):
    """Intervalo fechado de datas [start, end]."""
    start: date
    end: date

    @property
    def days(self) -> int:
        """Duração em dias inteiros (end - start)."""
        return (self.end - self.start).days

    def overlaps(self, other: "DateWindow") -> bool:
        return windows_overlap(self, other)


def windows_overlap(a: DateWindow, b: DateWindow) -> bool:
    """
    Teste de sobreposição de intervalos fechados.

    [a1, a2] e [b1, b2] se sobrepõem se a1 <= b2 e b1 <= a2. O teste é
    simétrico e cobre o caso de um intervalo contido no outro.
    """
    return a.start <= b.end and b.start <= a.end


class ConflictDetector:
    """
    Consulta reservas existentes de um livro que cruzam um período candidato.

    Deve ser chamado dentro da mesma transação do insert, depois do lock
    da linha do livro, para que nenhuma outra alocação concorrente
    insira um período sobreposto entre a checagem e o insert.
    """

    def __init__(self, db: AsyncSession):
        self.reservation_repo = ReservationRepository(db)

    async def find_conflicts(self, livro_id: int, window: DateWindow) -> list[int]:
        """
        Returns:
            IDs das reservas conflitantes (lista vazia = sem conflito)
        """
        conflicts = await self.reservation_repo.find_overlapping(
            livro_id,
            window.start,
            window.end,
        )
        if conflicts:
            logger.info(
                f"Conflito de período para livro {livro_id} "
                f"({window.start}..{window.end}): reservas {conflicts}"
            )
        return conflicts
