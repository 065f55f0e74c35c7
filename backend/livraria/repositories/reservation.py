"""
Repository para operações de Reservation no banco de dados.
"""

from datetime import date

from sqlalchemy import and_, case, exists, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from livraria.models.reservation import Reservation
from livraria.repositories.base import BaseRepository


class ReservationRepository(BaseRepository[Reservation]):
    """Repository para operações CRUD de Reservation."""

    def __init__(self, db: AsyncSession):
        super().__init__(Reservation, db)

    async def get_with_relations(self, reservation_id: int) -> Reservation | None:
        """Busca reserva com usuário e livro."""
        result = await self.db.execute(
            select(Reservation)
            .where(Reservation.id == reservation_id)
            .options(
                selectinload(Reservation.user),
                selectinload(Reservation.book),
            )
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def find_overlapping(
        self,
        livro_id: int,
        data_retirada: date,
        data_devolucao: date,
    ) -> list[int]:
        """
        IDs das reservas do livro cujo período cruza [data_retirada, data_devolucao].

        Intervalos fechados [a1, a2] e [b1, b2] se sobrepõem se
        a1 <= b2 AND b1 <= a2, o que cobre também o caso de um período
        totalmente contido no outro.
        """
        result = await self.db.execute(
            select(Reservation.id)
            .where(
                Reservation.livro_id == livro_id,
                Reservation.data_retirada <= data_devolucao,
                Reservation.data_devolucao >= data_retirada,
            )
            .order_by(Reservation.id)
        )
        return list(result.scalars().all())

    async def count_active_by_user(self, usuario_id: int, today: date) -> int:
        """Conta reservas ativas (devolução hoje ou depois) de um usuário."""
        result = await self.db.execute(
            select(func.count(Reservation.id))
            .where(
                Reservation.usuario_id == usuario_id,
                Reservation.data_devolucao >= today,
            )
        )
        return result.scalar_one()

    async def book_has_active(self, livro_id: int, today: date) -> bool:
        """Indica se o livro ainda tem alguma reserva ativa."""
        result = await self.db.execute(
            select(
                exists().where(
                    Reservation.livro_id == livro_id,
                    Reservation.data_devolucao >= today,
                )
            )
        )
        return bool(result.scalar())

    async def search(
        self,
        today: date,
        usuario_id: int | None = None,
        livro_id: int | None = None,
        ativas: bool | None = None,
        confirmadas: bool | None = None,
        pagina: int = 1,
        limite: int = 10,
    ) -> tuple[list[Reservation], int]:
        """
        Busca reservas com filtros e paginação.

        Args:
            today: Data de referência para o filtro de ativas
            usuario_id: Filtro por usuário
            livro_id: Filtro por livro
            ativas: True = devolução >= hoje, False = devolução < hoje
            confirmadas: Filtro por confirmado_email
            pagina: Número da página
            limite: Tamanho da página

        Returns:
            Tupla (lista de reservas, total)
        """
        skip = (pagina - 1) * limite

        conditions = []
        if usuario_id is not None:
            conditions.append(Reservation.usuario_id == usuario_id)
        if livro_id is not None:
            conditions.append(Reservation.livro_id == livro_id)
        if ativas is True:
            conditions.append(Reservation.data_devolucao >= today)
        elif ativas is False:
            conditions.append(Reservation.data_devolucao < today)
        if confirmadas is not None:
            conditions.append(Reservation.confirmado_email.is_(confirmadas))

        count_result = await self.db.execute(
            select(func.count(Reservation.id)).where(*conditions)
        )
        total = count_result.scalar_one()

        result = await self.db.execute(
            select(Reservation)
            .where(*conditions)
            .options(
                selectinload(Reservation.user),
                selectinload(Reservation.book),
            )
            .order_by(Reservation.criado_em.desc(), Reservation.id.desc())
            .offset(skip)
            .limit(limite)
        )
        reservations = list(result.scalars().all())

        return reservations, total

    async def statistics(self, today: date) -> dict[str, int]:
        """
        Contadores agregados de reservas.

        Returns:
            Dict com total_reservas, reservas_futuras, reservas_ativas,
            emails_confirmados e emails_pendentes
        """
        result = await self.db.execute(
            select(
                func.count(Reservation.id).label("total_reservas"),
                func.count(
                    case((Reservation.data_retirada > today, 1))
                ).label("reservas_futuras"),
                func.count(
                    case((
                        and_(
                            Reservation.data_retirada <= today,
                            Reservation.data_devolucao >= today,
                        ),
                        1,
                    ))
                ).label("reservas_ativas"),
                func.count(
                    case((Reservation.confirmado_email.is_(True), 1))
                ).label("emails_confirmados"),
                func.count(
                    case((Reservation.confirmado_email.is_(False), 1))
                ).label("emails_pendentes"),
            )
        )
        row = result.one()
        return {key: int(value or 0) for key, value in row._mapping.items()}
