"""
Service para lógica de negócio de Reservation.

Regras de negócio:
    - Período [retirada, devolução] com retirada >= hoje e devolução > retirada
    - Duração máxima: RESERVATION_MAX_WINDOW_DAYS (padrão 30 dias)
    - Sem sobreposição de períodos para o mesmo livro (limites inclusivos)
    - No máximo RESERVATION_MAX_ACTIVE reservas ativas por usuário (padrão 5)
    - Livro fora do catálogo (ativo=False) não aceita reservas
    - Cancelamento só antes da data de retirada
    - Email só pode ser confirmado uma vez

Concorrência:
    A criação trava a linha do usuário e depois a do livro
    (SELECT ... FOR UPDATE, sempre nessa ordem) antes das checagens de
    conflito e de limite. Duas alocações concorrentes para o mesmo livro
    ou para o mesmo usuário são serializadas: a segunda só lê depois do
    commit da primeira e é rejeitada pelas checagens. A constraint de
    exclusão criada pela migration é a última barreira; sua violação vira
    Conflict em db.session.transaction.
"""

from datetime import date
from typing import Any, Callable, Mapping

from sqlalchemy.ext.asyncio import AsyncSession

from livraria.core.cache import cache_service
from livraria.core.exceptions import Conflict, InvalidState, LimitExceeded, NotFound
from livraria.core.logging import get_logger
from livraria.db.session import transaction
from livraria.repositories.book import BookRepository
from livraria.repositories.reservation import ReservationRepository
from livraria.repositories.user import UserRepository
from livraria.schemas.base import PaginatedResponse
from livraria.schemas.reservation import (
    ReservationDetail,
    ReservationFilters,
    ReservationStats,
)
from livraria.services.conflict import ConflictDetector
from livraria.services.validation import ReservationPolicy, validate_reservation_request

logger = get_logger(__name__)


class ReservationService:
    """Service para operações de Reservation."""

    def __init__(
        self,
        db: AsyncSession,
        policy: ReservationPolicy | None = None,
        today: Callable[[], date] = date.today,
    ):
        self.db = db
        self.policy = policy or ReservationPolicy.from_settings()
        self._today = today
        self.reservation_repo = ReservationRepository(db)
        self.user_repo = UserRepository(db)
        self.book_repo = BookRepository(db)
        self.conflict_detector = ConflictDetector(db)

    # ==========================================
    # Create Reservation
    # ==========================================

    async def create_reservation(self, payload: Mapping[str, Any]) -> ReservationDetail:
        """
        Cria uma nova reserva em uma única transação.

        Fluxo:
            1. Valida o pedido (sem escrita)
            2. Busca e trava o usuário; precisa existir e estar ativo
            3. Busca e trava o livro; precisa existir e estar no catálogo
            4. Verifica sobreposição com reservas do livro
            5. Verifica limite de reservas ativas do usuário
            6. Insere a reserva e marca o livro como indisponível
            7. Commit; qualquer falha em 2-6 desfaz tudo

        Args:
            payload: Corpo bruto do pedido

        Returns:
            ReservationDetail com nome do usuário e título do livro

        Raises:
            ValidationError: pedido inválido
            NotFound: usuário ou livro inexistente
            InvalidState: usuário inativo
            Conflict: livro fora do catálogo ou período já reservado
            LimitExceeded: limite de reservas ativas atingido
        """
        today = self._today()

        async with transaction(self.db):
            draft = validate_reservation_request(payload, self.policy, today)

            user = await self.user_repo.get_by_id(draft.usuario_id, for_update=True)
            if user is None:
                raise NotFound("Usuário não encontrado", reason="user_not_found")
            if not user.ativo:
                raise InvalidState(
                    "Usuário inativo. Não é possível fazer reservas.",
                    reason="user_inactive",
                )

            book = await self.book_repo.get_by_id(draft.livro_id, for_update=True)
            if book is None:
                raise NotFound("Livro não encontrado", reason="book_not_found")
            if not book.ativo:
                raise Conflict("Livro indisponível para reserva", reason="book_unavailable")

            conflicts = await self.conflict_detector.find_conflicts(book.id, draft.window)
            if conflicts:
                raise Conflict("Livro já reservado para este período", reason="already_reserved")

            active_count = await self.reservation_repo.count_active_by_user(user.id, today)
            if active_count >= self.policy.max_active_reservations:
                logger.info(
                    f"Usuário {user.id} atingiu o limite de "
                    f"{self.policy.max_active_reservations} reservas ativas"
                )
                raise LimitExceeded(
                    f"Limite de {self.policy.max_active_reservations} reservas ativas atingido",
                )

            reservation = await self.reservation_repo.add(
                usuario_id=user.id,
                livro_id=book.id,
                data_retirada=draft.data_retirada,
                data_devolucao=draft.data_devolucao,
                confirmado_email=draft.confirmado_email,
            )
            book.disponivel = False

        logger.info(
            f"Reserva {reservation.id} criada: usuário {draft.usuario_id}, "
            f"livro {draft.livro_id}, {draft.data_retirada}..{draft.data_devolucao}"
        )
        await cache_service.invalidate_stats()

        return await self.get_reservation(reservation.id)

    # ==========================================
    # Cancel / Confirm
    # ==========================================

    async def cancel_reservation(self, reservation_id: int) -> int:
        """
        Cancela (remove) uma reserva que ainda não começou.

        O flag disponivel do livro é recalculado na mesma transação:
        volta a True se não restar outra reserva ativa para o livro.

        Returns:
            ID da reserva cancelada

        Raises:
            NotFound: reserva inexistente
            InvalidState: data de retirada hoje ou no passado
        """
        today = self._today()

        async with transaction(self.db):
            reservation = await self.reservation_repo.get_by_id(reservation_id, for_update=True)
            if reservation is None:
                raise NotFound("Reserva não encontrada", reason="reservation_not_found")

            if reservation.has_started(today):
                raise InvalidState(
                    "Não é possível cancelar uma reserva que já iniciou",
                    reason="already_started",
                )

            livro_id = reservation.livro_id
            book = await self.book_repo.get_by_id(livro_id, for_update=True)

            await self.reservation_repo.delete(reservation)

            if book is not None:
                book.disponivel = not await self.reservation_repo.book_has_active(livro_id, today)

        logger.info(f"Reserva {reservation_id} cancelada (livro {livro_id})")
        await cache_service.invalidate_stats()
        return reservation_id

    async def confirm_email(self, reservation_id: int) -> int:
        """
        Marca o email da reserva como confirmado.

        A confirmação é única: confirmar de novo é erro, não no-op.

        Raises:
            NotFound: reserva inexistente
            InvalidState: email já confirmado
        """
        async with transaction(self.db):
            reservation = await self.reservation_repo.get_by_id(reservation_id, for_update=True)
            if reservation is None:
                raise NotFound("Reserva não encontrada", reason="reservation_not_found")

            if reservation.confirmado_email:
                raise InvalidState(
                    "Email já foi confirmado anteriormente",
                    reason="already_confirmed",
                )

            reservation.confirmado_email = True

        logger.info(f"Email da reserva {reservation_id} confirmado")
        await cache_service.invalidate_stats()
        return reservation_id

    # ==========================================
    # Queries
    # ==========================================

    async def get_reservation(self, reservation_id: int) -> ReservationDetail:
        """
        Busca uma reserva com dados do usuário e do livro.

        Raises:
            NotFound: reserva inexistente
        """
        async with transaction(self.db):
            reservation = await self.reservation_repo.get_with_relations(reservation_id)
            if reservation is None:
                raise NotFound("Reserva não encontrada", reason="reservation_not_found")
            return ReservationDetail.from_reservation(reservation)

    async def list_reservations(
        self,
        filters: ReservationFilters,
    ) -> PaginatedResponse[ReservationDetail]:
        """Lista reservas filtradas, mais recentes primeiro, com paginação."""
        async with transaction(self.db):
            reservations, total = await self.reservation_repo.search(
                today=self._today(),
                usuario_id=filters.usuario_id,
                livro_id=filters.livro_id,
                ativas=filters.ativas,
                confirmadas=filters.confirmadas,
                pagina=filters.pagina,
                limite=filters.limite,
            )
            itens = [ReservationDetail.from_reservation(r) for r in reservations]

        return PaginatedResponse[ReservationDetail].create(
            itens=itens,
            total=total,
            pagina=filters.pagina,
            limite=filters.limite,
        )

    async def statistics(self) -> ReservationStats:
        """
        Contadores de reservas (total, futuras, em andamento, emails).

        Usa o cache Redis quando disponível.
        """
        cached = await cache_service.get_stats()
        if cached:
            return ReservationStats(**cached)

        async with transaction(self.db):
            counts = await self.reservation_repo.statistics(self._today())

        stats = ReservationStats(**counts)
        await cache_service.set_stats(stats.model_dump())
        return stats
