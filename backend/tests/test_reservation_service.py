"""
Testes de integração do ReservationService.

Fluxos completos de reserva contra o banco de teste.
"""

from datetime import timedelta
from unittest.mock import patch

import pytest
from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError, OperationalError

from livraria.core.exceptions import (
    Conflict,
    InvalidState,
    LimitExceeded,
    NotFound,
    StorageError,
    ValidationError,
)
from livraria.models.book import Book
from livraria.models.reservation import Reservation
from livraria.models.user import User
from livraria.repositories.reservation import ReservationRepository
from livraria.schemas.reservation import ReservationFilters
from livraria.services.reservation import ReservationService
from livraria.services.validation import ReservationPolicy


def request(usuario_id, livro_id, start, end, **extra):
    data = {
        "usuario_id": usuario_id,
        "livro_id": livro_id,
        "data_retirada": start.isoformat(),
        "data_devolucao": end.isoformat(),
    }
    data.update(extra)
    return data


async def count_reservations(session_factory) -> int:
    async with session_factory() as session:
        result = await session.execute(select(func.count(Reservation.id)))
        return result.scalar_one()


async def load_book(session_factory, book_id: int) -> Book:
    async with session_factory() as session:
        return await session.get(Book, book_id)


@pytest.fixture
def service(test_db, today):
    return ReservationService(
        test_db,
        policy=ReservationPolicy(max_window_days=30, max_active_reservations=5),
        today=lambda: today,
    )


class TestCreateReservation:
    """Fluxo de alocação."""

    @pytest.mark.anyio
    async def test_create_returns_enriched_reservation(
        self, service, session_factory, make_user, make_book, today
    ):
        user = await make_user(nome="Ana Souza")
        book = await make_book(titulo="Dom Casmurro")
        start = today + timedelta(days=1)

        reservation = await service.create_reservation(
            request(user.id, book.id, start, start + timedelta(days=5))
        )

        assert reservation.id is not None
        assert reservation.usuario_nome == "Ana Souza"
        assert reservation.livro_titulo.startswith("Dom Casmurro")
        assert reservation.data_retirada == start
        assert reservation.confirmado_email is False

        stored_book = await load_book(session_factory, book.id)
        assert stored_book.disponivel is False

    @pytest.mark.anyio
    async def test_overlap_scenario(self, service, make_user, make_book, today):
        """Amanhã..+5 ok; +2..+3 conflita; +10..+12 ok."""
        user = await make_user()
        book = await make_book()
        tomorrow = today + timedelta(days=1)

        await service.create_reservation(
            request(user.id, book.id, tomorrow, tomorrow + timedelta(days=5))
        )

        with pytest.raises(Conflict) as exc_info:
            await service.create_reservation(
                request(user.id, book.id, tomorrow + timedelta(days=2), tomorrow + timedelta(days=3))
            )
        assert exc_info.value.reason == "already_reserved"

        # Livro indisponível (disponivel=False) ainda aceita período livre
        later = await service.create_reservation(
            request(user.id, book.id, tomorrow + timedelta(days=10), tomorrow + timedelta(days=12))
        )
        assert later.id is not None

    @pytest.mark.anyio
    async def test_touching_boundaries_conflict(self, service, make_user, make_book, today):
        """Devolução no mesmo dia da retirada de outra reserva é conflito."""
        user = await make_user()
        other = await make_user()
        book = await make_book()
        start = today + timedelta(days=1)

        await service.create_reservation(request(user.id, book.id, start, start + timedelta(days=3)))

        with pytest.raises(Conflict):
            await service.create_reservation(
                request(other.id, book.id, start + timedelta(days=3), start + timedelta(days=6))
            )

    @pytest.mark.anyio
    async def test_pickup_in_past_rejected(self, service, session_factory, make_user, make_book, today):
        user = await make_user()
        book = await make_book()

        with pytest.raises(ValidationError) as exc_info:
            await service.create_reservation(
                request(user.id, book.id, today - timedelta(days=1), today + timedelta(days=3))
            )

        assert exc_info.value.reason == "pickup_in_past"
        assert await count_reservations(session_factory) == 0

    @pytest.mark.anyio
    async def test_active_reservation_limit(self, service, session_factory, make_user, make_book, today):
        user = await make_user()
        book = await make_book()

        for i in range(5):
            start = today + timedelta(days=1 + i * 2)
            await service.create_reservation(request(user.id, book.id, start, start + timedelta(days=1)))

        start = today + timedelta(days=20)
        with pytest.raises(LimitExceeded) as exc_info:
            await service.create_reservation(request(user.id, book.id, start, start + timedelta(days=1)))

        assert exc_info.value.reason == "limit_exceeded"
        assert exc_info.value.status_code == 400
        assert await count_reservations(session_factory) == 5

    @pytest.mark.anyio
    async def test_finished_reservations_do_not_count(
        self, service, make_user, make_book, make_reservation, today
    ):
        user = await make_user()
        book = await make_book()
        for i in range(5):
            old_start = today - timedelta(days=30 - i * 4)
            await make_reservation(user.id, book.id, old_start, old_start + timedelta(days=2))

        start = today + timedelta(days=1)
        reservation = await service.create_reservation(
            request(user.id, book.id, start, start + timedelta(days=2))
        )
        assert reservation.id is not None

    @pytest.mark.anyio
    async def test_reservation_ending_today_counts_as_active(
        self, make_user, make_book, make_reservation, test_db, today
    ):
        user = await make_user()
        book = await make_book()
        await make_reservation(user.id, book.id, today - timedelta(days=3), today)

        limited = ReservationService(
            test_db,
            policy=ReservationPolicy(max_window_days=30, max_active_reservations=1),
            today=lambda: today,
        )
        start = today + timedelta(days=2)
        with pytest.raises(LimitExceeded):
            await limited.create_reservation(request(user.id, book.id, start, start + timedelta(days=1)))

    @pytest.mark.anyio
    async def test_user_not_found(self, service, make_book, today):
        book = await make_book()
        start = today + timedelta(days=1)

        with pytest.raises(NotFound) as exc_info:
            await service.create_reservation(request(999, book.id, start, start + timedelta(days=1)))

        assert exc_info.value.reason == "user_not_found"

    @pytest.mark.anyio
    async def test_book_not_found(self, service, make_user, today):
        user = await make_user()
        start = today + timedelta(days=1)

        with pytest.raises(NotFound) as exc_info:
            await service.create_reservation(request(user.id, 999, start, start + timedelta(days=1)))

        assert exc_info.value.reason == "book_not_found"

    @pytest.mark.anyio
    async def test_inactive_user(self, service, make_user, make_book, today):
        user = await make_user(ativo=False)
        book = await make_book()
        start = today + timedelta(days=1)

        with pytest.raises(InvalidState) as exc_info:
            await service.create_reservation(request(user.id, book.id, start, start + timedelta(days=1)))

        assert exc_info.value.reason == "user_inactive"

    @pytest.mark.anyio
    async def test_locked_user_is_reread_from_database(
        self, service, test_db, session_factory, make_user, make_book, today
    ):
        user = await make_user()
        book = await make_book()
        start = today + timedelta(days=1)

        # Usuário fica na identity map da sessão do service ainda ativo
        cached = await test_db.get(User, user.id)
        assert cached.ativo is True

        async with session_factory() as other:
            await other.execute(update(User).where(User.id == user.id).values(ativo=False))
            await other.commit()

        with pytest.raises(InvalidState) as exc_info:
            await service.create_reservation(request(user.id, book.id, start, start + timedelta(days=1)))

        assert exc_info.value.reason == "user_inactive"
        assert await count_reservations(session_factory) == 0

    @pytest.mark.anyio
    async def test_withdrawn_book(self, service, make_user, make_book, today):
        user = await make_user()
        book = await make_book(ativo=False)
        start = today + timedelta(days=1)

        with pytest.raises(Conflict) as exc_info:
            await service.create_reservation(request(user.id, book.id, start, start + timedelta(days=1)))

        assert exc_info.value.reason == "book_unavailable"

    @pytest.mark.anyio
    async def test_confirmado_email_on_create(self, service, make_user, make_book, today):
        user = await make_user()
        book = await make_book()
        start = today + timedelta(days=1)

        reservation = await service.create_reservation(
            request(user.id, book.id, start, start + timedelta(days=1), confirmado_email=True)
        )

        assert reservation.confirmado_email is True


class TestStorageFailures:
    """Erros do banco durante a alocação são traduzidos e desfeitos."""

    @pytest.mark.anyio
    async def test_unexpected_error_becomes_storage_error(
        self, service, session_factory, make_user, make_book, today
    ):
        user = await make_user()
        book = await make_book()
        start = today + timedelta(days=1)

        failure = OperationalError("INSERT INTO reservas", {}, Exception("disk I/O error"))
        with patch.object(ReservationRepository, "add", side_effect=failure):
            with pytest.raises(StorageError) as exc_info:
                await service.create_reservation(
                    request(user.id, book.id, start, start + timedelta(days=1))
                )

        assert exc_info.value.status_code == 500
        assert "disk I/O error" in exc_info.value.detail
        assert await count_reservations(session_factory) == 0
        assert (await load_book(session_factory, book.id)).disponivel is True

    @pytest.mark.anyio
    async def test_integrity_error_becomes_conflict(self, service, make_user, make_book, today):
        user = await make_user()
        book = await make_book()
        start = today + timedelta(days=1)

        failure = IntegrityError("INSERT INTO reservas", {}, Exception("UNIQUE constraint failed"))
        with patch.object(ReservationRepository, "add", side_effect=failure):
            with pytest.raises(Conflict):
                await service.create_reservation(
                    request(user.id, book.id, start, start + timedelta(days=1))
                )


class TestCancelReservation:
    """Cancelamento."""

    @pytest.mark.anyio
    async def test_cancel_then_recreate_same_window(
        self, service, session_factory, make_user, make_book, today
    ):
        user = await make_user()
        book = await make_book()
        start = today + timedelta(days=3)
        data = request(user.id, book.id, start, start + timedelta(days=4))

        first = await service.create_reservation(data)
        assert await service.cancel_reservation(first.id) == first.id
        assert (await load_book(session_factory, book.id)).disponivel is True

        second = await service.create_reservation(data)
        assert second.id != first.id
        assert await count_reservations(session_factory) == 1

    @pytest.mark.anyio
    async def test_cancel_keeps_book_unavailable_with_other_active(
        self, service, session_factory, make_user, make_book, today
    ):
        user = await make_user()
        book = await make_book()
        start = today + timedelta(days=1)

        first = await service.create_reservation(request(user.id, book.id, start, start + timedelta(days=2)))
        await service.create_reservation(
            request(user.id, book.id, start + timedelta(days=5), start + timedelta(days=7))
        )

        await service.cancel_reservation(first.id)

        assert (await load_book(session_factory, book.id)).disponivel is False

    @pytest.mark.anyio
    async def test_cancel_started_reservation_rejected(
        self, service, session_factory, make_user, make_book, make_reservation, today
    ):
        user = await make_user()
        book = await make_book()
        started = await make_reservation(user.id, book.id, today, today + timedelta(days=3))

        with pytest.raises(InvalidState) as exc_info:
            await service.cancel_reservation(started.id)

        assert exc_info.value.reason == "already_started"
        assert await count_reservations(session_factory) == 1

    @pytest.mark.anyio
    async def test_cancel_not_found(self, service):
        with pytest.raises(NotFound) as exc_info:
            await service.cancel_reservation(12345)

        assert exc_info.value.reason == "reservation_not_found"


class TestConfirmEmail:
    """Confirmação de email."""

    @pytest.mark.anyio
    async def test_confirm_twice(self, service, make_user, make_book, today):
        user = await make_user()
        book = await make_book()
        start = today + timedelta(days=1)
        reservation = await service.create_reservation(
            request(user.id, book.id, start, start + timedelta(days=1))
        )

        assert await service.confirm_email(reservation.id) == reservation.id

        with pytest.raises(InvalidState) as exc_info:
            await service.confirm_email(reservation.id)
        assert exc_info.value.reason == "already_confirmed"

        stored = await service.get_reservation(reservation.id)
        assert stored.confirmado_email is True

    @pytest.mark.anyio
    async def test_confirm_not_found(self, service):
        with pytest.raises(NotFound):
            await service.confirm_email(999)


class TestQueries:
    """Consulta, listagem e estatísticas."""

    @pytest.mark.anyio
    async def test_get_reservation_not_found(self, service):
        with pytest.raises(NotFound):
            await service.get_reservation(999)

    @pytest.mark.anyio
    async def test_list_with_filters_and_pagination(
        self, service, make_user, make_book, make_reservation, today
    ):
        ana = await make_user(nome="Ana")
        bruno = await make_user(nome="Bruno")
        book = await make_book()
        other_book = await make_book()

        # Reserva já encerrada (inativa) da Ana
        await make_reservation(ana.id, book.id, today - timedelta(days=10), today - timedelta(days=8))
        for i in range(3):
            start = today + timedelta(days=1 + i * 3)
            await service.create_reservation(request(ana.id, book.id, start, start + timedelta(days=1)))
        start = today + timedelta(days=1)
        await service.create_reservation(
            request(bruno.id, other_book.id, start, start + timedelta(days=1), confirmado_email=True)
        )

        page = await service.list_reservations(ReservationFilters(usuario_id=ana.id, limite=2))
        assert page.total == 4
        assert page.paginas == 2
        assert len(page.itens) == 2
        assert all(item.usuario_nome == "Ana" for item in page.itens)

        active = await service.list_reservations(ReservationFilters(usuario_id=ana.id, ativas=True))
        assert active.total == 3

        finished = await service.list_reservations(ReservationFilters(ativas=False))
        assert finished.total == 1

        confirmed = await service.list_reservations(ReservationFilters(confirmadas=True))
        assert confirmed.total == 1
        assert confirmed.itens[0].usuario_id == bruno.id

        by_book = await service.list_reservations(ReservationFilters(livro_id=other_book.id))
        assert [item.livro_id for item in by_book.itens] == [other_book.id]

    @pytest.mark.anyio
    async def test_list_newest_first(self, service, make_user, make_book, today):
        user = await make_user()
        book = await make_book()
        ids = []
        for i in range(3):
            start = today + timedelta(days=1 + i * 3)
            created = await service.create_reservation(
                request(user.id, book.id, start, start + timedelta(days=1))
            )
            ids.append(created.id)

        page = await service.list_reservations(ReservationFilters())

        assert [item.id for item in page.itens] == list(reversed(ids))

    @pytest.mark.anyio
    async def test_statistics(self, service, make_user, make_book, make_reservation, today):
        user = await make_user()
        book = await make_book()
        await make_reservation(user.id, book.id, today - timedelta(days=2), today + timedelta(days=2))
        await make_reservation(
            user.id, book.id, today + timedelta(days=5), today + timedelta(days=6), confirmado_email=True
        )
        await make_reservation(user.id, book.id, today - timedelta(days=20), today - timedelta(days=15))

        stats = await service.statistics()

        assert stats.total_reservas == 3
        assert stats.reservas_futuras == 1
        assert stats.reservas_ativas == 1
        assert stats.emails_confirmados == 1
        assert stats.emails_pendentes == 2
