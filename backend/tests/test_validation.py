"""
Testes unitários da validação de pedidos de reserva.
"""

from datetime import date, datetime, timedelta

import pytest

from livraria.core.exceptions import ValidationError
from livraria.services.validation import (
    ReservationPolicy,
    parse_date,
    parse_id,
    validate_reservation_request,
)

TODAY = date(2026, 3, 10)
POLICY = ReservationPolicy(max_window_days=30, max_active_reservations=5)


def payload(**overrides):
    data = {
        "usuario_id": 1,
        "livro_id": 1,
        "data_retirada": "2026-03-11",
        "data_devolucao": "2026-03-16",
    }
    data.update(overrides)
    return data


def reason_for(data) -> str:
    with pytest.raises(ValidationError) as exc_info:
        validate_reservation_request(data, POLICY, TODAY)
    return exc_info.value.reason


class TestParseHelpers:
    """Conversão de IDs e datas."""

    @pytest.mark.parametrize("value,expected", [
        (7, 7),
        ("42", 42),
    ])
    def test_parse_id_valid(self, value, expected):
        assert parse_id(value) == expected

    @pytest.mark.parametrize("value", ["abc", "", None, 0, -1, "1.5", True, False, [1]])
    def test_parse_id_invalid(self, value):
        assert parse_id(value) is None

    def test_parse_date_accepts_iso_string_and_date(self):
        assert parse_date("2026-03-11") == date(2026, 3, 11)
        assert parse_date(date(2026, 3, 11)) == date(2026, 3, 11)

    def test_parse_date_accepts_midnight_datetime_string(self):
        assert parse_date("2026-03-11T00:00:00") == date(2026, 3, 11)

    @pytest.mark.parametrize("value", [
        "2026-02-30",
        "11/03/2026",
        "amanhã",
        "1792972800",
        "20260311",
        "2026-03-11T10:00:00",
        20260311,
        None,
    ])
    def test_parse_date_invalid(self, value):
        assert parse_date(value) is None


class TestValidateReservationRequest:
    """Ordem e códigos das regras de validação."""

    def test_valid_request_returns_draft(self):
        draft = validate_reservation_request(payload(), POLICY, TODAY)

        assert draft.usuario_id == 1
        assert draft.livro_id == 1
        assert draft.data_retirada == date(2026, 3, 11)
        assert draft.data_devolucao == date(2026, 3, 16)
        assert draft.confirmado_email is False
        assert draft.window.days == 5

    def test_missing_fields_lists_every_missing_field(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_reservation_request(
                {"usuario_id": 1, "data_retirada": "", "data_devolucao": None},
                POLICY,
                TODAY,
            )

        error = exc_info.value
        assert error.reason == "missing_fields"
        assert error.fields == ["livro_id", "data_retirada", "data_devolucao"]

    def test_invalid_id(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_reservation_request(payload(livro_id="abc"), POLICY, TODAY)

        assert exc_info.value.reason == "invalid_id"
        assert exc_info.value.fields == ["livro_id"]

    def test_boolean_id_is_rejected(self):
        assert reason_for(payload(usuario_id=True)) == "invalid_id"

    def test_invalid_email_flag(self):
        assert reason_for(payload(confirmado_email="sim")) == "invalid_email_flag"

    def test_email_flag_true_is_kept(self):
        draft = validate_reservation_request(payload(confirmado_email=True), POLICY, TODAY)
        assert draft.confirmado_email is True

    def test_invalid_date(self):
        assert reason_for(payload(data_devolucao="2026-13-01")) == "invalid_date"

    def test_pickup_in_past(self):
        assert reason_for(payload(data_retirada="2026-03-09")) == "pickup_in_past"

    def test_pickup_today_is_allowed(self):
        draft = validate_reservation_request(
            payload(data_retirada=TODAY.isoformat()),
            POLICY,
            TODAY,
        )
        assert draft.data_retirada == TODAY

    def test_return_equal_to_pickup(self):
        assert reason_for(payload(data_devolucao="2026-03-11")) == "return_before_pickup"

    def test_return_before_pickup(self):
        assert reason_for(payload(data_devolucao="2026-03-10")) == "return_before_pickup"

    def test_window_at_limit_is_allowed(self):
        pickup = TODAY + timedelta(days=1)
        draft = validate_reservation_request(
            payload(
                data_retirada=pickup.isoformat(),
                data_devolucao=(pickup + timedelta(days=30)).isoformat(),
            ),
            POLICY,
            TODAY,
        )
        assert draft.window.days == 30

    def test_window_too_long(self):
        pickup = TODAY + timedelta(days=1)
        data = payload(
            data_retirada=pickup.isoformat(),
            data_devolucao=(pickup + timedelta(days=31)).isoformat(),
        )
        assert reason_for(data) == "window_too_long"

    def test_policy_controls_window_limit(self):
        short = ReservationPolicy(max_window_days=3, max_active_reservations=5)
        with pytest.raises(ValidationError) as exc_info:
            validate_reservation_request(payload(), short, TODAY)
        assert exc_info.value.reason == "window_too_long"

    def test_first_failure_wins(self):
        # ID inválido e data no passado: o ID é checado antes
        data = payload(usuario_id="x", data_retirada="2020-01-01")
        assert reason_for(data) == "invalid_id"

    def test_accepts_date_objects(self):
        draft = validate_reservation_request(
            payload(
                data_retirada=date(2026, 3, 12),
                data_devolucao=datetime(2026, 3, 14).date(),
            ),
            POLICY,
            TODAY,
        )
        assert draft.window.days == 2
