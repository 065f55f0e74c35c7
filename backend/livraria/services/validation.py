"""
Validação de pedidos de reserva.

Funções puras: recebem o corpo bruto do pedido, a política e a data de
hoje, e devolvem um ReservationDraft normalizado ou levantam
ValidationError. A ordem das checagens é fixa e a primeira falha
interrompe a validação:

    1. Campos obrigatórios presentes        -> missing_fields
    2. IDs numéricos válidos                -> invalid_id
    3. confirmado_email booleano, se enviado -> invalid_email_flag
    4. Datas válidas                        -> invalid_date
    5. Retirada não pode ser no passado     -> pickup_in_past
    6. Devolução depois da retirada         -> return_before_pickup
    7. Duração dentro do limite             -> window_too_long
"""

import re
from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Any, Mapping

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from livraria.core.config import Settings, get_settings
from livraria.core.exceptions import ValidationError
from livraria.services.conflict import DateWindow

REQUIRED_FIELDS = {
    "usuario_id": "ID do usuário",
    "livro_id": "ID do livro",
    "data_retirada": "Data de retirada",
    "data_devolucao": "Data de devolução",
}

_int_adapter = TypeAdapter(int)
_date_adapter = TypeAdapter(date)
_datetime_adapter = TypeAdapter(datetime)

# Datas em string precisam começar por YYYY-MM-DD; números (timestamps) não valem
_ISO_DATE_PREFIX = re.compile(r"\d{4}-\d{2}-\d{2}")


@dataclass(frozen=True)
class ReservationPolicy:
    """
    Política de reservas.

    Attributes:
        max_window_days: Duração máxima de uma reserva, em dias
        max_active_reservations: Reservas ativas permitidas por usuário
    """
    max_window_days: int = 30
    max_active_reservations: int = 5

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "ReservationPolicy":
        settings = settings or get_settings()
        return cls(
            max_window_days=settings.RESERVATION_MAX_WINDOW_DAYS,
            max_active_reservations=settings.RESERVATION_MAX_ACTIVE,
        )


@dataclass(frozen=True)
class ReservationDraft:
    """Pedido de reserva já validado e normalizado."""
    usuario_id: int
    livro_id: int
    data_retirada: date
    data_devolucao: date
    confirmado_email: bool = False

    @property
    def window(self) -> DateWindow:
        return DateWindow(self.data_retirada, self.data_devolucao)


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def missing_fields(payload: Mapping[str, Any]) -> list[str]:
    """Nomes dos campos obrigatórios ausentes, nulos ou vazios."""
    return [field for field in REQUIRED_FIELDS if _is_blank(payload.get(field))]


def parse_id(value: Any) -> int | None:
    """Converte um ID para inteiro positivo; None se inválido."""
    if isinstance(value, bool):
        return None
    try:
        parsed = _int_adapter.validate_python(value)
    except PydanticValidationError:
        return None
    return parsed if parsed > 0 else None


def parse_date(value: Any) -> date | None:
    """
    Converte uma data de calendário; None se inválida.

    Aceita date ou string ISO (YYYY-MM-DD, ou data/hora com horário zerado).
    """
    if not isinstance(value, (str, date)):
        return None
    if isinstance(value, str) and not _ISO_DATE_PREFIX.match(value):
        return None
    try:
        return _date_adapter.validate_python(value)
    except PydanticValidationError:
        pass
    # Data/hora ISO: o prefixo precisa ser uma data e o horário, zero
    if not isinstance(value, str) or len(value) <= 10:
        return None
    try:
        _date_adapter.validate_python(value[:10])
        moment = _datetime_adapter.validate_python(value)
    except PydanticValidationError:
        return None
    return moment.date() if moment.time() == time.min else None


def validate_reservation_request(
    payload: Mapping[str, Any],
    policy: ReservationPolicy,
    today: date,
) -> ReservationDraft:
    """
    Valida um pedido de criação de reserva.

    Args:
        payload: Corpo bruto (usuario_id, livro_id, data_retirada,
            data_devolucao, confirmado_email opcional)
        policy: Limites de duração e de reservas ativas
        today: Data de referência (só a data, sem horário)

    Returns:
        ReservationDraft normalizado

    Raises:
        ValidationError: com reason indicando a primeira regra violada
    """
    missing = missing_fields(payload)
    if missing:
        raise ValidationError(
            "Campos obrigatórios faltando: "
            + ", ".join(REQUIRED_FIELDS[field] for field in missing),
            reason="missing_fields",
            fields=missing,
        )

    usuario_id = parse_id(payload["usuario_id"])
    livro_id = parse_id(payload["livro_id"])
    if usuario_id is None or livro_id is None:
        raise ValidationError(
            "IDs devem ser números válidos",
            reason="invalid_id",
            fields=[
                field
                for field, parsed in (("usuario_id", usuario_id), ("livro_id", livro_id))
                if parsed is None
            ],
        )

    confirmado_email = payload.get("confirmado_email")
    if confirmado_email is None:
        confirmado_email = False
    elif not isinstance(confirmado_email, bool):
        raise ValidationError(
            "confirmado_email deve ser true ou false",
            reason="invalid_email_flag",
            fields=["confirmado_email"],
        )

    data_retirada = parse_date(payload["data_retirada"])
    data_devolucao = parse_date(payload["data_devolucao"])
    if data_retirada is None or data_devolucao is None:
        raise ValidationError(
            "Datas fornecidas são inválidas. Use YYYY-MM-DD",
            reason="invalid_date",
            fields=[
                field
                for field, parsed in (
                    ("data_retirada", data_retirada),
                    ("data_devolucao", data_devolucao),
                )
                if parsed is None
            ],
        )

    if data_retirada < today:
        raise ValidationError(
            "Data de retirada não pode ser no passado",
            reason="pickup_in_past",
            fields=["data_retirada"],
        )

    if data_devolucao <= data_retirada:
        raise ValidationError(
            "Data de devolução deve ser após a data de retirada",
            reason="return_before_pickup",
            fields=["data_devolucao"],
        )

    draft = ReservationDraft(
        usuario_id=usuario_id,
        livro_id=livro_id,
        data_retirada=data_retirada,
        data_devolucao=data_devolucao,
        confirmado_email=confirmado_email,
    )

    if draft.window.days > policy.max_window_days:
        raise ValidationError(
            f"Período de reserva não pode exceder {policy.max_window_days} dias",
            reason="window_too_long",
            fields=["data_retirada", "data_devolucao"],
        )

    return draft
