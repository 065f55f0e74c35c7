"""
Erros de domínio da aplicação.

Os services levantam apenas subclasses de LibraryError; a conversão para
resposta HTTP acontece uma única vez, no handler registrado em main.py.

Taxonomia:
    - ValidationError (400): entrada ausente, malformada ou fora da política
    - NotFound (404): usuário, livro ou reserva inexistente
    - Conflict (409): período sobreposto, livro indisponível, duplicidade
    - LimitExceeded (400): limite de reservas ativas atingido
    - InvalidState (400): cancelar reserva iniciada, reconfirmar email
    - StorageError (500): falha inesperada do banco
"""

from sqlalchemy.exc import DBAPIError, IntegrityError, SQLAlchemyError

# SQLSTATEs do PostgreSQL tratados explicitamente
PG_FOREIGN_KEY_VIOLATION = "23503"
PG_UNIQUE_VIOLATION = "23505"
PG_EXCLUSION_VIOLATION = "23P01"
PG_SERIALIZATION_FAILURE = "40001"
PG_DEADLOCK_DETECTED = "40P01"


class LibraryError(Exception):
    """
    Base dos erros de domínio.

    Attributes:
        status_code: Status HTTP correspondente
        error: Tipo do erro (estável, legível por máquina)
        reason: Código específico da falha
        message: Mensagem para o cliente
        fields: Campos envolvidos (apenas para validação)
    """

    status_code: int = 500
    error: str = "error"
    default_reason: str = "error"

    def __init__(
        self,
        message: str,
        reason: str | None = None,
        fields: list[str] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.reason = reason or self.default_reason
        self.fields = fields


class ValidationError(LibraryError):
    status_code = 400
    error = "validation_error"
    default_reason = "invalid_request"


class NotFound(LibraryError):
    status_code = 404
    error = "not_found"
    default_reason = "not_found"


class Conflict(LibraryError):
    status_code = 409
    error = "conflict"
    default_reason = "conflict"


class LimitExceeded(LibraryError):
    status_code = 400
    error = "limit_exceeded"
    default_reason = "limit_exceeded"


class InvalidState(LibraryError):
    status_code = 400
    error = "invalid_state"
    default_reason = "invalid_state"


class StorageError(LibraryError):
    status_code = 500
    error = "storage_error"
    default_reason = "storage_error"

    def __init__(self, message: str = "Erro interno ao acessar o banco de dados", detail: str | None = None):
        super().__init__(message)
        self.detail = detail


def _sqlstate(exc: DBAPIError) -> str | None:
    # O adaptador async do SQLAlchemy pode embrulhar o erro do asyncpg;
    # o SQLSTATE fica no erro original (__cause__)
    orig = getattr(exc, "orig", None)
    for candidate in (orig, getattr(orig, "__cause__", None)):
        code = getattr(candidate, "sqlstate", None) or getattr(candidate, "pgcode", None)
        if code:
            return code
    return None


def translate_storage_error(exc: SQLAlchemyError) -> LibraryError:
    """
    Converte um erro do SQLAlchemy no erro de domínio mais próximo.

    - Violação de FK -> NotFound
    - Violação da constraint de exclusão (períodos sobrepostos) -> Conflict
    - Violação de unicidade -> Conflict
    - Falha de serialização ou deadlock -> Conflict (a outra transação venceu)
    - Qualquer outro erro -> StorageError
    """
    if isinstance(exc, DBAPIError):
        code = _sqlstate(exc)
        text = str(exc.orig).lower() if exc.orig is not None else str(exc).lower()

        if code == PG_FOREIGN_KEY_VIOLATION or (
            isinstance(exc, IntegrityError) and "foreign key" in text
        ):
            return NotFound("Usuário ou livro não encontrado", reason="reference_not_found")

        if code in (PG_SERIALIZATION_FAILURE, PG_DEADLOCK_DETECTED):
            return Conflict(
                "Operação concorrente detectada. Tente novamente.",
                reason="concurrent_update",
            )

        if code == PG_EXCLUSION_VIOLATION:
            return Conflict("Livro já reservado para este período", reason="already_reserved")

        if isinstance(exc, IntegrityError) or code == PG_UNIQUE_VIOLATION:
            return Conflict("Registro duplicado", reason="duplicate")

    return StorageError(detail=str(exc))
