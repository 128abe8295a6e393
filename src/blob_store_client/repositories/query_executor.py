import enum
import logging
import time
from dataclasses import dataclass
from typing import Any, Optional

from sqlalchemy.engine import Engine, RowMapping
from sqlalchemy.exc import DBAPIError, DisconnectionError, OperationalError, SQLAlchemyError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError
from sqlalchemy.sql.base import Executable

from blob_store_client.config import RetryConfig
from blob_store_client.exceptions import BackendError, DatabaseError

logger = logging.getLogger(__name__)

# 08 - соединение, 40 - откат транзакции (deadlock, serialization), 57 - оператор/сервер
_TRANSIENT_SQLSTATE_CLASSES = ("08", "40", "57")
_TRANSIENT_SQLSTATES = {"55P03"}  # lock_not_available
# lock wait timeout, deadlock, server has gone away, lost connection
_TRANSIENT_MYSQL_CODES = {1205, 1213, 2006, 2013}
_TRANSIENT_MARKERS = (
    "database is locked",
    "database table is locked",
    "disk i/o error",
    "deadlock",
    "server closed the connection",
    "connection reset",
    "lost connection",
    "gone away",
    "timed out",
    "timeout",
    "could not connect",
)


class AttemptKind(str, enum.Enum):
    success = "success"
    retryable = "retryable"
    fatal = "fatal"


@dataclass(frozen=True)
class StatementResult:
    rows: tuple[RowMapping, ...] = ()
    rowcount: int = -1

    def first(self) -> Optional[RowMapping]:
        return self.rows[0] if self.rows else None


@dataclass(frozen=True)
class Attempt:
    kind: AttemptKind
    result: Optional[StatementResult] = None
    error: Optional[SQLAlchemyError] = None


@dataclass(frozen=True)
class RetryPolicy:
    """Сколько попыток делать и какие ошибки считать транзиентными."""

    max_attempts: int = 3
    delay_seconds: float = 0.0

    @classmethod
    def from_config(cls, config: RetryConfig) -> "RetryPolicy":
        return cls(max_attempts=config.max_attempts, delay_seconds=config.delay_seconds)

    def classify(self, error: SQLAlchemyError) -> AttemptKind:
        # Обрыв соединения, deadlock, таймауты блокировок и пула
        if isinstance(error, (DisconnectionError, PoolTimeoutError)):
            return AttemptKind.retryable
        if not isinstance(error, DBAPIError):
            return AttemptKind.fatal
        if error.connection_invalidated:
            return AttemptKind.retryable

        orig = error.orig
        sqlstate = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
        if sqlstate:
            if sqlstate.startswith(_TRANSIENT_SQLSTATE_CLASSES) or sqlstate in _TRANSIENT_SQLSTATES:
                return AttemptKind.retryable
            return AttemptKind.fatal

        args = getattr(orig, "args", ())
        if args and isinstance(args[0], int) and args[0] in _TRANSIENT_MYSQL_CODES:
            return AttemptKind.retryable

        # OperationalError покрывает и синтаксис SQLite, поэтому смотрим на текст
        if isinstance(error, OperationalError):
            message = str(orig).lower()
            if any(marker in message for marker in _TRANSIENT_MARKERS):
                return AttemptKind.retryable
        return AttemptKind.fatal

    def should_retry(self, attempt: Attempt, attempt_number: int) -> bool:
        return attempt.kind is AttemptKind.retryable and attempt_number < self.max_attempts


class QueryExecutor:
    """
    Выполняет одно выражение на соединении из пула, с повтором транзиентных ошибок.
    Ничего не знает о файлах; для INSERT + получения id нужно держать своё соединение.
    """

    def __init__(self, engine: Engine, policy: RetryPolicy | None = None):
        self._engine = engine
        self._policy = policy or RetryPolicy()

    @property
    def policy(self) -> RetryPolicy:
        return self._policy

    def execute(self, statement: Executable) -> StatementResult:
        attempt_number = 0
        while True:
            attempt_number += 1
            attempt = self._attempt(statement)
            if attempt.kind is AttemptKind.success:
                return attempt.result

            if self._policy.should_retry(attempt, attempt_number):
                logger.warning(
                    f"Transient backend error (attempt {attempt_number}/{self._policy.max_attempts}): {attempt.error}"
                )
                if self._policy.delay_seconds:
                    time.sleep(self._policy.delay_seconds)
                continue

            if attempt.kind is AttemptKind.retryable:
                logger.error(f"Backend error persisted after {attempt_number} attempts: {attempt.error}")
                raise BackendError(
                    f"Statement failed after {attempt_number} attempts: {attempt.error}"
                ) from attempt.error
            raise DatabaseError(str(attempt.error)) from attempt.error

    def _attempt(self, statement: Executable) -> Attempt:
        try:
            with self._engine.begin() as conn:
                res = conn.execute(statement)
                rows: tuple[Any, ...] = tuple(res.mappings().all()) if res.returns_rows else ()
                return Attempt(AttemptKind.success, result=StatementResult(rows=rows, rowcount=res.rowcount))
        except SQLAlchemyError as e:
            return Attempt(self._policy.classify(e), error=e)
