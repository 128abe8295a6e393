import logging
from typing import Any, Optional

from sqlalchemy import cast, delete, insert, literal, select, text, update
from sqlalchemy.engine import Engine, RowMapping
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.types import LargeBinary

from blob_store_client.db.base import get_connection, utc_timestamp
from blob_store_client.db.file_orm import FileORM, FILE_META_COLUMNS
from blob_store_client.exceptions import BackendError, DatabaseError, InsertError
from blob_store_client.repositories.query_executor import AttemptKind, QueryExecutor, StatementResult

logger = logging.getLogger(__name__)

files = FileORM.__table__

# Попытки вставки при нулевом id; не зависит от политики повторов executor
INSERT_ATTEMPTS = 3


class FileRepository:
    """Все выражения над таблицей files. Строка всегда адресуется по id."""

    def __init__(self, engine: Engine, executor: QueryExecutor):
        self._engine = engine
        self._executor = executor

    @property
    def executor(self) -> QueryExecutor:
        return self._executor

    def ping(self) -> None:
        self._executor.execute(text("SELECT 1"))

    def fetch(self, file_id: int, include_blob: bool = True) -> Optional[RowMapping]:
        columns = tuple(files.c) if include_blob else FILE_META_COLUMNS
        stmt = select(*columns).where(files.c.id == file_id)
        return self._executor.execute(stmt).first()

    def insert(self, values: dict[str, Any]) -> int:
        """
        INSERT и чтение сгенерированного id на одном и том же соединении.
        Нулевой id означает, что вставка не зарегистрировалась: повторяем всю вставку.
        Ошибки драйвера не повторяем, иначе при потерянном commit можно задвоить строку.
        """
        attempts = INSERT_ATTEMPTS
        for attempt in range(1, attempts + 1):
            try:
                with get_connection(self._engine) as conn:
                    res = conn.execute(insert(FileORM).values(**values))
                    primary_key = res.inserted_primary_key
            except SQLAlchemyError as e:
                if self._executor.policy.classify(e) is AttemptKind.retryable:
                    raise BackendError(f"Failed to insert file '{values.get('name')}': {e}") from e
                raise DatabaseError(f"Failed to insert file '{values.get('name')}': {e}") from e

            new_id = primary_key[0] if primary_key else None
            if new_id:
                return int(new_id)
            logger.warning(f"Insert of '{values.get('name')}' returned no identity (attempt {attempt}/{attempts})")

        logger.error(f"Giving up on inserting '{values.get('name')}' after {attempts} attempts")
        raise InsertError(f"Could not insert file '{values.get('name')}' after {attempts} attempts")

    def append(self, file_id: int, data: bytes) -> StatementResult:
        # Конкатенация, размер и время считаются на сервере одним выражением
        stmt = (
            update(FileORM)
            .where(files.c.id == file_id)
            .values(
                blob=cast(files.c.blob.concat(literal(data, LargeBinary)), LargeBinary),
                size=files.c.size + len(data),
                updated_at=utc_timestamp(),
            )
        )
        return self._executor.execute(stmt)

    def overwrite(self, file_id: int, data: bytes) -> StatementResult:
        stmt = (
            update(FileORM)
            .where(files.c.id == file_id)
            .values(blob=data, size=len(data), updated_at=utc_timestamp())
        )
        return self._executor.execute(stmt)

    def rename(self, file_id: int, name: str) -> StatementResult:
        stmt = (
            update(FileORM)
            .where(files.c.id == file_id)
            .values(name=name, updated_at=utc_timestamp())
        )
        return self._executor.execute(stmt)

    def delete(self, file_id: int) -> StatementResult:
        return self._executor.execute(delete(FileORM).where(files.c.id == file_id))
