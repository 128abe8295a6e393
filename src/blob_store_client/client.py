import logging
import re
from datetime import datetime
from pathlib import Path
from typing import Optional

import pydantic
from sqlalchemy.engine import Engine

from blob_store_client.db import Base
from blob_store_client.exceptions import DatabaseError, DataTooLargeError, NotFoundError, ValidationError
from blob_store_client.file import File, to_bytes
from blob_store_client.models import FileCreate, FileSnapshot
from blob_store_client.repositories import FileRepository, LocalFilesystem
from blob_store_client.repositories.filesystem import PathLike

logger = logging.getLogger(__name__)

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")

# Диапазон BIGINT: за его пределами строки всё равно нет
_ID_MIN, _ID_MAX = -(2**63), 2**63 - 1


def coerce_file_id(value) -> int:
    """
    Приводит идентификатор к int: "12abc" -> 12, "abc" -> 0, 3.7 -> 3.
    В запрос id всегда уходит параметром, никогда не текстом.
    """
    file_id = _parse_file_id(value)
    return file_id if _ID_MIN <= file_id <= _ID_MAX else 0


def _parse_file_id(value) -> int:
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value == value and abs(value) != float("inf") else 0
    if isinstance(value, (str, bytes)):
        text = value.decode("utf-8", "ignore") if isinstance(value, bytes) else value
        m = _LEADING_INT.match(text)
        return int(m.group(1)) if m else 0
    return 0


class BlobStoreClient:
    """
    Единая точка доступа: поиск, создание и импорт файлов.
    Изменения существующих файлов делаются через методы объекта File.
    """

    def __init__(
        self,
        engine: Engine,
        file_repo: FileRepository,
        filesystem: LocalFilesystem | None = None,
        maximum_file_size: int = 100 * 1024 * 1024,
    ):
        self._engine = engine
        self.files = file_repo
        self.fs = filesystem or LocalFilesystem()
        self.maximum_file_size = maximum_file_size

    def init_schema(self) -> None:
        """Создает таблицу files, если её ещё нет."""
        Base.metadata.create_all(self._engine)

    def check_connection(self) -> dict[str, str]:
        try:
            self.files.ping()
            return {"database": "ok"}
        except DatabaseError as e:
            return {"database": f"failed: {e}"}

    def close(self) -> None:
        self._engine.dispose()

    def find_by_id(self, file_id) -> File:
        file_id = coerce_file_id(file_id)
        row = self.files.fetch(file_id, include_blob=True)
        if row is None:
            raise NotFoundError(f"File not found with id '{file_id}'")
        return self._wrap(FileSnapshot.model_validate(dict(row)))

    def add(
        self,
        name: str,
        data=b"",
        *,
        size: Optional[int] = None,
        created_at: Optional[datetime] = None,
        updated_at: Optional[datetime] = None,
    ) -> File:
        """
        Вставляет новый файл и возвращает File без повторного чтения из базы:
        все поля, кроме id, уже известны на клиенте.
        """
        if not isinstance(name, str) or not name:
            raise ValidationError("A 'name' must be provided to add a new file")
        payload = to_bytes(data)
        if len(payload) > self.maximum_file_size:
            raise DataTooLargeError(
                f"Data provided was {len(payload)} and the maximum size is {self.maximum_file_size}"
            )

        overrides = {"size": size, "created_at": created_at, "updated_at": updated_at}
        try:
            attributes = FileCreate(
                name=name,
                blob=payload,
                **{k: v for k, v in overrides.items() if v is not None},
            ).model_dump()
        except pydantic.ValidationError as e:
            raise ValidationError(f"Invalid attributes for file '{name}': {e}") from e

        new_id = self.files.insert(attributes)
        logger.info(f"Added file '{name}' with id {new_id} ({len(payload)} bytes)")
        return self._wrap(FileSnapshot(id=new_id, **attributes))

    def add_from_path(self, path: PathLike) -> File:
        """Импортирует локальный файл, сохраняя его время создания и изменения."""
        if not self.fs.exists(path):
            raise ValidationError(f"File does not exist at '{path}' to add")
        times = self.fs.stat(path)
        data = self.fs.read_all(path)
        return self.add(
            Path(path).name,
            data,
            created_at=times.created_at,
            updated_at=times.modified_at,
        )

    def _wrap(self, snapshot: FileSnapshot) -> File:
        return File(snapshot, self.files, self.fs)
