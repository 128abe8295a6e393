from __future__ import annotations

import logging
from datetime import datetime
from typing import TYPE_CHECKING, Optional

from blob_store_client.exceptions import CannotEditFrozenFileError, NotFoundError, ValidationError
from blob_store_client.models.file import FileSnapshot, FileState
from blob_store_client.repositories.filesystem import LocalFilesystem, PathLike

if TYPE_CHECKING:
    from blob_store_client.repositories.file_repository import FileRepository

logger = logging.getLogger(__name__)


def to_bytes(data) -> bytes:
    if isinstance(data, str):
        return data.encode("utf-8")
    if isinstance(data, (bytes, bytearray, memoryview)):
        return bytes(data)
    raise ValidationError(f"File data must be bytes or str, got {type(data).__name__}")


class File:
    """
    Файл, хранящийся строкой в таблице files.

    Атрибуты живут в неизменяемом снимке FileSnapshot; после каждой мутации
    снимок заменяется значениями, посчитанными на сервере (size, updated_at).
    После delete() экземпляр замораживается навсегда и любые изменения
    отклоняются без обращения к базе.
    """

    def __init__(
        self,
        snapshot: FileSnapshot,
        repository: FileRepository,
        filesystem: Optional[LocalFilesystem] = None,
    ):
        self._snapshot = snapshot
        self._repo = repository
        self._fs = filesystem or LocalFilesystem()
        self._state = FileState.ACTIVE

    def __repr__(self) -> str:
        return f"<File[{self.id}] name={self.name}>"

    @property
    def snapshot(self) -> FileSnapshot:
        return self._snapshot

    @property
    def state(self) -> FileState:
        return self._state

    @property
    def frozen(self) -> bool:
        return self._state is FileState.FROZEN

    @property
    def id(self) -> int:
        return self._snapshot.id

    @property
    def name(self) -> str:
        return self._snapshot.name

    @property
    def size(self) -> int:
        return int(self._snapshot.size)

    @property
    def blob(self) -> bytes:
        if not self._snapshot.blob_loaded:
            self.reload(include_blob=True)
        return self._snapshot.blob

    @property
    def created_at(self) -> datetime:
        return self._snapshot.created_at

    @property
    def updated_at(self) -> datetime:
        return self._snapshot.updated_at

    def copy(self, path: PathLike) -> None:
        """Сохраняет blob в локальный файл; существующий файл перезаписывается."""
        self._fs.write_all(path, self.blob)

    def append(self, data) -> None:
        """Дописывает данные в конец blob; size и updated_at считает сервер."""
        self._ensure_active("appended to")
        payload = to_bytes(data)
        self._repo.append(self.id, payload)
        # Строку мог параллельно изменить кто-то ещё, поэтому локально blob не склеиваем:
        # он будет перечитан целиком при первом обращении
        self._snapshot = self._snapshot.merged({"blob": None})
        self.reload()

    def overwrite(self, data) -> None:
        """Полностью заменяет содержимое blob."""
        self._ensure_active("overwritten")
        payload = to_bytes(data)
        self._repo.overwrite(self.id, payload)
        self._snapshot = self._snapshot.merged({"blob": payload})
        self.reload()

    def rename(self, name: str) -> None:
        self._ensure_active("renamed")
        if not isinstance(name, str) or not name:
            raise ValidationError("A 'name' must be provided to rename a file")
        self._repo.rename(self.id, name)
        self.reload()

    def delete(self) -> None:
        self._ensure_active("deleted")
        self._repo.delete(self.id)
        self._state = FileState.FROZEN
        logger.info(f"File {self.id} deleted")

    def reload(self, include_blob: bool = False) -> None:
        """Перечитывает строку из базы (по умолчанию без blob) и заменяет снимок."""
        row = self._repo.fetch(self.id, include_blob=include_blob)
        if row is None:
            raise NotFoundError(f"File not found with id '{self.id}'")
        self._snapshot = self._snapshot.merged(dict(row))
        logger.debug(f"File {self.id} reloaded (include_blob={include_blob})")

    def _ensure_active(self, action: str) -> None:
        if self.frozen:
            raise CannotEditFrozenFileError(f"This file has been frozen and cannot be {action}")
