import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Union

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


@dataclass(frozen=True)
class FileTimes:
    created_at: datetime
    modified_at: datetime


class LocalFilesystem:
    """Локальная файловая система: только импорт и экспорт байтов blob."""

    def exists(self, path: PathLike) -> bool:
        return Path(path).is_file()

    def stat(self, path: PathLike) -> FileTimes:
        st = Path(path).stat()
        # st_birthtime есть не на всех платформах
        created = getattr(st, "st_birthtime", st.st_ctime)
        return FileTimes(
            created_at=datetime.fromtimestamp(created, tz=timezone.utc),
            modified_at=datetime.fromtimestamp(st.st_mtime, tz=timezone.utc),
        )

    def read_all(self, path: PathLike) -> bytes:
        return Path(path).read_bytes()

    def write_all(self, path: PathLike, data: bytes) -> None:
        logger.debug(f"Writing {len(data)} bytes to '{path}'")
        Path(path).write_bytes(data)
