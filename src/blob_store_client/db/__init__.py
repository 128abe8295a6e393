# blob_store_client/db/__init__.py

from .base import Base, UTCDateTime, utc_timestamp, get_connection
from .file_orm import FileORM, FILE_META_COLUMNS


__all__ = [
    "Base",
    "UTCDateTime",
    "utc_timestamp",
    "get_connection",
    "FileORM",
    "FILE_META_COLUMNS",
]
