# Файл: src/blob_store_client/__init__.py

from typing import Optional
from sqlalchemy import create_engine
from .client import BlobStoreClient, coerce_file_id
from .file import File
from .config import get_settings, BlobStoreConfig, DatabaseConfig, RetryConfig
from .models import FileState, FileSnapshot
from .repositories import FileRepository, LocalFilesystem, QueryExecutor, RetryPolicy

from .exceptions import *

def create_blob_store_client(config: Optional[BlobStoreConfig] = None) -> BlobStoreClient:
    """
    Фабричная функция для создания и конфигурации BlobStoreClient.

    :param config: Единый объект с настройками.
                   Если не предоставлен, используются переменные окружения.
    :return: Сконфигурированный экземпляр BlobStoreClient.
    """
    if config is None:
        config = get_settings().to_config()

    engine = create_engine(config.database.get_dsn(), **config.database.engine_options())

    executor = QueryExecutor(engine, RetryPolicy.from_config(config.retry))
    file_repo = FileRepository(engine, executor)

    return BlobStoreClient(
        engine=engine,
        file_repo=file_repo,
        filesystem=LocalFilesystem(),
        maximum_file_size=config.maximum_file_size,
    )

__all__ = [
    "BlobStoreClient", "create_blob_store_client", "coerce_file_id", "File",
    "BlobStoreConfig", "DatabaseConfig", "RetryConfig",
    "FileState", "FileSnapshot",
    "FileRepository", "LocalFilesystem", "QueryExecutor", "RetryPolicy",
    "BlobStoreError", "DatabaseError", "BackendError", "NotFoundError", "ValidationError",
    "DataTooLargeError", "CannotEditFrozenFileError", "InsertError",
]
