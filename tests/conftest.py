import logging
import pytest
from sqlalchemy import create_engine, event
from sqlalchemy.pool import StaticPool

from blob_store_client import BlobStoreClient, FileRepository, LocalFilesystem, QueryExecutor
from blob_store_client.config import reset_settings
from blob_store_client.db import Base

MAX_FILE_SIZE = 1024


@pytest.fixture(scope="function")
def engine():
    """
    SQLite в памяти: одно соединение на весь тест, таблицы создаются заново.
    """
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture(scope="function")
def statements(engine) -> list[str]:
    """Список SQL-выражений, реально отправленных в базу во время теста."""
    issued: list[str] = []

    def _record(conn, cursor, statement, parameters, context, executemany):
        issued.append(statement)

    event.listen(engine, "before_cursor_execute", _record)
    yield issued
    event.remove(engine, "before_cursor_execute", _record)


@pytest.fixture(scope="function")
def client(engine) -> BlobStoreClient:
    executor = QueryExecutor(engine)
    return BlobStoreClient(
        engine=engine,
        file_repo=FileRepository(engine, executor),
        filesystem=LocalFilesystem(),
        maximum_file_size=MAX_FILE_SIZE,
    )


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch, tmp_path):
    """Настройки не должны протекать между тестами и читать чужой .env."""
    monkeypatch.chdir(tmp_path)
    reset_settings()
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
    reset_settings()
