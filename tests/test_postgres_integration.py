import os

import pytest

from blob_store_client import create_blob_store_client
from blob_store_client.config import BlobStoreConfig, DatabaseConfig

pytestmark = [
    pytest.mark.container,
    pytest.mark.skipif(
        os.environ.get("BLOBSTORE_RUN_CONTAINER_TESTS") != "1",
        reason="set BLOBSTORE_RUN_CONTAINER_TESTS=1 to run against a Docker PostgreSQL",
    ),
]


@pytest.fixture(scope="module")
def pg_client():
    """
    Поднимает PostgreSQL в контейнере один раз на модуль.
    """
    from testcontainers.postgres import PostgresContainer

    with PostgresContainer("postgres:16", driver="psycopg") as postgres:
        config = BlobStoreConfig(database=DatabaseConfig(url=postgres.get_connection_url()))
        client = create_blob_store_client(config)
        client.init_schema()
        yield client
        client.close()


def test_binary_append_on_postgres(pg_client):
    file = pg_client.add("pg.bin", b"\x00\xff")
    file.append(b"\x10\x00")

    stored = pg_client.find_by_id(file.id)
    assert stored.blob == b"\x00\xff\x10\x00"
    assert stored.size == 4
    assert stored.updated_at >= stored.created_at


def test_overwrite_rename_delete_on_postgres(pg_client):
    file = pg_client.add("pg.txt", b"first")
    file.overwrite(b"second!")
    file.rename("pg-renamed.txt")

    stored = pg_client.find_by_id(file.id)
    assert (stored.name, stored.blob, stored.size) == ("pg-renamed.txt", b"second!", 7)

    file.delete()
    assert file.frozen
