from datetime import datetime, timedelta, timezone

from blob_store_client import create_blob_store_client
from blob_store_client.config import BlobStoreConfig, DatabaseConfig, get_settings, reset_settings
from blob_store_client.repositories import RetryPolicy
from blob_store_client.utils.time_utils import format_timestamp, to_utc


def test_dsn_is_built_from_parts():
    cfg = DatabaseConfig(user="u", password="p", host="db", port=6543, db="files")
    assert cfg.get_dsn() == "postgresql+psycopg://u:p@db:6543/files"


def test_url_wins_over_parts():
    cfg = DatabaseConfig(url="sqlite:///blobs.db", host="ignored")
    assert cfg.get_dsn() == "sqlite:///blobs.db"


def test_engine_options_for_server_databases():
    options = DatabaseConfig(pool_size=7).engine_options()
    assert options["pool_size"] == 7
    assert "max_overflow" in options


def test_engine_options_for_sqlite_skip_pool_sizing():
    options = DatabaseConfig(url="sqlite://").engine_options()
    assert "pool_size" not in options
    assert options["connect_args"] == {"check_same_thread": False}


def test_settings_read_from_environment(monkeypatch):
    monkeypatch.setenv("BLOBSTORE_DATABASE__URL", "sqlite:///env.db")
    monkeypatch.setenv("BLOBSTORE_MAXIMUM_FILE_SIZE", "2048")
    monkeypatch.setenv("BLOBSTORE_RETRY__MAX_ATTEMPTS", "5")
    reset_settings()

    config = get_settings().to_config()

    assert config.database.get_dsn() == "sqlite:///env.db"
    assert config.maximum_file_size == 2048
    assert RetryPolicy.from_config(config.retry).max_attempts == 5


def test_settings_are_cached():
    assert get_settings() is get_settings()


def test_factory_builds_working_client(tmp_path):
    config = BlobStoreConfig(
        database=DatabaseConfig(url=f"sqlite:///{tmp_path / 'factory.db'}"),
        maximum_file_size=10,
    )
    client = create_blob_store_client(config)
    try:
        client.init_schema()
        assert client.maximum_file_size == 10
        file = client.add("f.txt", b"0123456789")
        assert client.find_by_id(file.id).blob == b"0123456789"
    finally:
        client.close()


def test_to_utc():
    aware = datetime(2024, 5, 6, 10, 0, 0, 999, tzinfo=timezone(timedelta(hours=-4)))
    assert to_utc(aware) == datetime(2024, 5, 6, 14, 0, 0, tzinfo=timezone.utc)
    assert to_utc(datetime(2024, 5, 6, 10, 0, 0)).tzinfo is timezone.utc


def test_format_timestamp_is_fixed_utc():
    moscow = timezone(timedelta(hours=3))
    assert format_timestamp(datetime(2024, 1, 1, 2, 3, 4, 500, tzinfo=moscow)) == "2023-12-31 23:03:04"
    assert format_timestamp(None) == ""
