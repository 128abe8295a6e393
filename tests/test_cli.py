import pytest
from typer.testing import CliRunner

from blob_store_client.cli import app
from blob_store_client.config import reset_settings

runner = CliRunner()


@pytest.fixture
def database(tmp_path, monkeypatch):
    db_path = tmp_path / "cli.db"
    monkeypatch.setenv("BLOBSTORE_DATABASE__URL", f"sqlite:///{db_path}")
    monkeypatch.setenv("BLOBSTORE_LOG_LEVEL", "WARNING")
    reset_settings()
    result = runner.invoke(app, ["init"])
    assert result.exit_code == 0, f"Команда 'init' провалилась: {result.output}"
    assert "Database tables created successfully" in result.output
    return db_path


def test_cli_check(database):
    result = runner.invoke(app, ["check"])
    assert result.exit_code == 0
    assert "Database connection: OK" in result.output


def test_cli_file_lifecycle(database, tmp_path):
    """
    add -> show -> append -> export -> rename -> delete в одном сценарии.
    """
    source = tmp_path / "hello.txt"
    source.write_bytes(b"hello")
    extra = tmp_path / "extra.txt"
    extra.write_bytes(b" world")
    target = tmp_path / "out.txt"

    # --- ACT / ASSERT 1: импорт ---
    result = runner.invoke(app, ["add", str(source)])
    assert result.exit_code == 0, result.output
    assert "as file 1" in result.output

    result = runner.invoke(app, ["show", "1"])
    assert result.exit_code == 0
    assert "hello.txt" in result.output

    # --- 2: дозапись и экспорт ---
    result = runner.invoke(app, ["append", "1", str(extra)])
    assert result.exit_code == 0, result.output
    assert "now 11 bytes" in result.output

    result = runner.invoke(app, ["export", "1", str(target)])
    assert result.exit_code == 0, result.output
    assert target.read_bytes() == b"hello world"

    # --- 3: перезапись и переименование ---
    result = runner.invoke(app, ["overwrite", "1", str(source)])
    assert result.exit_code == 0
    assert "now 5 bytes" in result.output

    result = runner.invoke(app, ["rename", "1", "greeting.txt"])
    assert result.exit_code == 0
    assert "greeting.txt" in runner.invoke(app, ["show", "1"]).output

    # --- 4: удаление ---
    result = runner.invoke(app, ["delete", "1"])
    assert result.exit_code == 0

    result = runner.invoke(app, ["show", "1"])
    assert result.exit_code == 1
    assert "File not found" in result.output


def test_cli_add_missing_file(database, tmp_path):
    result = runner.invoke(app, ["add", str(tmp_path / "nope.txt")])
    assert result.exit_code == 1
    assert "does not exist" in result.output
