import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

import typer

from blob_store_client import create_blob_store_client
from blob_store_client.client import BlobStoreClient
from blob_store_client.exceptions import BlobStoreError, ValidationError
from blob_store_client.logging import configure
from blob_store_client.utils.cli_utils import file_table, get_rich_console


app = typer.Typer(help="CLI for blob-store-client management.")
logger = logging.getLogger(__name__)
console = get_rich_console()


@app.callback()
def main(
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Overrides BLOBSTORE_LOG_LEVEL."),
):
    configure(log_level)


@contextmanager
def _client() -> Iterator[BlobStoreClient]:
    client = create_blob_store_client()
    try:
        yield client
    except BlobStoreError as e:
        console.print(f"[bold red]✖[/bold red] {e}")
        raise typer.Exit(code=1)
    finally:
        client.close()


@app.command()
def init():
    """Creates the files table if it does not exist."""
    console.rule("[bold cyan]Service Initialization[/bold cyan]")
    with _client() as client:
        try:
            client.init_schema()
        except Exception as e:
            console.print(f"[bold red]✖[/bold red] Database initialization FAILED: {e}")
            raise typer.Exit(code=1)
    console.print("[bold green]✔[/bold green] Database tables created successfully.")


@app.command()
def check():
    """Checks connectivity to the database."""
    console.rule("[bold cyan]Connection Check[/bold cyan]")
    with _client() as client:
        status = client.check_connection().get("database", "unknown error")
    if status == "ok":
        console.print("[bold green]✔[/bold green] Database connection: OK")
    else:
        console.print(f"[bold red]✖[/bold red] Database connection: FAILED ({status})")
        raise typer.Exit(code=1)


@app.command()
def add(path: Path):
    """Imports a local file and prints its new id."""
    with _client() as client:
        file = client.add_from_path(path)
    console.print(f"[bold green]✔[/bold green] Added '{file.name}' as file {file.id}")


@app.command()
def show(file_id: int):
    """Prints file attributes."""
    with _client() as client:
        file = client.find_by_id(file_id)
    console.print(file_table(file))


@app.command()
def export(file_id: int, path: Path):
    """Writes the file contents to a local path."""
    with _client() as client:
        file = client.find_by_id(file_id)
        file.copy(path)
    console.print(f"[bold green]✔[/bold green] Wrote {file.size} bytes to {path}")


@app.command()
def append(file_id: int, path: Path):
    """Appends the contents of a local file."""
    with _client() as client:
        file = client.find_by_id(file_id)
        file.append(_read(client, path))
    console.print(f"[bold green]✔[/bold green] File {file.id} is now {file.size} bytes")


@app.command()
def overwrite(file_id: int, path: Path):
    """Replaces the file contents with a local file."""
    with _client() as client:
        file = client.find_by_id(file_id)
        file.overwrite(_read(client, path))
    console.print(f"[bold green]✔[/bold green] File {file.id} is now {file.size} bytes")


@app.command()
def rename(file_id: int, name: str):
    """Renames a file."""
    with _client() as client:
        file = client.find_by_id(file_id)
        file.rename(name)
    console.print(f"[bold green]✔[/bold green] File {file.id} renamed to '{file.name}'")


@app.command()
def delete(file_id: int):
    """Deletes a file."""
    with _client() as client:
        client.find_by_id(file_id).delete()
    console.print(f"[bold green]✔[/bold green] File {file_id} deleted")


def _read(client: BlobStoreClient, path: Path) -> bytes:
    if not client.fs.exists(path):
        raise ValidationError(f"File does not exist at '{path}'")
    return client.fs.read_all(path)
