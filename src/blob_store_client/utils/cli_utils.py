from rich.console import Console
from rich.table import Table

from blob_store_client.utils.time_utils import format_timestamp

def get_rich_console() -> Console: return Console(stderr=True)

def file_table(file) -> Table:
    """Таблица с атрибутами файла (без содержимого blob)."""
    table = Table(show_header=False, box=None)
    table.add_row("id", str(file.id))
    table.add_row("name", file.name)
    table.add_row("size", str(file.size))
    table.add_row("created_at", format_timestamp(file.created_at))
    table.add_row("updated_at", format_timestamp(file.updated_at))
    return table
