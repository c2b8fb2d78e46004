# ABOUTME: The `mylibrary lookup` command for fetching book metadata by ISBN.
# ABOUTME: Queries openBD then Google Books and shows the merged record.

import click
from rich.console import Console
from rich.table import Table

from mylibrary.cli import services

_FIELDS = (
    ("ISBN", "isbn"),
    ("Title", "title"),
    ("Authors", "authors"),
    ("Publisher", "publisher"),
    ("Published", "published_date"),
    ("Description", "description"),
    ("Cover", "cover_image_url"),
)


@click.command("lookup")
@click.argument("isbn")
def lookup(isbn: str) -> None:
    """Look up metadata for ISBN across all metadata sources."""
    console = Console()
    provider = services.create_metadata_provider(services.create_http_client())

    metadata = provider.fetch_by_isbn(isbn)
    if metadata is None:
        console.print(f"[yellow]No metadata found for {isbn}.[/yellow]")
        raise SystemExit(1)

    table = Table(show_header=False)
    table.add_column("Field", style="dim")
    table.add_column("Value")
    for label, attr in _FIELDS:
        table.add_row(label, getattr(metadata, attr) or "[dim]-[/dim]")
    console.print(table)
