# ABOUTME: The `mylibrary ls` command for listing registered books.
# ABOUTME: Displays one page of the library as a Rich table.

import click
from rich.console import Console
from rich.table import Table

from mylibrary.cli import services
from mylibrary.cli.options import access_token_option, cache_ttl_option
from mylibrary.store.backend import FileList
from mylibrary.store.records import properties_to_metadata


def print_books(console: Console, page: FileList) -> None:
    """Render a page of book records, with the next page token if any."""
    if not page.files:
        console.print("[yellow]No books found.[/yellow]")
        return

    table = Table()
    table.add_column("ID", style="dim")
    table.add_column("Title", style="bold")
    table.add_column("Authors")
    table.add_column("ISBN")
    for record in page.files:
        metadata = properties_to_metadata(record.properties)
        table.add_row(
            record.id,
            metadata.title or record.name,
            metadata.authors or "[dim]unknown[/dim]",
            metadata.isbn,
        )
    console.print(table)
    console.print(f"\n[dim]{len(page.files)} book(s)[/dim]")
    if page.next_page_token:
        console.print(f"[dim]Next page: --page-token {page.next_page_token}[/dim]")


@click.command("ls")
@click.option("--page-token", default=None, help="Token of the page to show.")
@click.option(
    "--page-size",
    type=click.IntRange(1, 1000),
    default=20,
    show_default=True,
    help="Books per page.",
)
@access_token_option
@cache_ttl_option
def ls(page_token: str | None, page_size: int, access_token: str, cache_ttl: float) -> None:
    """List books in the library."""
    service = services.create_book_service(access_token, cache_ttl)
    print_books(Console(), service.list_books(page_token, page_size))
