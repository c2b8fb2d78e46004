# ABOUTME: The `mylibrary search` command for finding books by title, author, or filename.
# ABOUTME: Matching is a case-insensitive substring check done by the store query.

import click
from rich.console import Console

from mylibrary.cli import services
from mylibrary.cli.commands.ls_cmd import print_books
from mylibrary.cli.options import access_token_option, cache_ttl_option


@click.command("search")
@click.argument("query")
@click.option("--page-token", default=None, help="Token of the page to show.")
@access_token_option
@cache_ttl_option
def search(query: str, page_token: str | None, access_token: str, cache_ttl: float) -> None:
    """Search the library for QUERY."""
    service = services.create_book_service(access_token, cache_ttl)
    print_books(Console(), service.search_books(query, page_token))
