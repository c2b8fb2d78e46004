# ABOUTME: The `mylibrary migrate` command for importing a Calibre library folder from Drive.
# ABOUTME: Runs the migrator over a source folder and prints a summary with skip/error details.

import click
from rich.console import Console
from rich.table import Table

from mylibrary.cli import services
from mylibrary.cli.options import access_token_option
from mylibrary.core.migrator import (
    CalibreMigrator,
    MigrationOptions,
    MigrationResult,
    MigrationStatus,
)
from mylibrary.store.records import RecordStore


def _print_details(console: Console, result: MigrationResult, status: MigrationStatus) -> None:
    details = result.by_status(status)
    if not details:
        return
    style = "yellow" if status is MigrationStatus.SKIPPED else "red"
    table = Table(title=f"{status.value.capitalize()} details", title_style=style)
    table.add_column("Title", style="bold")
    table.add_column("Reason")
    for detail in details:
        table.add_row(detail.title, detail.reason or "")
    console.print(table)


@click.command("migrate")
@click.option(
    "--source-folder-id",
    required=True,
    help="Drive folder id of the Calibre library to migrate.",
)
@click.option(
    "--dry-run",
    is_flag=True,
    default=False,
    help="Report what would be migrated without registering anything.",
)
@click.option(
    "--limit",
    type=click.IntRange(min=0),
    default=None,
    help="Process at most this many book folders.",
)
@access_token_option
def migrate(
    source_folder_id: str, dry_run: bool, limit: int | None, access_token: str
) -> None:
    """Migrate a Calibre library folder in Drive into MyLibrary."""
    console = Console()

    console.print(f"Source folder: [bold]{source_folder_id}[/bold]")
    if dry_run:
        console.print("[dim]Dry run: nothing will be registered.[/dim]")
    if limit is not None:
        console.print(f"[dim]Limit: {limit} book(s)[/dim]")

    store = services.create_store(access_token)
    migrator = CalibreMigrator(store, RecordStore(store))
    result = migrator.migrate(source_folder_id, MigrationOptions(dry_run=dry_run, limit=limit))

    parts = [f"{result.total} processed"]
    if result.succeeded:
        parts.append(f"[green]{result.succeeded} succeeded[/green]")
    if result.skipped:
        parts.append(f"[yellow]{result.skipped} skipped[/yellow]")
    if result.errors:
        parts.append(f"[red]{result.errors} error(s)[/red]")
    console.print(f"\nDone: {', '.join(parts)}")

    _print_details(console, result, MigrationStatus.SKIPPED)
    _print_details(console, result, MigrationStatus.ERROR)
