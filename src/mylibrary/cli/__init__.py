# ABOUTME: CLI package for mylibrary, built on Click.
# ABOUTME: Defines the root command group, logging setup, and registers subcommands.

import logging

import click
from rich.logging import RichHandler

from mylibrary.cli.commands import lookup_cmd, ls_cmd, migrate_cmd, search_cmd


@click.group()
@click.version_option(package_name="mylibrary")
@click.option("-v", "--verbose", is_flag=True, default=False, help="Log progress at INFO level.")
def cli(verbose: bool) -> None:
    """mylibrary - a personal e-book library stored in Google Drive."""
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(show_path=False)],
        force=True,
    )


cli.add_command(migrate_cmd.migrate)
cli.add_command(lookup_cmd.lookup)
cli.add_command(ls_cmd.ls)
cli.add_command(search_cmd.search)
