# ABOUTME: Shared Click options for mylibrary CLI commands.
# ABOUTME: Provides reusable decorators for the Drive token and cache settings.

import click

from mylibrary.cache import DEFAULT_TTL

access_token_option = click.option(
    "--access-token",
    envvar="MYLIBRARY_ACCESS_TOKEN",
    required=True,
    help="OAuth2 bearer token for Google Drive (env: MYLIBRARY_ACCESS_TOKEN).",
)

cache_ttl_option = click.option(
    "--cache-ttl",
    envvar="MYLIBRARY_CACHE_TTL",
    type=click.FloatRange(min=0.0),
    default=DEFAULT_TTL,
    show_default=True,
    help="Seconds a cached listing stays valid (env: MYLIBRARY_CACHE_TTL).",
)
