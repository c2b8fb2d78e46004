# ABOUTME: Composition root for CLI commands: builds stores, providers, and services.
# ABOUTME: Commands call through this module so tests can substitute an in-memory store.

from mylibrary.cache import CacheService
from mylibrary.core.books import BookService
from mylibrary.metadata.composite import CompositeMetadataProvider
from mylibrary.metadata.googlebooks import GoogleBooksProvider
from mylibrary.metadata.http import HttpClient, LibraryHttpClient
from mylibrary.metadata.openbd import OpenBDProvider
from mylibrary.metadata.provider import MetadataProvider
from mylibrary.store.backend import ObjectStore
from mylibrary.store.drive import GoogleDriveStore
from mylibrary.store.records import RecordStore


def create_store(access_token: str) -> ObjectStore:
    return GoogleDriveStore(access_token)


def create_http_client() -> HttpClient:
    return LibraryHttpClient()


def create_metadata_provider(http_client: HttpClient) -> MetadataProvider:
    """openBD first (best for Japanese titles), then Google Books."""
    return CompositeMetadataProvider(
        [OpenBDProvider(http_client), GoogleBooksProvider(http_client)]
    )


def create_book_service(access_token: str, cache_ttl: float) -> BookService:
    http_client = create_http_client()
    records = RecordStore(create_store(access_token), http_client=http_client)
    return BookService(records, create_metadata_provider(http_client), CacheService(cache_ttl))
