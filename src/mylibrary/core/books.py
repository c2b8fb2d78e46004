# ABOUTME: Book lifecycle service: register, list, search, update, download, and delete books.
# ABOUTME: Reads go through the cache; every mutation invalidates cached listings before returning.

import logging
from collections.abc import Iterator

from mylibrary.cache import CacheService
from mylibrary.metadata.provider import MetadataProvider
from mylibrary.metadata.types import BookMetadata
from mylibrary.store.backend import DriveFile, FileList
from mylibrary.store.records import RecordStore

logger = logging.getLogger(__name__)

CACHE_KEY_LIST = "books:list"
CACHE_KEY_SEARCH_PREFIX = "books:search:"


class BookService:
    """Orchestrates the record store, the metadata lookup, and the cache."""

    def __init__(
        self,
        records: RecordStore,
        metadata_provider: MetadataProvider,
        cache: CacheService,
    ) -> None:
        self._records = records
        self._metadata = metadata_provider
        self._cache = cache

    def fetch_metadata(self, isbn: str) -> BookMetadata | None:
        return self._metadata.fetch_by_isbn(isbn)

    def register_book(self, metadata: BookMetadata, content: bytes, mime_type: str) -> DriveFile:
        record = self._records.register_book(metadata, content, mime_type)
        self._invalidate_list_cache()
        return record

    def list_books(self, page_token: str | None = None, page_size: int = 20) -> FileList:
        cache_key = f"{CACHE_KEY_LIST}:{page_token or ''}:{page_size}"
        cached = self._cache.get(cache_key)
        if cached is not None:
            return cached

        result = self._records.list_books(page_token, page_size)
        self._cache.set(cache_key, result)
        return result

    def search_books(self, query: str, page_token: str | None = None) -> FileList:
        cache_key = f"{CACHE_KEY_SEARCH_PREFIX}{query}:{page_token or ''}"
        cached = self._cache.get(cache_key)
        if cached is not None:
            return cached

        result = self._records.search_books(query, page_token)
        self._cache.set(cache_key, result)
        return result

    def get_book(self, file_id: str) -> DriveFile:
        return self._records.get_book(file_id)

    def download_book(self, file_id: str) -> tuple[bytes, DriveFile]:
        return self._records.download_book(file_id)

    def download_book_stream(self, file_id: str) -> tuple[Iterator[bytes], DriveFile]:
        return self._records.download_book_stream(file_id)

    def update_book(self, file_id: str, **changes: str | None) -> DriveFile:
        record = self._records.update_book(file_id, **changes)
        self._invalidate_list_cache()
        return record

    def delete_book(self, file_id: str) -> None:
        self._records.delete_book(file_id)
        self._invalidate_list_cache()

    def find_book_by_isbn(self, isbn: str) -> DriveFile | None:
        return self._records.find_book_by_isbn(isbn)

    def get_cover_image_content(self, cover_file_id: str) -> bytes:
        return self._records.get_cover_content(cover_file_id)

    def _invalidate_list_cache(self) -> None:
        self._cache.invalidate_by_prefix(CACHE_KEY_LIST)
        self._cache.invalidate_by_prefix(CACHE_KEY_SEARCH_PREFIX)
