# ABOUTME: Google Books metadata provider.
# ABOUTME: Looks up an ISBN via the volumes endpoint and maps volumeInfo to BookMetadata.

import logging
from typing import Any

from mylibrary.metadata.http import HttpClient, MetadataFetchError
from mylibrary.metadata.types import AUTHOR_DELIMITER, BookMetadata

logger = logging.getLogger(__name__)

_VOLUMES_URL = "https://www.googleapis.com/books/v1/volumes"


def parse_volumes_response(data: Any, isbn: str) -> BookMetadata | None:
    """Convert a Google Books volumes response to BookMetadata.

    Only the first volume is used. The ISBN is always the one searched for,
    since volumeInfo may list several industry identifiers.
    """
    if not isinstance(data, dict):
        return None
    items = data.get("items") or []
    if not items:
        return None

    info = items[0].get("volumeInfo") or {}
    image_links = info.get("imageLinks") or {}
    return BookMetadata(
        isbn=isbn,
        title=info.get("title") or "",
        authors=AUTHOR_DELIMITER.join(info.get("authors") or []),
        publisher=info.get("publisher") or "",
        published_date=info.get("publishedDate") or "",
        description=info.get("description") or "",
        cover_image_url=image_links.get("thumbnail") or "",
    )


class GoogleBooksProvider:
    """Metadata provider backed by the Google Books API."""

    def __init__(self, http_client: HttpClient) -> None:
        self._http = http_client

    @property
    def name(self) -> str:
        return "googlebooks"

    def fetch_by_isbn(self, isbn: str) -> BookMetadata | None:
        try:
            data = self._http.get(_VOLUMES_URL, params={"q": f"isbn:{isbn}"})
        except MetadataFetchError as exc:
            logger.warning("Google Books lookup failed for %s: %s", isbn, exc)
            return None
        return parse_volumes_response(data, isbn)
