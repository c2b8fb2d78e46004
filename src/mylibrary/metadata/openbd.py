# ABOUTME: openBD metadata provider for Japanese books.
# ABOUTME: Looks up an ISBN at api.openbd.jp and maps the summary and ONIX payload to BookMetadata.

import logging
from typing import Any

from mylibrary.metadata.http import HttpClient, MetadataFetchError
from mylibrary.metadata.types import BookMetadata

logger = logging.getLogger(__name__)

_OPENBD_URL = "https://api.openbd.jp/v1/get"


def _onix_description(book: dict[str, Any]) -> str:
    """Extract the first text block from the ONIX CollateralDetail, or ""."""
    detail = (book.get("onix") or {}).get("CollateralDetail") or {}
    contents = detail.get("TextContent") or []
    if not contents:
        return ""
    return contents[0].get("Text") or ""


def parse_openbd_response(data: Any, isbn: str) -> BookMetadata | None:
    """Convert an openBD response body to BookMetadata.

    openBD answers with a list holding one entry per requested ISBN; unknown
    ISBNs come back as null entries. A summary without a title is a miss.
    """
    if not isinstance(data, list) or not data or not data[0]:
        return None

    book = data[0]
    summary = book.get("summary") or {}
    if not summary.get("title"):
        return None

    return BookMetadata(
        isbn=summary.get("isbn") or isbn,
        title=summary.get("title") or "",
        authors=summary.get("author") or "",
        publisher=summary.get("publisher") or "",
        published_date=summary.get("pubdate") or "",
        description=_onix_description(book),
        cover_image_url=summary.get("cover") or "",
    )


class OpenBDProvider:
    """Metadata provider backed by the openBD API."""

    def __init__(self, http_client: HttpClient) -> None:
        self._http = http_client

    @property
    def name(self) -> str:
        return "openbd"

    def fetch_by_isbn(self, isbn: str) -> BookMetadata | None:
        try:
            data = self._http.get(_OPENBD_URL, params={"isbn": isbn})
        except MetadataFetchError as exc:
            logger.warning("openBD lookup failed for %s: %s", isbn, exc)
            return None
        return parse_openbd_response(data, isbn)
