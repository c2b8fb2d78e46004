# ABOUTME: EPUB metadata extraction using ebooklib.
# ABOUTME: Reads the package metadata of an EPUB held in memory, as downloaded from the store.

import logging
import re
import tempfile
from pathlib import Path

from ebooklib import epub

from mylibrary.metadata.types import AUTHOR_DELIMITER, BookMetadata

logger = logging.getLogger(__name__)

_ISBN_STRIP_RE = re.compile(r"[-\s]")


class EpubReadError(Exception):
    """Raised when EPUB content cannot be read or parsed."""


def _get_metadata_value(book: epub.EpubBook, name: str) -> str:
    """First Dublin Core value for name, stripped, or ""."""
    values = book.get_metadata("DC", name)
    if not values:
        return ""
    # Metadata entries are tuples of (value, attributes)
    value = values[0][0]
    return str(value).strip() if value else ""


def _get_authors(book: epub.EpubBook) -> str:
    creators = book.get_metadata("DC", "creator")
    names = [str(entry[0]).strip() for entry in creators if entry[0]]
    return AUTHOR_DELIMITER.join(names)


def _is_isbn_scheme(attrs: dict[str, str]) -> bool:
    # ebooklib keys namespaced attributes as "{namespace}scheme"
    return any(
        key.rsplit("}", 1)[-1].split(":")[-1] == "scheme" and value.lower() == "isbn"
        for key, value in attrs.items()
    )


def _get_isbn(book: epub.EpubBook) -> str:
    """ISBN from an identifier with an ISBN scheme or a ``urn:isbn:`` value."""
    for value, attrs in book.get_metadata("DC", "identifier"):
        if not value:
            continue
        text = str(value).strip()
        if text.lower().startswith("urn:isbn:"):
            return _ISBN_STRIP_RE.sub("", text[len("urn:isbn:") :])
        if _is_isbn_scheme(attrs or {}):
            return _ISBN_STRIP_RE.sub("", text)
    return ""


def read_epub_metadata(content: bytes) -> BookMetadata:
    """Extract metadata from EPUB bytes.

    ebooklib reads from a path, so the content is spooled to a temporary file.

    Raises:
        EpubReadError: If the content is not a readable EPUB.
    """
    with tempfile.TemporaryDirectory() as tmp:
        path = Path(tmp) / "book.epub"
        path.write_bytes(content)
        try:
            book = epub.read_epub(str(path), options={"ignore_ncx": True})
        except Exception as exc:
            raise EpubReadError(f"Failed to read EPUB: {exc}") from exc

    raw_date = _get_metadata_value(book, "date")
    return BookMetadata(
        isbn=_get_isbn(book),
        title=_get_metadata_value(book, "title"),
        authors=_get_authors(book),
        publisher=_get_metadata_value(book, "publisher"),
        published_date=raw_date.split("T")[0] if raw_date else "",
        description=_get_metadata_value(book, "description"),
    )
