# ABOUTME: Tolerant parser for Calibre's metadata.opf documents.
# ABOUTME: Extracts Dublin Core fields with tag-scoped regexes that ignore attribute noise.

import html
import re

from mylibrary.metadata.types import AUTHOR_DELIMITER, BookMetadata

_CREATOR_RE = re.compile(r"<dc:creator(?:\s[^>]*)?>([^<]+)</dc:creator>", re.IGNORECASE)
_IDENTIFIER_RE = re.compile(r"<dc:identifier([^>]*)>([^<]+)</dc:identifier>", re.IGNORECASE)
_ISBN_SCHEME_RE = re.compile(r"opf:scheme\s*=\s*[\"']isbn[\"']", re.IGNORECASE)
_ISBN_STRIP_RE = re.compile(r"[-\s]")


def _first_text(xml: str, tag: str) -> str:
    """Text of the first <dc:tag> element, trimmed, or ""."""
    pattern = rf"<dc:{tag}(?:\s[^>]*)?>([\s\S]*?)</dc:{tag}>"
    match = re.search(pattern, xml, re.IGNORECASE)
    return html.unescape(match.group(1).strip()) if match else ""


def _isbn(xml: str) -> str:
    """The first identifier whose opf:scheme is ISBN, without hyphens or spaces."""
    for attrs, value in _IDENTIFIER_RE.findall(xml):
        if _ISBN_SCHEME_RE.search(attrs):
            return _ISBN_STRIP_RE.sub("", value.strip())
    return ""


def parse_metadata_opf(xml: str) -> BookMetadata:
    """Parse a metadata.opf document into BookMetadata.

    Multiple dc:creator entries are joined with the author delimiter. The
    publication date keeps only the part before any ``T`` time separator.
    Missing fields are empty strings; malformed input never raises.
    """
    creators = [html.unescape(c.strip()) for c in _CREATOR_RE.findall(xml)]
    authors = AUTHOR_DELIMITER.join(creators) if creators else _first_text(xml, "creator")

    raw_date = _first_text(xml, "date")

    return BookMetadata(
        isbn=_isbn(xml),
        title=_first_text(xml, "title"),
        authors=authors,
        publisher=_first_text(xml, "publisher"),
        published_date=raw_date.split("T")[0] if raw_date else "",
        description=_first_text(xml, "description"),
    )
