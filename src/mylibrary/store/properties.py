# ABOUTME: Encodes book metadata into the size-limited key/value properties of the file store.
# ABOUTME: Also owns the naming rules for book files (display name, extension, MIME type).

from mylibrary.metadata.types import AUTHOR_DELIMITER

# The store rejects any property whose key plus value exceeds this many UTF-8 bytes.
PROPERTY_MAX_BYTES = 124

EPUB_MIME = "application/epub+zip"
PDF_MIME = "application/pdf"
OCTET_STREAM_MIME = "application/octet-stream"

_MIME_BY_EXTENSION = {
    ".epub": EPUB_MIME,
    ".pdf": PDF_MIME,
    ".mobi": "application/x-mobipocket-ebook",
}


def truncate_to_bytes(text: str, max_bytes: int) -> str:
    """Truncate text so its UTF-8 encoding fits in max_bytes.

    The cut point moves back past UTF-8 continuation bytes (0b10xxxxxx) so a
    multi-byte character is never split.
    """
    encoded = text.encode("utf-8")
    if len(encoded) <= max_bytes:
        return text

    end = max_bytes
    while end > 0 and (encoded[end] & 0xC0) == 0x80:
        end -= 1
    return encoded[:end].decode("utf-8")


def sanitize_properties(properties: dict[str, str]) -> dict[str, str]:
    """Return a copy of properties with every value cut to fit its key's byte budget."""
    result: dict[str, str] = {}
    for key, value in properties.items():
        budget = max(0, PROPERTY_MAX_BYTES - len(key.encode("utf-8")))
        result[key] = truncate_to_bytes(value, budget)
    return result


def get_first_author(authors: str) -> str:
    """Text before the first author delimiter, trimmed."""
    return authors.split(AUTHOR_DELIMITER)[0].strip()


def get_extension(mime_type: str) -> str:
    """File extension for a MIME type: epub, pdf, or the MIME subtype."""
    if mime_type == EPUB_MIME:
        return "epub"
    if mime_type == PDF_MIME:
        return "pdf"
    return mime_type.split("/")[-1]


def format_file_name(authors: str, title: str, extension: str) -> str:
    """Display name of a book file: ``[authors] title.ext``."""
    return f"[{authors}] {title}.{extension}"


def mime_type_for_filename(filename: str) -> str:
    """Infer a MIME type from a filename extension."""
    lower = filename.lower()
    for extension, mime_type in _MIME_BY_EXTENSION.items():
        if lower.endswith(extension):
            return mime_type
    return OCTET_STREAM_MIME
