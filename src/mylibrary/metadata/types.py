# ABOUTME: Core metadata data structure for books registered in the library.
# ABOUTME: BookMetadata is the interchange format between lookup sources, the store, and migration.

from dataclasses import dataclass

# Multiple authors are stored as a single string joined by this delimiter.
AUTHOR_DELIMITER = "-"

# Fields a lower-priority lookup source may fill when an earlier one left them empty.
FILL_FIELDS: tuple[str, ...] = (
    "authors",
    "publisher",
    "published_date",
    "description",
    "cover_image_url",
)


@dataclass
class BookMetadata:
    """Descriptive metadata for one book.

    Every field is a plain string and an empty string means "unknown". This
    mirrors the property schema in the file store, where every value is text.
    """

    isbn: str = ""
    title: str = ""
    authors: str = ""
    publisher: str = ""
    published_date: str = ""
    description: str = ""
    cover_image_url: str = ""

    @property
    def first_author(self) -> str:
        """The first listed author, used to pick the author folder."""
        return self.authors.split(AUTHOR_DELIMITER)[0].strip()

    def missing_fill_fields(self) -> list[str]:
        """Names of fill-candidate fields that are still empty."""
        return [name for name in FILL_FIELDS if not getattr(self, name)]

    @property
    def is_complete(self) -> bool:
        return not self.missing_fill_fields()
