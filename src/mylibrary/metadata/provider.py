# ABOUTME: MetadataProvider protocol defining the contract for ISBN lookup sources.
# ABOUTME: openBD, Google Books, and the composite of several sources all implement this.

from typing import Protocol, runtime_checkable

from mylibrary.metadata.types import BookMetadata


@runtime_checkable
class MetadataProvider(Protocol):
    """Protocol for metadata lookup services.

    fetch_by_isbn returns None when the source has no record for the ISBN.
    """

    @property
    def name(self) -> str: ...

    def fetch_by_isbn(self, isbn: str) -> BookMetadata | None: ...
