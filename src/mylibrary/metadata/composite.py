# ABOUTME: Composite metadata provider that merges results from several lookup sources.
# ABOUTME: Earlier sources win field by field; later sources only fill gaps.

import logging
from collections.abc import Sequence
from dataclasses import replace

from mylibrary.metadata.provider import MetadataProvider
from mylibrary.metadata.types import FILL_FIELDS, BookMetadata

logger = logging.getLogger(__name__)


def merge_metadata(primary: BookMetadata, secondary: BookMetadata) -> BookMetadata:
    """Fill empty fill-candidate fields of primary from secondary.

    isbn and title always come from primary. Returns a new instance.
    """
    filled = {
        name: getattr(primary, name) or getattr(secondary, name)
        for name in FILL_FIELDS
    }
    return replace(primary, **filled)


class CompositeMetadataProvider:
    """Queries providers in priority order and merges their results.

    A provider that raises is treated like a miss. Querying stops as soon as
    every fill-candidate field is populated, so a complete first answer costs
    exactly one lookup.
    """

    def __init__(self, providers: Sequence[MetadataProvider]) -> None:
        self._providers = list(providers)

    @property
    def name(self) -> str:
        return "composite"

    def fetch_by_isbn(self, isbn: str) -> BookMetadata | None:
        result: BookMetadata | None = None

        for provider in self._providers:
            try:
                current = provider.fetch_by_isbn(isbn)
            except Exception as exc:
                logger.warning("Provider %s failed for %s: %s", provider.name, isbn, exc)
                continue

            if current is None:
                continue

            result = replace(current) if result is None else merge_metadata(result, current)

            if result.is_complete:
                break

        return result
