# ABOUTME: Metadata package: lookup sources, their composite, and the BookMetadata type.
# ABOUTME: Exports the pieces the book service and the CLI wire together.

from mylibrary.metadata.composite import CompositeMetadataProvider, merge_metadata
from mylibrary.metadata.googlebooks import GoogleBooksProvider
from mylibrary.metadata.openbd import OpenBDProvider
from mylibrary.metadata.provider import MetadataProvider
from mylibrary.metadata.types import AUTHOR_DELIMITER, BookMetadata

__all__ = [
    "AUTHOR_DELIMITER",
    "BookMetadata",
    "CompositeMetadataProvider",
    "GoogleBooksProvider",
    "MetadataProvider",
    "OpenBDProvider",
    "merge_metadata",
]
