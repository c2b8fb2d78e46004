# ABOUTME: Storage layer: the object-store contract, its adapters, and the book record store.
# ABOUTME: RecordStore is the entry point; everything else is a collaborator it depends on.

from mylibrary.store.backend import (
    DriveFile,
    FileList,
    ObjectStore,
    RecordNotFoundError,
    StoreError,
    StoreUnavailableError,
)
from mylibrary.store.memory import InMemoryObjectStore
from mylibrary.store.properties import sanitize_properties
from mylibrary.store.records import RecordStore

__all__ = [
    "DriveFile",
    "FileList",
    "InMemoryObjectStore",
    "ObjectStore",
    "RecordNotFoundError",
    "RecordStore",
    "StoreError",
    "StoreUnavailableError",
    "sanitize_properties",
]
