# ABOUTME: Contract for the external object store and the records it returns.
# ABOUTME: Production (Google Drive) and in-memory adapters both satisfy ObjectStore.

from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable

FOLDER_MIME = "application/vnd.google-apps.folder"


class StoreError(Exception):
    """Base class for failures reported by an object store."""


class StoreUnavailableError(StoreError):
    """Raised when the store cannot be reached or answers with an error."""


class RecordNotFoundError(StoreError):
    """Raised when an operation names a file id the store does not know."""


@dataclass
class DriveFile:
    """One file-like record in the store: a book, a cover image, or a folder."""

    id: str
    name: str
    mime_type: str
    properties: dict[str, str] = field(default_factory=dict)
    parents: list[str] = field(default_factory=list)
    size: int | None = None
    web_content_link: str | None = None

    @property
    def folder_id(self) -> str | None:
        """The authoritative containing folder (first parent)."""
        return self.parents[0] if self.parents else None

    @property
    def is_folder(self) -> bool:
        return self.mime_type == FOLDER_MIME


@dataclass
class FileList:
    """One page of a listing."""

    files: list[DriveFile] = field(default_factory=list)
    next_page_token: str | None = None


@runtime_checkable
class ObjectStore(Protocol):
    """Capabilities the record store needs from the external file store.

    Every method may raise StoreUnavailableError. Methods taking a file id
    raise RecordNotFoundError when the id is unknown.
    """

    def ensure_folder(self, name: str, parent_id: str | None = None) -> str: ...

    def create_file(
        self,
        parent_id: str,
        name: str,
        content: bytes,
        mime_type: str,
        properties: dict[str, str] | None = None,
    ) -> DriveFile: ...

    def update_properties(self, file_id: str, properties: dict[str, str]) -> DriveFile: ...

    def rename(self, file_id: str, new_name: str) -> DriveFile: ...

    def move(self, file_id: str, new_parent_id: str, old_parent_id: str) -> DriveFile: ...

    def list_by_property(
        self,
        key: str,
        value: str,
        page_token: str | None = None,
        page_size: int = 20,
    ) -> FileList: ...

    def search(
        self,
        text: str,
        *,
        marker: tuple[str, str],
        property_keys: Sequence[str],
        page_token: str | None = None,
        page_size: int = 20,
    ) -> FileList: ...

    def get(self, file_id: str) -> DriveFile: ...

    def get_content(self, file_id: str) -> bytes: ...

    def get_content_stream(self, file_id: str) -> Iterator[bytes]: ...

    def delete(self, file_id: str) -> None: ...

    def list_children(self, parent_id: str) -> list[DriveFile]: ...
