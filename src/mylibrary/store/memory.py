# ABOUTME: In-memory ObjectStore used by tests and offline runs.
# ABOUTME: Mimics Drive semantics: merged property updates, multi-parent files, paged listings.

from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field, replace

from mylibrary.store.backend import (
    FOLDER_MIME,
    DriveFile,
    FileList,
    RecordNotFoundError,
    StoreUnavailableError,
)

_CHUNK_SIZE = 65536  # 64 KB


@dataclass
class _StoredFile:
    file: DriveFile
    content: bytes = field(default=b"")


def _copy(file: DriveFile) -> DriveFile:
    """Detached copy so callers cannot mutate stored state."""
    return replace(file, properties=dict(file.properties), parents=list(file.parents))


def _page(files: list[DriveFile], page_token: str | None, page_size: int) -> FileList:
    start = int(page_token) if page_token else 0
    end = start + page_size
    next_token = str(end) if end < len(files) else None
    return FileList(files=files[start:end], next_page_token=next_token)


class InMemoryObjectStore:
    """ObjectStore backed by a dict, with sequential ``file_<n>`` ids.

    Set ``fail = True`` to make every call raise StoreUnavailableError.
    """

    def __init__(self) -> None:
        self._files: dict[str, _StoredFile] = {}
        self._next_id = 1
        self.fail = False

    def _check_available(self) -> None:
        if self.fail:
            raise StoreUnavailableError("Object store unavailable")

    def _generate_id(self) -> str:
        file_id = f"file_{self._next_id}"
        self._next_id += 1
        return file_id

    def _lookup(self, file_id: str) -> _StoredFile:
        stored = self._files.get(file_id)
        if stored is None:
            raise RecordNotFoundError(f"File not found: {file_id}")
        return stored

    def add_file(self, file: DriveFile, content: bytes = b"") -> DriveFile:
        """Seed a file with a caller-chosen id (for foreign trees in tests)."""
        self._files[file.id] = _StoredFile(file=_copy(file), content=content)
        return _copy(file)

    def all_files(self) -> list[DriveFile]:
        return [_copy(stored.file) for stored in self._files.values()]

    def ensure_folder(self, name: str, parent_id: str | None = None) -> str:
        self._check_available()
        for stored in self._files.values():
            file = stored.file
            if file.name != name or not file.is_folder:
                continue
            if parent_id is None or parent_id in file.parents:
                return file.id

        folder_id = self._generate_id()
        parents = [parent_id] if parent_id else []
        self._files[folder_id] = _StoredFile(
            file=DriveFile(id=folder_id, name=name, mime_type=FOLDER_MIME, parents=parents)
        )
        return folder_id

    def create_file(
        self,
        parent_id: str,
        name: str,
        content: bytes,
        mime_type: str,
        properties: dict[str, str] | None = None,
    ) -> DriveFile:
        self._check_available()
        file_id = self._generate_id()
        file = DriveFile(
            id=file_id,
            name=name,
            mime_type=mime_type,
            properties=dict(properties or {}),
            parents=[parent_id],
            size=len(content),
            web_content_link=f"https://drive.google.com/uc?id={file_id}&export=download",
        )
        self._files[file_id] = _StoredFile(file=file, content=bytes(content))
        return _copy(file)

    def update_properties(self, file_id: str, properties: dict[str, str]) -> DriveFile:
        self._check_available()
        stored = self._lookup(file_id)
        stored.file.properties.update(properties)
        return _copy(stored.file)

    def rename(self, file_id: str, new_name: str) -> DriveFile:
        self._check_available()
        stored = self._lookup(file_id)
        stored.file.name = new_name
        return _copy(stored.file)

    def move(self, file_id: str, new_parent_id: str, old_parent_id: str) -> DriveFile:
        self._check_available()
        stored = self._lookup(file_id)
        parents = [p for p in stored.file.parents if p != old_parent_id]
        parents.append(new_parent_id)
        stored.file.parents = parents
        return _copy(stored.file)

    def list_by_property(
        self,
        key: str,
        value: str,
        page_token: str | None = None,
        page_size: int = 20,
    ) -> FileList:
        self._check_available()
        matches = [
            _copy(stored.file)
            for stored in self._files.values()
            if stored.file.properties.get(key) == value
        ]
        matches.sort(key=lambda f: f.name)
        return _page(matches, page_token, page_size)

    def search(
        self,
        text: str,
        *,
        marker: tuple[str, str],
        property_keys: Sequence[str],
        page_token: str | None = None,
        page_size: int = 20,
    ) -> FileList:
        self._check_available()
        needle = text.lower()
        marker_key, marker_value = marker
        matches: list[DriveFile] = []
        for stored in self._files.values():
            file = stored.file
            if file.properties.get(marker_key) != marker_value:
                continue
            haystacks = [file.name] + [file.properties.get(k, "") for k in property_keys]
            if any(needle in h.lower() for h in haystacks):
                matches.append(_copy(file))
        return _page(matches, page_token, page_size)

    def get(self, file_id: str) -> DriveFile:
        self._check_available()
        return _copy(self._lookup(file_id).file)

    def get_content(self, file_id: str) -> bytes:
        self._check_available()
        return self._lookup(file_id).content

    def get_content_stream(self, file_id: str) -> Iterator[bytes]:
        self._check_available()
        content = self._lookup(file_id).content
        return (content[i : i + _CHUNK_SIZE] for i in range(0, len(content), _CHUNK_SIZE))

    def delete(self, file_id: str) -> None:
        self._check_available()
        self._lookup(file_id)
        del self._files[file_id]

    def list_children(self, parent_id: str) -> list[DriveFile]:
        self._check_available()
        return [
            _copy(stored.file)
            for stored in self._files.values()
            if parent_id in stored.file.parents
        ]
