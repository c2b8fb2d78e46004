# ABOUTME: Book-record CRUD over an ObjectStore, with folders as the index and properties as schema.
# ABOUTME: Enforces the ownership marker, the root/author folder layout, and property size limits.

import logging
from collections.abc import Iterator

from mylibrary.metadata.http import HttpClient
from mylibrary.metadata.types import BookMetadata
from mylibrary.store.backend import DriveFile, FileList, ObjectStore, StoreError
from mylibrary.store.properties import (
    format_file_name,
    get_extension,
    get_first_author,
    sanitize_properties,
)

logger = logging.getLogger(__name__)

ROOT_FOLDER_NAME = "MyLibrary"
APP_TYPE_KEY = "app_type"
APP_TYPE_VALUE = "my_library_book"
COVER_FILE_ID_KEY = "cover_file_id"
COVER_MIME = "image/jpeg"

# BookMetadata field -> property key.
_PROPERTY_KEYS = {
    "isbn": "isbn",
    "title": "title",
    "authors": "authors",
    "publisher": "publisher",
    "published_date": "published_date",
    "description": "description",
}
_SEARCH_PROPERTY_KEYS = ("title", "authors")


def cover_file_name(record_id: str) -> str:
    return f"cover_{record_id}.jpg"


def metadata_to_properties(metadata: BookMetadata) -> dict[str, str]:
    """Build the property map for a new book record.

    Every schema field is present (empty when unknown) except description,
    which is omitted entirely when empty.
    """
    properties = {APP_TYPE_KEY: APP_TYPE_VALUE}
    for field_name, key in _PROPERTY_KEYS.items():
        properties[key] = getattr(metadata, field_name) or ""
    if not properties["description"]:
        del properties["description"]
    return properties


def properties_to_metadata(properties: dict[str, str]) -> BookMetadata:
    """Read BookMetadata back out of a record's properties."""
    return BookMetadata(
        **{field_name: properties.get(key, "") for field_name, key in _PROPERTY_KEYS.items()}
    )


class RecordStore:
    """The library's database engine: books as files in a two-level folder tree.

    Layout: ``MyLibrary/<first author>/[<authors>] <title>.<ext>``. Every book
    file carries ``app_type=my_library_book``; files without it are invisible
    to listing and search.
    """

    def __init__(self, store: ObjectStore, http_client: HttpClient | None = None) -> None:
        self._store = store
        self._http = http_client

    @property
    def store(self) -> ObjectStore:
        return self._store

    # --- Folders ---

    def ensure_root_folder(self) -> str:
        return self._store.ensure_folder(ROOT_FOLDER_NAME)

    def ensure_author_folder(self, root_id: str, author_name: str) -> str:
        return self._store.ensure_folder(author_name, root_id)

    def _managed_folder_ids(self) -> set[str]:
        """The root folder id plus the ids of its direct child folders."""
        root_id = self.ensure_root_folder()
        ids = {root_id}
        ids.update(f.id for f in self._store.list_children(root_id) if f.is_folder)
        return ids

    def _filter_managed(self, page: FileList) -> FileList:
        valid = self._managed_folder_ids()
        files = [f for f in page.files if any(p in valid for p in f.parents)]
        return FileList(files=files, next_page_token=page.next_page_token)

    # --- Create ---

    def register_book(self, metadata: BookMetadata, content: bytes, mime_type: str) -> DriveFile:
        """Upload a book file into its author folder with schema properties.

        If metadata carries a cover image URL, the image is fetched and stored
        next to the book; any failure in that step is logged and ignored.
        """
        root_id = self.ensure_root_folder()
        folder_id = self.ensure_author_folder(root_id, get_first_author(metadata.authors))

        file_name = format_file_name(metadata.authors, metadata.title, get_extension(mime_type))
        properties = sanitize_properties(metadata_to_properties(metadata))
        record = self._store.create_file(folder_id, file_name, content, mime_type, properties)
        logger.info("Registered %s (%s)", file_name, record.id)

        if metadata.cover_image_url:
            try:
                image = self._fetch_cover(metadata.cover_image_url)
                if image:
                    record = self.attach_cover(record, image)
            except Exception as exc:
                logger.warning("Cover upload failed for %s: %s", record.id, exc)

        return record

    def _fetch_cover(self, url: str) -> bytes | None:
        if self._http is None:
            logger.warning("No HTTP client configured, skipping cover %s", url)
            return None
        return self._http.get_bytes(url)

    def attach_cover(
        self, record: DriveFile, image_data: bytes, mime_type: str = COVER_MIME
    ) -> DriveFile:
        """Store a cover image in the record's folder and link it from the record."""
        folder_id = record.folder_id
        if folder_id is None:
            raise StoreError(f"Record {record.id} has no parent folder")
        cover = self._store.create_file(
            folder_id, cover_file_name(record.id), image_data, mime_type
        )
        return self._store.update_properties(
            record.id, sanitize_properties({COVER_FILE_ID_KEY: cover.id})
        )

    # --- Read ---

    def get_book(self, file_id: str) -> DriveFile:
        return self._store.get(file_id)

    def get_cover_content(self, cover_file_id: str) -> bytes:
        return self._store.get_content(cover_file_id)

    def find_book_by_isbn(self, isbn: str) -> DriveFile | None:
        """First ownership-marked record whose isbn property equals isbn."""
        page_token: str | None = None
        while True:
            page = self._store.list_by_property("isbn", isbn, page_token)
            for file in page.files:
                if file.properties.get(APP_TYPE_KEY) == APP_TYPE_VALUE:
                    return file
            if not page.next_page_token:
                return None
            page_token = page.next_page_token

    def list_books(self, page_token: str | None = None, page_size: int = 20) -> FileList:
        page = self._store.list_by_property(APP_TYPE_KEY, APP_TYPE_VALUE, page_token, page_size)
        return self._filter_managed(page)

    def search_books(self, query: str, page_token: str | None = None) -> FileList:
        page = self._store.search(
            query,
            marker=(APP_TYPE_KEY, APP_TYPE_VALUE),
            property_keys=_SEARCH_PROPERTY_KEYS,
            page_token=page_token,
        )
        return self._filter_managed(page)

    def download_book(self, file_id: str) -> tuple[bytes, DriveFile]:
        record = self._store.get(file_id)
        return self._store.get_content(file_id), record

    def download_book_stream(self, file_id: str) -> tuple[Iterator[bytes], DriveFile]:
        record = self._store.get(file_id)
        return self._store.get_content_stream(file_id), record

    # --- Update ---

    def update_book(self, file_id: str, **changes: str | None) -> DriveFile:
        """Overwrite the given metadata fields of a book record.

        Fields passed as None are left untouched. The file is renamed when the
        resulting title or authors change its display name, and moved to the
        new first author's folder when authors change.

        Raises:
            ValueError: If a field name is not an editable metadata field.
            RecordNotFoundError: If file_id does not exist.
        """
        unknown = set(changes) - set(_PROPERTY_KEYS)
        if unknown:
            raise ValueError(f"Unknown metadata field(s): {', '.join(sorted(unknown))}")

        existing = self._store.get(file_id)
        old_properties = existing.properties

        properties = dict(old_properties)
        for field_name, value in changes.items():
            if value is not None:
                properties[_PROPERTY_KEYS[field_name]] = value
        record = self._store.update_properties(file_id, sanitize_properties(properties))

        title = properties.get("title", "")
        authors = properties.get("authors", "")
        extension = existing.name.rsplit(".", 1)[-1] if "." in existing.name else "epub"
        new_name = format_file_name(authors, title, extension)
        if new_name != existing.name:
            record = self._store.rename(file_id, new_name)

        new_authors = changes.get("authors")
        if new_authors is not None and new_authors != old_properties.get("authors"):
            root_id = self.ensure_root_folder()
            new_folder_id = self.ensure_author_folder(root_id, get_first_author(new_authors))
            old_folder_id = existing.folder_id
            if old_folder_id and old_folder_id != new_folder_id:
                record = self._store.move(file_id, new_folder_id, old_folder_id)

        return record

    # --- Delete ---

    def delete_book(self, file_id: str) -> None:
        """Delete a book record and, best effort, its cover image."""
        record = self._store.get(file_id)
        cover_id = record.properties.get(COVER_FILE_ID_KEY)
        if cover_id:
            try:
                self._store.delete(cover_id)
            except StoreError as exc:
                logger.warning("Could not delete cover %s of %s: %s", cover_id, file_id, exc)
        self._store.delete(file_id)
        logger.info("Deleted %s", file_id)
