# ABOUTME: Bulk migration of a Calibre library folder tree into the managed library.
# ABOUTME: Walks author/book folders, reads metadata.opf, and registers each book, isolating failures.

import logging
from dataclasses import dataclass, field
from enum import Enum

from mylibrary.formats.epub import EpubReadError, read_epub_metadata
from mylibrary.formats.opf import parse_metadata_opf
from mylibrary.metadata.types import BookMetadata
from mylibrary.store.backend import DriveFile, ObjectStore
from mylibrary.store.properties import EPUB_MIME, mime_type_for_filename
from mylibrary.store.records import RecordStore

logger = logging.getLogger(__name__)

METADATA_FILE_NAME = "metadata.opf"
COVER_FILE_NAME = "cover.jpg"
EXTENSION_PRIORITY = (".epub", ".pdf", ".mobi", ".azw3", ".azw")

SKIP_DUPLICATE_ISBN = "duplicate ISBN"
SKIP_NO_BOOK_FILE = "no supported book file"


class MigrationStatus(str, Enum):
    SUCCEEDED = "succeeded"
    SKIPPED = "skipped"
    ERROR = "error"


@dataclass
class MigrationOptions:
    dry_run: bool = False
    limit: int | None = None


@dataclass
class MigrationDetail:
    """Outcome of one book folder."""

    title: str
    status: MigrationStatus
    reason: str | None = None


@dataclass
class MigrationResult:
    """Summary of a migration run, with details in discovery order."""

    total: int = 0
    succeeded: int = 0
    skipped: int = 0
    errors: int = 0
    details: list[MigrationDetail] = field(default_factory=list)

    def record(self, detail: MigrationDetail) -> None:
        self.total += 1
        self.details.append(detail)
        if detail.status is MigrationStatus.SUCCEEDED:
            self.succeeded += 1
        elif detail.status is MigrationStatus.SKIPPED:
            self.skipped += 1
        else:
            self.errors += 1

    def by_status(self, status: MigrationStatus) -> list[MigrationDetail]:
        return [d for d in self.details if d.status is status]


def select_book_file(files: list[DriveFile]) -> DriveFile | None:
    """Pick the book artifact to ingest: epub > pdf > mobi > azw3 > azw."""
    for extension in EXTENSION_PRIORITY:
        for file in files:
            if file.name.lower().endswith(extension):
                return file
    return None


def _find_by_name(files: list[DriveFile], name: str) -> DriveFile | None:
    return next((f for f in files if f.name == name), None)


class CalibreMigrator:
    """Copies books from a Calibre-style tree (author/book folders) into the library.

    The source tree is read through the raw object store; ingestion goes
    through the record store. Books are processed one at a time, and a
    failure in one book folder is recorded without stopping the run.
    """

    def __init__(self, store: ObjectStore, records: RecordStore) -> None:
        self._store = store
        self._records = records

    def migrate(
        self, source_folder_id: str, options: MigrationOptions | None = None
    ) -> MigrationResult:
        options = options or MigrationOptions()
        result = MigrationResult()

        for author_folder in self._store.list_children(source_folder_id):
            if not author_folder.is_folder:
                continue

            for book_folder in self._store.list_children(author_folder.id):
                if not book_folder.is_folder:
                    continue

                if options.limit is not None and result.total >= options.limit:
                    return result

                try:
                    detail = self._migrate_book(book_folder, options)
                except Exception as exc:
                    logger.warning("Migration of %s failed: %s", book_folder.name, exc)
                    detail = MigrationDetail(
                        title=book_folder.name,
                        status=MigrationStatus.ERROR,
                        reason=str(exc) or type(exc).__name__,
                    )
                result.record(detail)

        return result

    def _read_metadata(
        self, files: list[DriveFile], book_file: DriveFile | None
    ) -> tuple[BookMetadata, bytes | None]:
        """Metadata from metadata.opf, else from the EPUB artifact itself.

        Returns the artifact bytes too when they had to be downloaded, so the
        caller does not fetch them twice.
        """
        opf_file = _find_by_name(files, METADATA_FILE_NAME)
        if opf_file is not None:
            content = self._store.get_content(opf_file.id)
            return parse_metadata_opf(content.decode("utf-8", errors="replace")), None

        if book_file is not None and mime_type_for_filename(book_file.name) == EPUB_MIME:
            content = self._store.get_content(book_file.id)
            try:
                return read_epub_metadata(content), content
            except EpubReadError as exc:
                logger.warning("No embedded metadata in %s: %s", book_file.name, exc)
                return BookMetadata(), content

        return BookMetadata(), None

    def _migrate_book(self, book_folder: DriveFile, options: MigrationOptions) -> MigrationDetail:
        files = self._store.list_children(book_folder.id)
        book_file = select_book_file(files)

        metadata, book_content = self._read_metadata(files, book_file)
        title = metadata.title or book_folder.name

        if metadata.isbn and self._records.find_book_by_isbn(metadata.isbn) is not None:
            return MigrationDetail(title, MigrationStatus.SKIPPED, SKIP_DUPLICATE_ISBN)

        if book_file is None:
            return MigrationDetail(title, MigrationStatus.SKIPPED, SKIP_NO_BOOK_FILE)

        if options.dry_run:
            return MigrationDetail(title, MigrationStatus.SUCCEEDED)

        if book_content is None:
            book_content = self._store.get_content(book_file.id)

        full_metadata = BookMetadata(
            isbn=metadata.isbn,
            title=title,
            authors=metadata.authors,
            publisher=metadata.publisher,
            published_date=metadata.published_date,
            description=metadata.description,
        )
        record = self._records.register_book(
            full_metadata, book_content, mime_type_for_filename(book_file.name)
        )

        cover_file = _find_by_name(files, COVER_FILE_NAME)
        if cover_file is not None:
            try:
                cover_data = self._store.get_content(cover_file.id)
                self._records.attach_cover(record, cover_data)
            except Exception as exc:
                logger.warning("Cover migration failed for %s: %s", title, exc)

        return MigrationDetail(title, MigrationStatus.SUCCEEDED)
