# ABOUTME: Integration tests for migrating a Calibre tree and then using the library.
# ABOUTME: Migrated books must be listable, searchable, downloadable, and deduplicated on rerun.

from mylibrary.cache import CacheService
from mylibrary.core.books import BookService
from mylibrary.core.migrator import CalibreMigrator, MigrationOptions, MigrationStatus
from mylibrary.metadata.types import BookMetadata
from mylibrary.store.memory import InMemoryObjectStore
from mylibrary.store.records import RecordStore
from tests.fixtures.opf import SOURCE_FOLDER_ID, CalibreBook, make_opf, seed_calibre_book


class NoMetadata:
    """Metadata provider that never finds anything."""

    @property
    def name(self) -> str:
        return "none"

    def fetch_by_isbn(self, isbn: str) -> BookMetadata | None:
        return None


def _seed_library(store: InMemoryObjectStore) -> None:
    seed_calibre_book(
        store,
        CalibreBook(
            author="太宰治",
            folder="人間失格 (12)",
            opf=make_opf(
                title="人間失格",
                authors=["太宰治"],
                isbn="9784101006017",
                publisher="新潮社",
                date="1952-10-01T00:00:00+00:00",
            ),
            epub=b"EPUB-ningen",
            cover=b"JPEG-ningen",
        ),
    )
    seed_calibre_book(
        store,
        CalibreBook(
            author="芥川龍之介",
            folder="羅生門 (7)",
            opf=make_opf(title="羅生門", authors=["芥川龍之介"], isbn="9784101025018"),
            pdf=b"PDF-rashomon",
        ),
    )
    seed_calibre_book(
        store,
        CalibreBook(author="Unknown", folder="notes (3)", opf=make_opf(title="notes")),
    )


class TestMigrationLifecycle:
    """Migrate, then read back through BookService."""

    def test_migrate_then_browse(self) -> None:
        """Migrated books show up in listing and search and download intact."""
        store = InMemoryObjectStore()
        records = RecordStore(store)
        _seed_library(store)

        result = CalibreMigrator(store, records).migrate(SOURCE_FOLDER_ID)
        assert (result.succeeded, result.skipped, result.errors) == (2, 1, 0)

        service = BookService(records, NoMetadata(), CacheService())
        listed = service.list_books()
        assert sorted(f.properties["title"] for f in listed.files) == ["人間失格", "羅生門"]

        (hit,) = service.search_books("羅生").files
        content, file = service.download_book(hit.id)
        assert content == b"PDF-rashomon"
        assert file.name == "[芥川龍之介] 羅生門.pdf"

        (ningen,) = service.search_books("太宰").files
        assert ningen.properties["published_date"] == "1952-10-01"
        assert service.get_cover_image_content(ningen.properties["cover_file_id"]) == b"JPEG-ningen"

    def test_rerun_skips_everything_already_migrated(self) -> None:
        """A second run finds every ISBN already registered."""
        store = InMemoryObjectStore()
        records = RecordStore(store)
        _seed_library(store)
        migrator = CalibreMigrator(store, records)

        migrator.migrate(SOURCE_FOLDER_ID)
        second = migrator.migrate(SOURCE_FOLDER_ID)

        assert second.succeeded == 0
        assert [d.status for d in second.details] == [MigrationStatus.SKIPPED] * 3
        assert len(records.list_books().files) == 2

    def test_dry_run_then_real_run(self) -> None:
        store = InMemoryObjectStore()
        records = RecordStore(store)
        _seed_library(store)
        migrator = CalibreMigrator(store, records)

        dry = migrator.migrate(SOURCE_FOLDER_ID, MigrationOptions(dry_run=True))
        real = migrator.migrate(SOURCE_FOLDER_ID)

        assert dry.succeeded == real.succeeded == 2
        assert len(records.list_books().files) == 2
