# ABOUTME: Shared pytest fixtures for mylibrary tests.
# ABOUTME: Provides an in-memory object store, a record store over it, and sample EPUB bytes.

from pathlib import Path

import pytest
from ebooklib import epub

from mylibrary.metadata.types import BookMetadata
from mylibrary.store.memory import InMemoryObjectStore
from mylibrary.store.records import RecordStore


@pytest.fixture
def store() -> InMemoryObjectStore:
    """An empty in-memory object store."""
    return InMemoryObjectStore()


@pytest.fixture
def records(store: InMemoryObjectStore) -> RecordStore:
    """A RecordStore over the in-memory store, without an HTTP client."""
    return RecordStore(store)


@pytest.fixture
def sample_metadata() -> BookMetadata:
    """A fully-populated BookMetadata without a cover URL."""
    return BookMetadata(
        isbn="9784101006017",
        title="人間失格",
        authors="太宰治",
        publisher="新潮社",
        published_date="1952-10",
        description="「恥の多い生涯を送って来ました」",
    )


@pytest.fixture
def sample_epub_bytes(tmp_path: Path) -> bytes:
    """A minimal valid EPUB with an ISBN identifier and known metadata."""
    book = epub.EpubBook()

    book.set_identifier("urn:uuid:0c5a8f1e-0000-0000-0000-000000000000")
    book.add_metadata("DC", "identifier", "urn:isbn:978-4-10-100601-7")
    book.set_title("走れメロス")
    book.set_language("ja")
    book.add_author("太宰治")

    book.add_metadata("DC", "publisher", "新潮社")
    book.add_metadata("DC", "date", "1967-07-10T00:00:00+00:00")
    book.add_metadata("DC", "description", "メロスは激怒した。")

    # Add a minimal chapter so the EPUB is structurally valid
    chapter = epub.EpubHtml(title="Chapter 1", file_name="chap01.xhtml", lang="ja")
    chapter.content = b"<html><body><h1>Chapter 1</h1><p>Content.</p></body></html>"
    book.add_item(chapter)

    book.toc = [epub.Link("chap01.xhtml", "Chapter 1", "chap01")]
    book.add_item(epub.EpubNcx())
    book.add_item(epub.EpubNav())
    book.spine = ["nav", chapter]

    filepath = tmp_path / "run_melos.epub"
    epub.write_epub(str(filepath), book)
    return filepath.read_bytes()
