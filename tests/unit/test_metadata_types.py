# ABOUTME: Unit tests for the BookMetadata dataclass.
# ABOUTME: Validates defaults, first-author derivation, and completeness checks.

from mylibrary.metadata.types import FILL_FIELDS, BookMetadata


class TestBookMetadata:
    """Tests for BookMetadata."""

    def test_all_fields_default_empty(self) -> None:
        meta = BookMetadata()
        assert meta.isbn == ""
        assert meta.title == ""
        assert meta.cover_image_url == ""

    def test_first_author(self) -> None:
        assert BookMetadata(authors="著者A-著者B").first_author == "著者A"

    def test_missing_fill_fields(self) -> None:
        """Only empty fill-candidate fields are reported, never isbn or title."""
        meta = BookMetadata(authors="a", publisher="p")
        assert meta.missing_fill_fields() == ["published_date", "description", "cover_image_url"]

    def test_is_complete(self) -> None:
        meta = BookMetadata(**{name: "x" for name in FILL_FIELDS})
        assert meta.is_complete
        assert not BookMetadata(title="only a title").is_complete
