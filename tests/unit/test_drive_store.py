# ABOUTME: Unit tests for GoogleDriveStore against a mocked Drive v3 API.
# ABOUTME: Validates request shapes, response mapping, and error classification.

import json

import httpx
import pytest

from mylibrary.store.backend import ObjectStore, RecordNotFoundError, StoreUnavailableError
from mylibrary.store.drive import GoogleDriveStore, file_from_json

FILE_JSON = {
    "id": "f1",
    "name": "[太宰治] 人間失格.epub",
    "mimeType": "application/epub+zip",
    "properties": {"app_type": "my_library_book"},
    "parents": ["folder1"],
    "size": "1024",
}


class RecordingHandler:
    """httpx MockTransport handler that records requests and replays responses."""

    def __init__(self, *responses: httpx.Response) -> None:
        self._responses = list(responses)
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self._responses:
            return self._responses.pop(0)
        return httpx.Response(200, json={})


def _store(handler: RecordingHandler) -> GoogleDriveStore:
    return GoogleDriveStore("token-123", transport=httpx.MockTransport(handler))


class TestFileFromJson:
    """Tests for file_from_json."""

    def test_maps_fields(self) -> None:
        file = file_from_json(FILE_JSON)
        assert file.id == "f1"
        assert file.mime_type == "application/epub+zip"
        assert file.folder_id == "folder1"
        assert file.size == 1024

    def test_missing_optional_fields(self) -> None:
        file = file_from_json({"id": "x"})
        assert file.properties == {}
        assert file.parents == []
        assert file.size is None


class TestGoogleDriveStore:
    """Tests for the Drive REST adapter."""

    def test_satisfies_protocol(self) -> None:
        assert isinstance(_store(RecordingHandler()), ObjectStore)

    def test_sends_bearer_token(self) -> None:
        handler = RecordingHandler(httpx.Response(200, json=FILE_JSON))
        _store(handler).get("f1")
        assert handler.requests[0].headers["authorization"] == "Bearer token-123"

    def test_ensure_folder_returns_existing(self) -> None:
        handler = RecordingHandler(httpx.Response(200, json={"files": [{"id": "root1"}]}))
        assert _store(handler).ensure_folder("MyLibrary") == "root1"
        assert len(handler.requests) == 1
        query = handler.requests[0].url.params["q"]
        assert "name='MyLibrary'" in query
        assert "trashed=false" in query

    def test_ensure_folder_creates_when_absent(self) -> None:
        handler = RecordingHandler(
            httpx.Response(200, json={"files": []}),
            httpx.Response(200, json={"id": "new1"}),
        )
        assert _store(handler).ensure_folder("O'Brien", "root1") == "new1"
        assert "name='O\\'Brien'" in handler.requests[0].url.params["q"]
        assert "'root1' in parents" in handler.requests[0].url.params["q"]
        body = json.loads(handler.requests[1].content)
        assert body == {
            "name": "O'Brien",
            "mimeType": "application/vnd.google-apps.folder",
            "parents": ["root1"],
        }

    def test_create_file_multipart_upload(self) -> None:
        handler = RecordingHandler(httpx.Response(200, json=FILE_JSON))
        file = _store(handler).create_file(
            "folder1", "book.epub", b"EPUBDATA", "application/epub+zip", {"isbn": "1"}
        )
        request = handler.requests[0]
        assert file.id == "f1"
        assert request.url.params["uploadType"] == "multipart"
        assert request.headers["content-type"].startswith("multipart/related; boundary=")
        assert b"EPUBDATA" in request.content
        assert b'"properties": {"isbn": "1"}' in request.content

    def test_move_uses_add_and_remove_parents(self) -> None:
        handler = RecordingHandler(httpx.Response(200, json=FILE_JSON))
        _store(handler).move("f1", "new", "old")
        params = handler.requests[0].url.params
        assert handler.requests[0].method == "PATCH"
        assert params["addParents"] == "new"
        assert params["removeParents"] == "old"

    def test_list_by_property_query_and_paging(self) -> None:
        handler = RecordingHandler(
            httpx.Response(200, json={"files": [FILE_JSON], "nextPageToken": "tok2"})
        )
        page = _store(handler).list_by_property("app_type", "my_library_book", "tok1", 10)
        params = handler.requests[0].url.params
        assert "properties has { key='app_type' and value='my_library_book' }" in params["q"]
        assert params["pageToken"] == "tok1"
        assert params["pageSize"] == "10"
        assert page.next_page_token == "tok2"
        assert page.files[0].id == "f1"

    def test_search_query_includes_marker_and_name(self) -> None:
        handler = RecordingHandler(httpx.Response(200, json={"files": []}))
        _store(handler).search(
            "太宰", marker=("app_type", "my_library_book"), property_keys=["title", "authors"]
        )
        query = handler.requests[0].url.params["q"]
        assert query.startswith("properties has { key='app_type'")
        assert "name contains '太宰'" in query
        assert "key='authors' and value='太宰'" in query

    def test_get_content(self) -> None:
        handler = RecordingHandler(httpx.Response(200, content=b"bytes"))
        assert _store(handler).get_content("f1") == b"bytes"
        assert handler.requests[0].url.params["alt"] == "media"

    def test_get_content_stream(self) -> None:
        handler = RecordingHandler(httpx.Response(200, content=b"x" * 200_000))
        stream = _store(handler).get_content_stream("f1")
        assert b"".join(stream) == b"x" * 200_000

    def test_list_children_follows_pages(self) -> None:
        handler = RecordingHandler(
            httpx.Response(200, json={"files": [{"id": "a"}], "nextPageToken": "t"}),
            httpx.Response(200, json={"files": [{"id": "b"}]}),
        )
        children = _store(handler).list_children("parent")
        assert [c.id for c in children] == ["a", "b"]
        assert handler.requests[1].url.params["pageToken"] == "t"

    def test_404_raises_not_found(self) -> None:
        handler = RecordingHandler(httpx.Response(404, json={"error": {}}))
        with pytest.raises(RecordNotFoundError):
            _store(handler).delete("missing")

    def test_stream_404_raises_on_call(self) -> None:
        handler = RecordingHandler(httpx.Response(404))
        with pytest.raises(RecordNotFoundError):
            _store(handler).get_content_stream("missing")

    def test_server_error_raises_unavailable(self) -> None:
        handler = RecordingHandler(httpx.Response(503))
        with pytest.raises(StoreUnavailableError, match="503"):
            _store(handler).get("f1")

    def test_transport_error_raises_unavailable(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("down", request=request)

        store = GoogleDriveStore("t", transport=httpx.MockTransport(handler))
        with pytest.raises(StoreUnavailableError):
            store.list_children("x")
