# ABOUTME: Unit tests for the HTTP client abstraction.
# ABOUTME: Tests the HttpClient protocol, LibraryHttpClient, retries, and binary downloads.

import httpx
import pytest

from mylibrary.metadata.http import HttpClient, LibraryHttpClient, MetadataFetchError


class FakeTransport(httpx.BaseTransport):
    """Fake transport for httpx that returns canned responses."""

    def __init__(self, responses: list[httpx.Response] | None = None) -> None:
        self._responses = list(responses or [])
        self._call_count = 0

    def handle_request(self, request: httpx.Request) -> httpx.Response:
        self._call_count += 1
        if self._responses:
            return self._responses.pop(0)
        return httpx.Response(200, json={"ok": True})

    @property
    def call_count(self) -> int:
        return self._call_count


def _client(transport: httpx.BaseTransport, **kwargs: float) -> LibraryHttpClient:
    return LibraryHttpClient(min_request_interval=0.0, transport=transport, **kwargs)


class TestLibraryHttpClient:
    """Tests for LibraryHttpClient."""

    def test_satisfies_protocol(self) -> None:
        assert isinstance(LibraryHttpClient(min_request_interval=0.0), HttpClient)

    def test_get_returns_json(self) -> None:
        client = _client(FakeTransport())
        assert client.get("https://example.com/api", params={"q": "x"}) == {"ok": True}

    def test_get_returns_json_list(self) -> None:
        """openBD answers with a top-level JSON array."""
        transport = FakeTransport([httpx.Response(200, json=[None])])
        assert _client(transport).get("https://api.openbd.jp/v1/get") == [None]

    def test_get_bytes_returns_body(self) -> None:
        transport = FakeTransport([httpx.Response(200, content=b"\xff\xd8jpeg")])
        assert _client(transport).get_bytes("https://example.com/c.jpg") == b"\xff\xd8jpeg"

    def test_user_agent_header(self) -> None:
        client = _client(FakeTransport())
        assert "mylibrary/" in client._client.headers["user-agent"]

    def test_invalid_json_raises(self) -> None:
        transport = FakeTransport([httpx.Response(200, content=b"<html>")])
        with pytest.raises(MetadataFetchError, match="Invalid JSON"):
            _client(transport).get("https://example.com/api")

    def test_http_error_raises_metadata_fetch_error(self) -> None:
        transport = FakeTransport([httpx.Response(404, json={"error": "not found"})])
        with pytest.raises(MetadataFetchError, match="404"):
            _client(transport).get("https://example.com/missing")

    def test_retry_on_429(self) -> None:
        transport = FakeTransport(
            [httpx.Response(429), httpx.Response(200, json={"ok": True})]
        )
        client = _client(transport, retry_delay=0.01)
        assert client.get("https://example.com/api") == {"ok": True}
        assert transport.call_count == 2

    def test_retry_exhausted_raises(self) -> None:
        transport = FakeTransport([httpx.Response(500)] * 4)
        client = _client(transport, max_retries=3, retry_delay=0.01)
        with pytest.raises(MetadataFetchError, match="500"):
            client.get("https://example.com/api")
        assert transport.call_count == 4  # 1 initial + 3 retries

    def test_network_error_raises(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        client = _client(httpx.MockTransport(handler))
        with pytest.raises(MetadataFetchError, match="Request failed"):
            client.get_bytes("https://example.com/c.jpg")

    def test_control_character_url_raises_metadata_fetch_error(self) -> None:
        """A URL httpx refuses to build never escapes as httpx.InvalidURL."""
        transport = FakeTransport()
        with pytest.raises(MetadataFetchError, match="Invalid URL"):
            _client(transport).get_bytes("http://x/\x00")
        assert transport.call_count == 0

    def test_empty_url_raises_metadata_fetch_error(self) -> None:
        transport = FakeTransport()
        with pytest.raises(MetadataFetchError, match="Invalid URL"):
            _client(transport).get_bytes("")
        assert transport.call_count == 0

    def test_non_retryable_status_not_retried(self) -> None:
        transport = FakeTransport([httpx.Response(403)])
        with pytest.raises(MetadataFetchError, match="HTTP 403"):
            _client(transport, retry_delay=0.01).get("https://example.com/api")
        assert transport.call_count == 1
