# ABOUTME: HTTP client abstraction for metadata lookups and cover image downloads.
# ABOUTME: Provides rate limiting, retry with backoff, and injectable transport for testing.

import logging
import time
from typing import Any, Protocol, runtime_checkable

import httpx

logger = logging.getLogger(__name__)

_RETRYABLE_STATUS_CODES = {429, 500, 502, 503, 504}


class MetadataFetchError(Exception):
    """Raised when an HTTP request to a metadata source fails."""


@runtime_checkable
class HttpClient(Protocol):
    """Protocol for HTTP GET operations against metadata APIs and image hosts."""

    def get(self, url: str, params: dict[str, str] | None = None) -> Any: ...

    def get_bytes(self, url: str) -> bytes: ...


class LibraryHttpClient:
    """Shared GET client for the lookup sources and cover image hosts.

    Requests are spaced at least ``min_request_interval`` seconds apart. A 429
    or 5xx answer is retried up to ``max_retries`` times, the delay doubling
    each time. Every other failure, a URL httpx cannot build included, comes
    out as MetadataFetchError.
    """

    def __init__(
        self,
        *,
        min_request_interval: float = 0.1,
        max_retries: int = 3,
        retry_delay: float = 1.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        client_kwargs: dict[str, Any] = {
            "headers": {"User-Agent": "mylibrary/0.1.0"},
            "timeout": 30.0,
            "follow_redirects": True,
        }
        if transport is not None:
            client_kwargs["transport"] = transport
        self._client = httpx.Client(**client_kwargs)
        self._min_interval = min_request_interval
        self._max_retries = max_retries
        self._retry_delay = retry_delay
        self._next_request_at = 0.0

    def get(self, url: str, params: dict[str, str] | None = None) -> Any:
        """GET url and decode the JSON body.

        Raises:
            MetadataFetchError: On an unusable URL, a transport failure, a
                non-success status after retries, or a body that is not JSON.
        """
        response = self._request(url, params)
        try:
            return response.json()
        except ValueError as exc:
            raise MetadataFetchError(f"Invalid JSON from {url}: {exc}") from exc

    def get_bytes(self, url: str) -> bytes:
        """GET url and return the raw body, e.g. a cover image."""
        return self._request(url, None).content

    def _request(self, url: str, params: dict[str, str] | None) -> httpx.Response:
        self._wait_turn()

        response = self._send_once(url, params)
        for attempt in range(1, self._max_retries + 1):
            if response.status_code not in _RETRYABLE_STATUS_CODES:
                break
            delay = self._retry_delay * 2 ** (attempt - 1)
            logger.warning(
                "HTTP %d from %s, retry %d/%d in %.1fs",
                response.status_code,
                url,
                attempt,
                self._max_retries,
                delay,
            )
            time.sleep(delay)
            response = self._send_once(url, params)

        if response.is_success:
            return response
        if response.status_code in _RETRYABLE_STATUS_CODES:
            raise MetadataFetchError(
                f"HTTP {response.status_code} from {url} after {1 + self._max_retries} attempts"
            )
        raise MetadataFetchError(f"HTTP {response.status_code} from {url}")

    def _send_once(self, url: str, params: dict[str, str] | None) -> httpx.Response:
        """One GET, with URL and transport failures mapped to MetadataFetchError."""
        if not url:
            raise MetadataFetchError("Invalid URL: empty")
        try:
            return self._client.get(url, params=params)
        except httpx.InvalidURL as exc:
            raise MetadataFetchError(f"Invalid URL {url!r}: {exc}") from exc
        except httpx.HTTPError as exc:
            raise MetadataFetchError(f"Request failed: {url}: {exc}") from exc
        except ValueError as exc:
            # httpx raises ValueError for some malformed URLs
            raise MetadataFetchError(f"Invalid URL {url!r}: {exc}") from exc

    def _wait_turn(self) -> None:
        """Sleep until min_request_interval has passed since the previous request."""
        now = time.monotonic()
        if now < self._next_request_at:
            time.sleep(self._next_request_at - now)
        self._next_request_at = time.monotonic() + self._min_interval
