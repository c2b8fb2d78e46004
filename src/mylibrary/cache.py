# ABOUTME: In-process key/value cache with per-entry expiry and prefix invalidation.
# ABOUTME: Hides object-store latency for repeated listing and search reads.

import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

DEFAULT_TTL = 60 * 60.0  # 1 hour, in seconds


@dataclass
class CacheEntry:
    """A cached value and the clock reading after which it is stale."""

    data: Any
    expiry: float


class CacheService:
    """Key/value cache with lazy expiry.

    Expired entries are dropped when they are next read. There is no locking:
    a single logical owner mutates the cache at a time.
    """

    def __init__(
        self,
        ttl: float = DEFAULT_TTL,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._entries: dict[str, CacheEntry] = {}
        self._ttl = ttl
        self._clock = clock

    def _live_entry(self, key: str) -> CacheEntry | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if self._clock() > entry.expiry:
            del self._entries[key]
            return None
        return entry

    def get(self, key: str) -> Any | None:
        entry = self._live_entry(key)
        return entry.data if entry is not None else None

    def set(self, key: str, data: Any) -> None:
        self._entries[key] = CacheEntry(data=data, expiry=self._clock() + self._ttl)

    def has(self, key: str) -> bool:
        return self._live_entry(key) is not None

    def invalidate(self, key: str) -> None:
        self._entries.pop(key, None)

    def invalidate_all(self) -> None:
        self._entries.clear()

    def invalidate_by_prefix(self, prefix: str) -> None:
        for key in [k for k in self._entries if k.startswith(prefix)]:
            del self._entries[key]

    def __len__(self) -> int:
        return len(self._entries)
