"""Thread-safe in-memory cache with lazy TTL expiry."""

from __future__ import annotations

import json
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from sichr_shared.constants import CACHE_TTL_SECONDS


@dataclass(frozen=True)
class CacheEntry:
    key: str
    value: Any
    stored_at: float


class CacheStore:
    """Dict-based cache; an entry older than the TTL is logically absent.

    Expired entries are removed when read (or by `evict_expired`). There is
    no size bound and no eviction policy beyond the TTL.
    """

    def __init__(
        self,
        ttl: float = CACHE_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._store: dict[str, CacheEntry] = {}
        self._lock = threading.Lock()
        self._ttl = ttl
        self._clock = clock

    @property
    def ttl(self) -> float:
        return self._ttl

    def _is_expired(self, entry: CacheEntry, now: float) -> bool:
        return now - entry.stored_at > self._ttl

    def get(self, key: str) -> Any | None:
        with self._lock:
            entry = self._store.get(key)
            if entry is None:
                return None
            if self._is_expired(entry, self._clock()):
                del self._store[key]
                return None
            return entry.value

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            self._store[key] = CacheEntry(key=key, value=value, stored_at=self._clock())

    def clear(self, pattern: str | None = None) -> int:
        """Remove every entry, or only keys containing `pattern` as a substring.

        Returns the number of removed entries.
        """
        with self._lock:
            if not pattern:
                count = len(self._store)
                self._store.clear()
                return count
            matching = [k for k in self._store if pattern in k]
            for k in matching:
                del self._store[k]
            return len(matching)

    def evict_expired(self) -> int:
        """Remove all expired entries. Returns count of evicted keys."""
        now = self._clock()
        with self._lock:
            expired = [k for k, entry in self._store.items() if self._is_expired(entry, now)]
            for k in expired:
                del self._store[k]
            return len(expired)

    def keys(self) -> list[str]:
        with self._lock:
            return list(self._store)

    @property
    def size(self) -> int:
        """Physical entry count, including expired entries not yet read."""
        with self._lock:
            return len(self._store)

    def __len__(self) -> int:
        return self.size

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.get(key) is not None

    def approximate_memory_bytes(self) -> int:
        """Length of the JSON serialization of all entries."""
        with self._lock:
            snapshot = [[k, {"data": e.value, "timestamp": e.stored_at}] for k, e in self._store.items()]
        return len(json.dumps(snapshot, default=str))
