"""Cache hit/miss accounting."""

from __future__ import annotations

import threading
from typing import Any


class HitRateTracker:
    """Monotonic hit/miss counters for the life of the process.

    There is no reset, decay or windowing; a restart is the only reset.
    """

    def __init__(self) -> None:
        self._hits = 0
        self._misses = 0
        self._lock = threading.Lock()

    def record_hit(self) -> None:
        with self._lock:
            self._hits += 1

    def record_miss(self) -> None:
        with self._lock:
            self._misses += 1

    @property
    def hits(self) -> int:
        return self._hits

    @property
    def misses(self) -> int:
        return self._misses

    @property
    def total(self) -> int:
        return self._hits + self._misses

    def hit_rate_percent(self) -> float:
        """Hits as a percentage of all lookups; 0 when nothing was observed."""
        with self._lock:
            total = self._hits + self._misses
            if total == 0:
                return 0.0
            return round(self._hits / total * 100, 2)

    def snapshot(self) -> dict[str, Any]:
        return {
            "hits": self.hits,
            "misses": self.misses,
            "hit_rate_percent": self.hit_rate_percent(),
        }
