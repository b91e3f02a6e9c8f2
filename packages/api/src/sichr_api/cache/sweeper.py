"""Background eviction of expired cache entries for long-lived processes."""

from __future__ import annotations

import asyncio
import contextlib

import structlog

from sichr_api.cache.store import CacheStore

logger = structlog.get_logger(__name__)


class CacheSweeper:
    """Periodically calls `CacheStore.evict_expired` on the running loop."""

    def __init__(self, store: CacheStore, interval: float) -> None:
        self._store = store
        self._interval = interval
        self._task: asyncio.Task[None] | None = None

    @property
    def interval(self) -> float:
        return self._interval

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def sweep_once(self) -> int:
        evicted = self._store.evict_expired()
        if evicted:
            logger.info("cache_swept", evicted=evicted, remaining=self._store.size)
        return evicted

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self._interval)
            try:
                self.sweep_once()
            except Exception as exc:
                logger.warning("cache_sweep_failed", error=str(exc))

    def start(self) -> None:
        if self.running or self._interval <= 0:
            return
        self._task = asyncio.create_task(self._run())
        logger.info("cache_sweeper_started", interval_s=self._interval)

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._task
        self._task = None
        logger.info("cache_sweeper_stopped")
