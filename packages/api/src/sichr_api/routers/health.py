"""Health check endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from sichr_api import __version__
from sichr_api.cache.stats import HitRateTracker
from sichr_api.cache.store import CacheStore
from sichr_api.dependencies import get_cache_store, get_hit_tracker

router = APIRouter(tags=["health"])


@router.get("/health")
async def health() -> dict:
    return {"status": "ok", "version": __version__}


@router.get("/ready")
async def ready(
    cache: CacheStore = Depends(get_cache_store),
    tracker: HitRateTracker = Depends(get_hit_tracker),
) -> dict:
    return {"status": "ready", "cache_entries": cache.size, "cache": tracker.snapshot()}
