"""Shared FastAPI dependencies.

The cache and hit-rate tracker live on `app.state` (one per app instance);
the Supabase client comes from `get_supabase`, which tests override.
"""

from __future__ import annotations

from typing import Any

from fastapi import Depends, Request

from sichr_shared.config import settings
from sichr_shared.db import get_supabase_client

from sichr_api.cache.stats import HitRateTracker
from sichr_api.cache.store import CacheStore
from sichr_api.services.image_service import ImagePreloader
from sichr_api.services.maintenance_service import DatabaseOptimizer
from sichr_api.services.performance_service import PerformanceReporter
from sichr_api.services.popular_service import PopularDataCacher
from sichr_api.services.search_service import SearchOptimizer


async def get_supabase() -> Any:
    return await get_supabase_client()


def get_cache_store(request: Request) -> CacheStore:
    return request.app.state.cache_store


def get_hit_tracker(request: Request) -> HitRateTracker:
    return request.app.state.hit_tracker


def get_search_optimizer(
    supabase: Any = Depends(get_supabase),
    cache: CacheStore = Depends(get_cache_store),
    tracker: HitRateTracker = Depends(get_hit_tracker),
) -> SearchOptimizer:
    return SearchOptimizer(supabase, cache, tracker)


def get_popular_cacher(
    supabase: Any = Depends(get_supabase),
    cache: CacheStore = Depends(get_cache_store),
) -> PopularDataCacher:
    return PopularDataCacher(supabase, cache)


def get_image_preloader(supabase: Any = Depends(get_supabase)) -> ImagePreloader:
    return ImagePreloader(supabase)


def get_database_optimizer(supabase: Any = Depends(get_supabase)) -> DatabaseOptimizer:
    return DatabaseOptimizer(supabase, retention_days=settings.analytics_retention_days)


def get_performance_reporter(
    supabase: Any = Depends(get_supabase),
    cache: CacheStore = Depends(get_cache_store),
    tracker: HitRateTracker = Depends(get_hit_tracker),
) -> PerformanceReporter:
    return PerformanceReporter(supabase, cache, tracker)


__all__ = [
    "get_cache_store",
    "get_database_optimizer",
    "get_hit_tracker",
    "get_image_preloader",
    "get_performance_reporter",
    "get_popular_cacher",
    "get_search_optimizer",
    "get_supabase",
]
