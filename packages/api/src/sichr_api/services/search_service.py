"""Cached listing search."""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any

import structlog

from sichr_shared.constants import (
    APARTMENTS_TABLE,
    AVAILABLE_STATUS,
    RADIUS_LOOKUP_RPC,
    SEARCH_CACHE_NAMESPACE,
    SEARCH_RESULT_LIMIT,
    TEXT_SEARCH_COLUMNS,
)
from sichr_shared.models.listings import GeoPoint, OptimizedListing, SearchFilters

from sichr_api.cache.keys import build_cache_key
from sichr_api.cache.stats import HitRateTracker
from sichr_api.cache.store import CacheStore
from sichr_api.utils.filtering import (
    apply_equality_filters,
    apply_range_filter,
    apply_text_search,
)

logger = structlog.get_logger(__name__)

LISTING_COLUMNS = """
    id,
    title,
    address,
    rent_amount,
    rooms,
    size_sqm,
    furnished,
    city,
    created_at,
    apartment_images!inner (
        image_url,
        is_primary
    ),
    apartment_analytics!left (
        total_views,
        total_likes
    )
"""


@dataclass(frozen=True)
class SearchResult:
    results: list[dict[str, Any]]
    cached: bool
    latency_ms: float

    @property
    def result_count(self) -> int:
        return len(self.results)


class SearchOptimizer:
    """Answers listing searches from the cache, querying Supabase once per miss."""

    def __init__(self, supabase: Any, cache: CacheStore, tracker: HitRateTracker) -> None:
        self._supabase = supabase
        self._cache = cache
        self._tracker = tracker

    @staticmethod
    def cache_key(filters: SearchFilters) -> str:
        return build_cache_key(SEARCH_CACHE_NAMESPACE, filters)

    async def search(self, filters: SearchFilters) -> SearchResult:
        start = time.perf_counter()
        key = self.cache_key(filters)

        cached = self._cache.get(key)
        if cached is not None:
            self._tracker.record_hit()
            latency_ms = (time.perf_counter() - start) * 1000
            logger.info("search_cache_hit", key=key, latency_ms=round(latency_ms, 2))
            return SearchResult(results=cached, cached=True, latency_ms=latency_ms)

        self._tracker.record_miss()
        rows = await self._fetch(filters)
        results = [OptimizedListing.from_db_row(row).to_cache_dict() for row in rows]
        self._cache.set(key, results)

        latency_ms = (time.perf_counter() - start) * 1000
        logger.info(
            "search_completed",
            key=key,
            result_count=len(results),
            latency_ms=round(latency_ms, 2),
        )
        return SearchResult(results=results, cached=False, latency_ms=latency_ms)

    async def _nearby_ids(self, location: GeoPoint, radius_km: float) -> list[Any]:
        response = await self._supabase.rpc(
            RADIUS_LOOKUP_RPC,
            {"lat": location.lat, "lng": location.lng, "radius_km": radius_km},
        ).execute()
        return [row["id"] for row in response.data or []]

    def build_query(self, filters: SearchFilters, ids: list[Any] | None = None) -> Any:
        """Build the Supabase query plan for `filters`, optionally restricted to `ids`."""
        query = (
            self._supabase.table(APARTMENTS_TABLE)
            .select(LISTING_COLUMNS)
            .eq("status", AVAILABLE_STATUS)
        )
        query = apply_range_filter(query, "rent_amount", filters.min_price, filters.max_price)
        query = apply_equality_filters(
            query,
            {"rooms": filters.rooms, "furnished": filters.furnished, "city": filters.city},
        )
        query = apply_text_search(query, TEXT_SEARCH_COLUMNS, filters.text)
        if ids is not None:
            query = query.in_("id", ids)
        return query.order("created_at", desc=True).limit(SEARCH_RESULT_LIMIT)

    async def _fetch(self, filters: SearchFilters) -> list[dict[str, Any]]:
        ids: list[Any] | None = None
        if filters.location is not None:
            ids = await self._nearby_ids(filters.location, filters.radius_km)
            if not ids:
                logger.info("search_radius_empty", radius_km=filters.radius_km)
                return []

        response = await self.build_query(filters, ids).execute()
        return response.data or []
