"""Cache warming for the marketplace's most requested datasets."""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable
from typing import Any

import structlog

from sichr_shared.constants import (
    ANALYTICS_EVENTS_TABLE,
    APARTMENTS_TABLE,
    AVAILABLE_STATUS,
    CITIES_WITH_COUNTS_KEY,
    CITIES_WITH_COUNTS_RPC,
    POPULAR_APARTMENTS_KEY,
    POPULAR_APARTMENTS_LIMIT,
    PRICE_STATISTICS_KEY,
    PRICE_STATISTICS_RPC,
    SEARCH_EVENT_TYPE,
    TRENDING_EVENTS_LIMIT,
    TRENDING_SEARCHES_KEY,
    TRENDING_TERMS_LIMIT,
)
from sichr_shared.models.performance import PopularCacheSummary, TrendingSearch

from sichr_api.cache.store import CacheStore
from sichr_api.utils.filtering import apply_since_filter

logger = structlog.get_logger(__name__)


def top_search_terms(
    events: Iterable[dict[str, Any]],
    limit: int = TRENDING_TERMS_LIMIT,
) -> list[TrendingSearch]:
    """Count lower-cased `metadata.query` terms, most frequent first."""
    counts: Counter[str] = Counter()
    for event in events:
        query = (event.get("metadata") or {}).get("query")
        if isinstance(query, str) and query:
            counts[query.lower()] += 1
    return [TrendingSearch(term=term, count=count) for term, count in counts.most_common(limit)]


class PopularDataCacher:
    """Pre-computes popular listings, city counts, price stats and trending searches."""

    def __init__(self, supabase: Any, cache: CacheStore) -> None:
        self._supabase = supabase
        self._cache = cache

    async def warm(self) -> PopularCacheSummary:
        popular = await self._popular_apartments()
        self._cache.set(POPULAR_APARTMENTS_KEY, popular)

        cities = (await self._supabase.rpc(CITIES_WITH_COUNTS_RPC).execute()).data
        self._cache.set(CITIES_WITH_COUNTS_KEY, cities)

        price_stats = (await self._supabase.rpc(PRICE_STATISTICS_RPC).execute()).data
        self._cache.set(PRICE_STATISTICS_KEY, price_stats)

        trending = [t.model_dump() for t in await self._trending_searches()]
        self._cache.set(TRENDING_SEARCHES_KEY, trending)

        summary = PopularCacheSummary(
            popular_apartments=len(popular or []),
            cities=len(cities or []),
            price_stats=price_stats is not None,
            trending_searches=len(trending),
        )
        logger.info("popular_data_cached", **summary.model_dump())
        return summary

    async def _popular_apartments(self) -> list[dict[str, Any]]:
        response = await (
            self._supabase.table(APARTMENTS_TABLE)
            .select(
                "*, apartment_images!inner (image_url, is_primary), "
                "apartment_analytics!inner (total_views)"
            )
            .eq("status", AVAILABLE_STATUS)
            .order("apartment_analytics(total_views)", desc=True)
            .limit(POPULAR_APARTMENTS_LIMIT)
            .execute()
        )
        return response.data or []

    async def _trending_searches(self) -> list[TrendingSearch]:
        query = (
            self._supabase.table(ANALYTICS_EVENTS_TABLE)
            .select("metadata")
            .eq("event_type", SEARCH_EVENT_TYPE)
        )
        response = await apply_since_filter(query, "timestamp", hours=24).limit(
            TRENDING_EVENTS_LIMIT
        ).execute()
        return top_search_terms(response.data or [])
