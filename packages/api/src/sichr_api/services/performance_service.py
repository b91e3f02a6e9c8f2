"""Performance sampling and threshold-based recommendations."""

from __future__ import annotations

import time
from collections.abc import Callable
from datetime import datetime, timezone
from typing import Any

import structlog

from sichr_shared.constants import (
    ANALYTICS_EVENTS_TABLE,
    APARTMENTS_TABLE,
    GOOD_STORE_LATENCY_MS,
    LOW_HIT_RATE_PERCENT,
    MAX_SLOW_OPERATIONS,
    SLOW_OPERATION_SAMPLE_LIMIT,
    SLOW_OPERATION_WINDOW_HOURS,
    SLOW_QUERY_EVENT_TYPE,
    SLOW_STORE_LATENCY_MS,
    HealthStatus,
)
from sichr_shared.models.performance import (
    PerformanceReport,
    PerformanceSample,
    Recommendation,
)

from sichr_api.cache.stats import HitRateTracker
from sichr_api.cache.store import CacheStore
from sichr_api.utils.filtering import apply_since_filter

logger = structlog.get_logger(__name__)


def recommend(sample: PerformanceSample) -> list[Recommendation]:
    """Apply every rule independently; any subset may fire."""
    recommendations: list[Recommendation] = []

    if sample.store_latency_ms > SLOW_STORE_LATENCY_MS:
        recommendations.append(
            Recommendation(
                type="database",
                priority="high",
                title="Slow Database Queries",
                description=(
                    f"Database response time is over {SLOW_STORE_LATENCY_MS:.0f}ms. "
                    "Consider adding indexes or optimizing queries."
                ),
                action="Review and optimize database queries",
            )
        )

    if sample.hit_rate_percent < LOW_HIT_RATE_PERCENT:
        recommendations.append(
            Recommendation(
                type="cache",
                priority="medium",
                title="Low Cache Hit Rate",
                description=(
                    f"Cache hit rate is {sample.hit_rate_percent}%. "
                    "Consider caching more frequently accessed data."
                ),
                action="Increase cache coverage and TTL",
            )
        )

    if sample.slow_operation_count > MAX_SLOW_OPERATIONS:
        recommendations.append(
            Recommendation(
                type="performance",
                priority="medium",
                title="Multiple Slow Queries",
                description=(
                    f"{sample.slow_operation_count} slow queries detected in the last "
                    f"{SLOW_OPERATION_WINDOW_HOURS} hours."
                ),
                action="Investigate and optimize slow queries",
            )
        )

    return recommendations


def health_status(store_latency_ms: float) -> HealthStatus:
    if store_latency_ms < GOOD_STORE_LATENCY_MS:
        return "good"
    if store_latency_ms < SLOW_STORE_LATENCY_MS:
        return "warning"
    return "critical"


class PerformanceReporter:
    def __init__(
        self,
        supabase: Any,
        cache: CacheStore,
        tracker: HitRateTracker,
        timer: Callable[[], float] = time.perf_counter,
    ) -> None:
        self._supabase = supabase
        self._cache = cache
        self._tracker = tracker
        self._timer = timer

    async def _probe_store(self) -> float:
        """Round-trip time of a minimal query, in milliseconds."""
        start = self._timer()
        await self._supabase.table(APARTMENTS_TABLE).select("id").limit(1).execute()
        return (self._timer() - start) * 1000

    async def _count_slow_operations(self) -> int:
        query = (
            self._supabase.table(ANALYTICS_EVENTS_TABLE)
            .select("event_type, metadata")
            .eq("event_type", SLOW_QUERY_EVENT_TYPE)
        )
        query = apply_since_filter(query, "timestamp", hours=SLOW_OPERATION_WINDOW_HOURS)
        response = await (
            query.order("timestamp", desc=True).limit(SLOW_OPERATION_SAMPLE_LIMIT).execute()
        )
        return len(response.data or [])

    async def sample(self) -> PerformanceSample:
        start = self._timer()
        cache_size = self._cache.size
        memory_bytes = self._cache.approximate_memory_bytes()
        hit_rate = self._tracker.hit_rate_percent()

        store_latency_ms = await self._probe_store()
        slow_operations = await self._count_slow_operations()

        return PerformanceSample(
            function_latency_ms=(self._timer() - start) * 1000,
            store_latency_ms=store_latency_ms,
            cache_size=cache_size,
            cache_memory_bytes_approx=memory_bytes,
            hit_rate_percent=hit_rate,
            slow_operation_count=slow_operations,
            timestamp=datetime.now(timezone.utc),
        )

    async def report(self) -> PerformanceReport:
        sample = await self.sample()
        report = PerformanceReport(
            performance=sample,
            recommendations=recommend(sample),
            status=health_status(sample.store_latency_ms),
        )
        logger.info(
            "performance_report",
            status=report.status,
            store_latency_ms=round(sample.store_latency_ms, 2),
            hit_rate_percent=sample.hit_rate_percent,
            recommendations=[r.type for r in report.recommendations],
        )
        return report
