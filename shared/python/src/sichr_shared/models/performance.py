"""
models/performance.py — Pydantic models for performance reports and
database maintenance results.
"""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import Field

from sichr_shared.constants import HealthStatus, Priority, RecommendationType
from sichr_shared.models.listings import CamelModel

MaintenanceStatus = Literal["success", "warning", "error"]


class PerformanceSample(CamelModel):
    """Computed fresh on each report request, never stored."""

    function_latency_ms: float
    store_latency_ms: float
    cache_size: int
    cache_memory_bytes_approx: int
    hit_rate_percent: float
    slow_operation_count: int
    timestamp: datetime


class Recommendation(CamelModel):
    type: RecommendationType
    priority: Priority
    title: str
    description: str
    action: str


class PerformanceReport(CamelModel):
    performance: PerformanceSample
    recommendations: list[Recommendation] = Field(default_factory=list)
    status: HealthStatus


class OperationResult(CamelModel):
    """Tagged outcome of one maintenance step."""

    operation: str
    result: str
    status: MaintenanceStatus

    @classmethod
    def ok(cls, operation: str, result: str) -> "OperationResult":
        return cls(operation=operation, result=result, status="success")


class PopularCacheSummary(CamelModel):
    """How much of each popular dataset was written to the cache."""

    popular_apartments: int = 0
    cities: int = 0
    price_stats: bool = False
    trending_searches: int = 0


class TrendingSearch(CamelModel):
    term: str
    count: int
