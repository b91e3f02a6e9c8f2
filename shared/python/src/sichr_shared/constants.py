"""
constants.py — shared constants used across the cache layer, services and API.

Table names, RPC names, image variants and the recommendation thresholds are
defined here so they stay in sync between modules. Thresholds are fixed and
intentionally not exposed through settings.
"""

from __future__ import annotations

from typing import Final, Literal

# ---------------------------------------------------------------------------
# Cache
# ---------------------------------------------------------------------------
CACHE_TTL_SECONDS: Final[float] = 5 * 60

SEARCH_CACHE_NAMESPACE: Final[str] = "search"

POPULAR_APARTMENTS_KEY: Final[str] = "popular_apartments"
CITIES_WITH_COUNTS_KEY: Final[str] = "cities_with_counts"
PRICE_STATISTICS_KEY: Final[str] = "price_statistics"
TRENDING_SEARCHES_KEY: Final[str] = "trending_searches"

# ---------------------------------------------------------------------------
# Search
# ---------------------------------------------------------------------------
SEARCH_RESULT_LIMIT: Final[int] = 50
DEFAULT_RADIUS_KM: Final[float] = 10.0
AVAILABLE_STATUS: Final[str] = "available"

# Columns matched case-insensitively by free-text search
TEXT_SEARCH_COLUMNS: Final[tuple[str, ...]] = ("title", "address", "description")

POPULAR_APARTMENTS_LIMIT: Final[int] = 20
TRENDING_EVENTS_LIMIT: Final[int] = 100
TRENDING_TERMS_LIMIT: Final[int] = 10

# ---------------------------------------------------------------------------
# Backing store: tables and RPCs
# ---------------------------------------------------------------------------
APARTMENTS_TABLE: Final[str] = "apartments"
APARTMENT_IMAGES_TABLE: Final[str] = "apartment_images"
ANALYTICS_EVENTS_TABLE: Final[str] = "analytics_events"

RADIUS_LOOKUP_RPC: Final[str] = "apartments_within_radius"
CITIES_WITH_COUNTS_RPC: Final[str] = "get_cities_with_counts"
PRICE_STATISTICS_RPC: Final[str] = "get_price_statistics"
CLEANUP_ANALYTICS_RPC: Final[str] = "cleanup_old_analytics"
REFRESH_ANALYTICS_RPC: Final[str] = "refresh_apartment_analytics"
OPTIMIZE_TABLES_RPC: Final[str] = "optimize_tables"

SEARCH_EVENT_TYPE: Final[str] = "search"
SLOW_QUERY_EVENT_TYPE: Final[str] = "slow_query"

# ---------------------------------------------------------------------------
# Images: size -> (dimensions, quality, format)
# ---------------------------------------------------------------------------
ImageSize = Literal["thumbnail", "medium", "large"]

IMAGE_VARIANTS: Final[dict[str, str]] = {
    "thumbnail": "150x150",
    "medium": "400x300",
    "large": "800x600",
}
IMAGE_QUALITY: Final[str] = "85"
IMAGE_FORMAT: Final[str] = "webp"

# Thumbnails per apartment emitted into the preload script
PRELOAD_THUMBNAILS_PER_APARTMENT: Final[int] = 2

# ---------------------------------------------------------------------------
# Performance report thresholds
# ---------------------------------------------------------------------------
SLOW_STORE_LATENCY_MS: Final[float] = 500.0
GOOD_STORE_LATENCY_MS: Final[float] = 100.0
LOW_HIT_RATE_PERCENT: Final[float] = 70.0
MAX_SLOW_OPERATIONS: Final[int] = 5
SLOW_OPERATION_WINDOW_HOURS: Final[int] = 24
SLOW_OPERATION_SAMPLE_LIMIT: Final[int] = 10

# ---------------------------------------------------------------------------
# Typed literals
# ---------------------------------------------------------------------------
RecommendationType = Literal["database", "cache", "performance"]
Priority = Literal["high", "medium", "low"]
HealthStatus = Literal["good", "warning", "critical"]
