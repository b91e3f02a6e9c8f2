from sichr_api.cache.keys import build_cache_key, canonical_json
from sichr_api.cache.stats import HitRateTracker
from sichr_api.cache.store import CacheEntry, CacheStore
from sichr_api.cache.sweeper import CacheSweeper

__all__ = [
    "CacheEntry",
    "CacheStore",
    "CacheSweeper",
    "HitRateTracker",
    "build_cache_key",
    "canonical_json",
]
