"""Tests for the TTL cache store."""

from __future__ import annotations

import json

from sichr_api.cache.store import CacheStore


def test_set_then_get_returns_value(cache):
    cache.set("search:{}", [{"id": 1}])
    assert cache.get("search:{}") == [{"id": 1}]


def test_missing_key_is_absent(cache):
    assert cache.get("never-written") is None


def test_entry_expires_after_ttl_and_is_removed(cache, clock):
    cache.set("k", "v")
    assert cache.size == 1

    clock.advance(300.001)

    assert cache.get("k") is None
    assert cache.size == 0


def test_entry_is_live_exactly_at_ttl(cache, clock):
    cache.set("k", "v")
    clock.advance(300)
    assert cache.get("k") == "v"


def test_expired_entry_stays_until_read(cache, clock):
    """No background sweep: expiry happens lazily on access."""
    cache.set("k", "v")
    clock.advance(1_000)
    assert cache.size == 1
    assert cache.get("k") is None
    assert cache.size == 0


def test_overwrite_refreshes_timestamp(cache, clock):
    cache.set("k", "old")
    clock.advance(200)
    cache.set("k", "new")
    clock.advance(200)
    assert cache.get("k") == "new"
    assert cache.size == 1


def test_falsy_values_are_hits(cache):
    cache.set("empty", [])
    cache.set("zero", 0)
    assert cache.get("empty") == []
    assert cache.get("zero") == 0


def test_clear_pattern_removes_only_substring_matches(cache):
    cache.set('search:{"city":"Berlin"}', 1)
    cache.set('search:{"city":"Munich"}', 2)
    cache.set("popular_apartments", 3)

    removed = cache.clear("Berlin")

    assert removed == 1
    assert cache.get('search:{"city":"Berlin"}') is None
    assert cache.get('search:{"city":"Munich"}') == 2
    assert cache.get("popular_apartments") == 3


def test_clear_pattern_is_not_a_glob(cache):
    cache.set("search:a", 1)
    cache.set("search:b", 2)
    assert cache.clear("search:*") == 0
    assert cache.size == 2


def test_clear_without_pattern_empties_store(cache):
    for i in range(5):
        cache.set(f"k{i}", i)
    assert cache.clear() == 5
    assert cache.size == 0
    assert cache.keys() == []


def test_clear_counts_expired_but_present_entries(cache, clock):
    cache.set("k", 1)
    clock.advance(301)
    assert cache.clear() == 1


def test_evict_expired_only_removes_stale_entries(cache, clock):
    cache.set("old", 1)
    clock.advance(250)
    cache.set("fresh", 2)
    clock.advance(100)

    assert cache.evict_expired() == 1
    assert cache.keys() == ["fresh"]


def test_contains_respects_expiry(cache, clock):
    cache.set("k", 1)
    assert "k" in cache
    clock.advance(301)
    assert "k" not in cache
    assert 42 not in cache


def test_approximate_memory_bytes_tracks_content(cache):
    assert cache.approximate_memory_bytes() == len(json.dumps([]))
    cache.set("k", {"title": "x" * 100})
    assert cache.approximate_memory_bytes() > 100


def test_default_ttl_is_five_minutes():
    assert CacheStore().ttl == 300
