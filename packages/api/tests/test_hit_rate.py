"""Tests for hit-rate accounting."""

from __future__ import annotations


def test_no_observations_is_zero(tracker):
    assert tracker.hit_rate_percent() == 0


def test_three_hits_one_miss_is_75(tracker):
    for _ in range(3):
        tracker.record_hit()
    tracker.record_miss()
    assert tracker.hit_rate_percent() == 75


def test_only_misses_is_zero(tracker):
    tracker.record_miss()
    tracker.record_miss()
    assert tracker.hit_rate_percent() == 0


def test_rate_is_rounded_to_two_decimals(tracker):
    tracker.record_hit()
    tracker.record_miss()
    tracker.record_miss()
    assert tracker.hit_rate_percent() == 33.33


def test_counters_only_grow(tracker):
    tracker.record_hit()
    tracker.record_miss()
    tracker.record_hit()
    assert (tracker.hits, tracker.misses, tracker.total) == (2, 1, 3)
    assert tracker.snapshot() == {"hits": 2, "misses": 1, "hit_rate_percent": 66.67}
