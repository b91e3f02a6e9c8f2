"""Shared test fixtures for sichr-api."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

QUERY_METHODS = (
    "select", "eq", "neq", "gt", "gte", "lt", "lte",
    "ilike", "in_", "or_", "order", "limit", "range",
)


class FakeClock:
    """Manually advanced monotonic clock (seconds)."""

    def __init__(self, start: float = 1_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def make_chain(data=None, count=None, error=None, on_execute=None):
    """Create a chainable mock whose awaited execute() returns `data`.

    error:      exception raised by execute() instead of returning.
    on_execute: callback run just before execute() returns (e.g. to advance a clock).
    """
    chain = MagicMock()
    result = MagicMock(data=data, count=count)

    async def _execute():
        if on_execute is not None:
            on_execute()
        if error is not None:
            raise error
        return result

    chain.execute = AsyncMock(side_effect=_execute)
    for method in QUERY_METHODS:
        getattr(chain, method).return_value = chain
    return chain


def make_supabase(
    table_data: dict[str, Any] | None = None,
    rpc_data: dict[str, Any] | None = None,
    on_execute: dict[str, Callable[[], None]] | None = None,
):
    """Create a mock async Supabase client.

    table_data: table name -> rows (or an Exception raised on execute).
    rpc_data:   RPC name -> returned data (or an Exception raised on execute).
    on_execute: table/RPC name -> callback run on execute.

    Every chain handed out is recorded in `client.chains[name]` so tests can
    inspect the filters applied to it.
    """
    client = MagicMock()
    client.chains = {}
    td = table_data or {}
    rd = rpc_data or {}
    hooks = on_execute or {}

    def _chain(name, value):
        if isinstance(value, Exception):
            chain = make_chain(error=value, on_execute=hooks.get(name))
        else:
            chain = make_chain(value, on_execute=hooks.get(name))
        client.chains.setdefault(name, []).append(chain)
        return chain

    def _table(name):
        return _chain(name, td.get(name, []))

    def _rpc(name, params=None):
        return _chain(name, rd.get(name))

    client.table.side_effect = _table
    client.rpc.side_effect = _rpc
    return client


def make_listing_row(**overrides):
    row = {
        "id": "apt-1",
        "title": "Sunny flat",
        "address": "Hauptstraße 1",
        "rent_amount": 750,
        "rooms": 2,
        "size_sqm": 54.5,
        "furnished": True,
        "city": "Berlin",
        "created_at": "2024-05-01T10:00:00+00:00",
        "apartment_images": [
            {"image_url": "https://cdn.example.com/a.jpg", "is_primary": False},
            {"image_url": "https://cdn.example.com/b.jpg", "is_primary": True},
        ],
        "apartment_analytics": [{"total_views": 120, "total_likes": 8}],
    }
    row.update(overrides)
    return row


@pytest.fixture(scope="session", autouse=True)
def _configure_logging():
    from sichr_api.utils.logging import configure_logging
    configure_logging(log_level="WARNING", log_format="console")


@pytest.fixture()
def clock():
    return FakeClock()


@pytest.fixture()
def cache(clock):
    from sichr_api.cache.store import CacheStore
    return CacheStore(ttl=300, clock=clock)


@pytest.fixture()
def tracker():
    from sichr_api.cache.stats import HitRateTracker
    return HitRateTracker()


@pytest.fixture()
def supabase():
    return make_supabase()


@pytest.fixture()
def app(cache, tracker, supabase):
    """FastAPI app sharing the test cache/tracker, with Supabase mocked."""
    from sichr_api.app import create_app
    from sichr_api.dependencies import get_supabase

    application = create_app(cache=cache, tracker=tracker, sweep_interval=0)
    application.dependency_overrides[get_supabase] = lambda: supabase
    return application


@pytest.fixture()
def use_supabase(app):
    """Swap the Supabase mock used by the app for the rest of the test."""
    from sichr_api.dependencies import get_supabase

    def _use(mock):
        app.dependency_overrides[get_supabase] = lambda: mock
        return mock

    return _use


@pytest.fixture()
def client(app):
    """HTTP test client."""
    return TestClient(app)
