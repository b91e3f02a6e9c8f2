"""Supabase filter builders for listing queries."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime, timedelta, timezone
from typing import Any


def apply_range_filter(
    query: Any,
    column: str,
    minimum: float | None,
    maximum: float | None,
) -> Any:
    """Apply an inclusive numeric range to a Supabase query builder."""
    if minimum is not None:
        query = query.gte(column, minimum)
    if maximum is not None:
        query = query.lte(column, maximum)
    return query


def apply_equality_filters(query: Any, filters: dict[str, Any]) -> Any:
    """Apply `eq` for every filter whose value is not None."""
    for column, value in filters.items():
        if value is not None:
            query = query.eq(column, value)
    return query


def sanitize_or_term(term: str) -> str:
    """Drop characters that delimit conditions inside a PostgREST `or` filter."""
    for char in ",()":
        term = term.replace(char, " ")
    return " ".join(term.split())


def apply_text_search(
    query: Any,
    columns: Iterable[str],
    search_term: str | None,
) -> Any:
    """Case-insensitive substring match across several columns (OR-ed)."""
    if not search_term:
        return query
    term = sanitize_or_term(search_term)
    if not term:
        return query
    clauses = ",".join(f"{column}.ilike.%{term}%" for column in columns)
    return query.or_(clauses)


def apply_since_filter(
    query: Any,
    column: str,
    hours: int,
    now: datetime | None = None,
) -> Any:
    """Restrict to rows whose timestamp column falls within the last `hours`."""
    now = now or datetime.now(timezone.utc)
    return query.gte(column, (now - timedelta(hours=hours)).isoformat())
