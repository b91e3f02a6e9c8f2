"""Deterministic cache keys for request parameters."""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel


def _drop_none(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {str(k): _drop_none(v) for k, v in value.items() if v is not None}
    if isinstance(value, (list, tuple)):
        return [_drop_none(v) for v in value]
    return value


def canonical_json(params: Mapping[str, Any] | BaseModel | None) -> str:
    """Serialize params with sorted keys so insertion order never matters."""
    if params is None:
        payload: Any = {}
    elif isinstance(params, BaseModel):
        payload = params.model_dump(mode="json", exclude_none=True)
    else:
        payload = params
    return json.dumps(
        _drop_none(payload),
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
        default=str,
    )


def build_cache_key(namespace: str, params: Mapping[str, Any] | BaseModel | None = None) -> str:
    """Return `<namespace>:<canonical json>`.

    Keys stay human-readable so `CacheStore.clear(pattern)` can target e.g.
    every search mentioning a city.
    """
    return f"{namespace}:{canonical_json(params)}"
