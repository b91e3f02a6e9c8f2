"""Standardized `{success, ...}` response envelopes."""

from __future__ import annotations

from typing import Any

from starlette.responses import JSONResponse


def success_response(**fields: Any) -> dict[str, Any]:
    """Build a successful response body: `{"success": true, **fields}`."""
    return {"success": True, **fields}


def error_response(message: str) -> dict[str, Any]:
    """Build the uniform error body: `{"success": false, "error": message}`."""
    return {"success": False, "error": message}


def error_json(message: str, status_code: int = 500) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=error_response(message))
