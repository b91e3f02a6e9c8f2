"""Request logging middleware; also the last line of the error envelope."""

from __future__ import annotations

import time

import structlog
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from sichr_api.errors import error_message
from sichr_api.responses import error_json

logger = structlog.get_logger(__name__)


class LoggingMiddleware(BaseHTTPMiddleware):
    """Logs each action call with its latency and stamps `X-Response-Time-Ms`.

    Exceptions that escape the routers' handlers are rendered here as
    `500 {success: false, error}`. This middleware sits inside CORS, so those
    responses still carry the CORS headers.
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        start = time.monotonic()
        log = logger.bind(
            method=request.method,
            path=request.url.path,
            action=request.url.path.rstrip("/").rsplit("/", 1)[-1],
            client_ip=request.client.host if request.client else None,
        )

        try:
            response = await call_next(request)
        except Exception as exc:
            message = error_message(exc)
            log.error(
                "action_failed",
                error_kind=type(exc).__name__,
                error=message,
                exc_info=True,
            )
            response = error_json(message)

        elapsed_ms = round((time.monotonic() - start) * 1000, 2)
        log.info("request_completed", status=response.status_code, duration_ms=elapsed_ms)
        response.headers["X-Response-Time-Ms"] = str(elapsed_ms)
        return response
