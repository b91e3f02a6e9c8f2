"""FastAPI application factory."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from postgrest.exceptions import APIError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.responses import JSONResponse

from sichr_shared.config import settings

from sichr_api import __version__
from sichr_api.cache.stats import HitRateTracker
from sichr_api.cache.store import CacheStore
from sichr_api.cache.sweeper import CacheSweeper
from sichr_api.errors import SichrError, error_message
from sichr_api.middleware.logging import LoggingMiddleware
from sichr_api.responses import error_json
from sichr_api.routers.health import router as health_router
from sichr_api.routers.performance import router as performance_router
from sichr_api.utils.logging import configure_logging

logger = structlog.get_logger(__name__)


def _log_failure(request: Request, error: str, kind: str) -> None:
    logger.error(
        "action_failed",
        method=request.method,
        path=request.url.path,
        error_kind=kind,
        error=error,
    )


async def _sichr_error_handler(request: Request, exc: SichrError) -> JSONResponse:
    _log_failure(request, str(exc), type(exc).__name__)
    return error_json(str(exc))


async def _store_error_handler(request: Request, exc: APIError) -> JSONResponse:
    message = error_message(exc)
    _log_failure(request, message, "APIError")
    return error_json(message)


async def _validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    details = "; ".join(
        f"{'.'.join(str(p) for p in err.get('loc', ()))}: {err.get('msg')}"
        for err in exc.errors()
    )
    message = f"Invalid request: {details}"
    _log_failure(request, message, "RequestValidationError")
    return error_json(message)


async def _http_error_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    message = str(exc.detail)
    _log_failure(request, message, f"HTTP {exc.status_code}")
    return error_json(message, exc.status_code)


async def _unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    message = error_message(exc)
    _log_failure(request, message, type(exc).__name__)
    return error_json(message)


def create_app(
    *,
    cache: CacheStore | None = None,
    tracker: HitRateTracker | None = None,
    sweep_interval: float | None = None,
) -> FastAPI:
    configure_logging()

    cache = cache if cache is not None else CacheStore(ttl=settings.cache_ttl_seconds)
    tracker = tracker if tracker is not None else HitRateTracker()
    sweeper = CacheSweeper(
        cache,
        settings.cache_sweep_interval_seconds if sweep_interval is None else sweep_interval,
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        sweeper.start()
        try:
            yield
        finally:
            await sweeper.stop()

    app = FastAPI(
        title="SichrPlace Performance API",
        description="Caching, search optimization and performance monitoring",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    app.state.cache_store = cache
    app.state.hit_tracker = tracker
    app.state.cache_sweeper = sweeper

    # Last added runs first: CORS must wrap LoggingMiddleware and its 500s
    app.add_middleware(LoggingMiddleware)

    origins = settings.cors_origins_list
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials="*" not in origins,
        allow_methods=["*"],
        allow_headers=["authorization", "x-client-info", "apikey", "content-type"],
    )

    app.add_exception_handler(SichrError, _sichr_error_handler)
    app.add_exception_handler(APIError, _store_error_handler)
    app.add_exception_handler(RequestValidationError, _validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, _http_error_handler)
    # Only reached for failures outside LoggingMiddleware
    app.add_exception_handler(Exception, _unhandled_error_handler)

    # Routers
    app.include_router(health_router)
    app.include_router(performance_router)

    logger.info(
        "app_created",
        cors_origins=origins,
        cache_ttl_s=cache.ttl,
        sweep_interval_s=sweeper.interval,
    )
    return app


app = create_app()
