"""Performance-optimization actions, selected by the trailing path segment."""

from __future__ import annotations

from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import PlainTextResponse
from pydantic import Field

from sichr_shared.config import settings
from sichr_shared.models.listings import CamelModel, GeoPoint, SearchFilters

from sichr_api.cache.store import CacheStore
from sichr_api.dependencies import (
    get_cache_store,
    get_database_optimizer,
    get_image_preloader,
    get_performance_reporter,
    get_popular_cacher,
    get_search_optimizer,
)
from sichr_api.errors import UnknownActionError, UnsupportedMethodError
from sichr_api.responses import success_response
from sichr_api.services.image_service import ImagePreloader, build_preload_script
from sichr_api.services.maintenance_service import DatabaseOptimizer
from sichr_api.services.performance_service import PerformanceReporter
from sichr_api.services.popular_service import PopularDataCacher
from sichr_api.services.search_service import SearchOptimizer

router = APIRouter(prefix="/performance", tags=["performance"])

ACTIONS = (
    "optimize-search",
    "cache-popular",
    "preload-images",
    "optimize-db",
    "performance-report",
    "clear-cache",
)
ALL_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE"]


class ListingFilterParams(CamelModel):
    min_price: float | None = None
    max_price: float | None = None
    rooms: int | None = None
    furnished: bool | None = None
    city: str | None = None


class OptimizeSearchRequest(CamelModel):
    query: str | None = None
    filters: ListingFilterParams | None = None
    location: GeoPoint | None = None
    radius: float | None = Field(default=None, gt=0)

    def to_filters(self) -> SearchFilters:
        params = self.filters or ListingFilterParams()
        return SearchFilters(
            text=self.query or None,
            location=self.location,
            radius_km=self.radius if self.radius is not None else settings.default_radius_km,
            **params.model_dump(),
        )


class PreloadImagesRequest(CamelModel):
    apartment_ids: list[str | int] = Field(default_factory=list)


@router.post("/optimize-search")
async def optimize_search(
    body: OptimizeSearchRequest,
    optimizer: SearchOptimizer = Depends(get_search_optimizer),
):
    """Cached listing search; `cached` tells whether the store was queried."""
    result = await optimizer.search(body.to_filters())
    return success_response(
        results=result.results,
        cached=result.cached,
        responseTime=result.latency_ms,
        resultCount=result.result_count,
    )


@router.post("/cache-popular")
async def cache_popular(cacher: PopularDataCacher = Depends(get_popular_cacher)):
    summary = await cacher.warm()
    return success_response(cached=summary.model_dump(by_alias=True))


@router.post("/preload-images")
async def preload_images(
    body: PreloadImagesRequest,
    preloader: ImagePreloader = Depends(get_image_preloader),
):
    images = await preloader.preload([str(i) for i in body.apartment_ids])
    return success_response(
        images={k: v.model_dump(by_alias=True) for k, v in images.items()},
        preloadScript=build_preload_script(images),
    )


@router.post("/optimize-db")
async def optimize_db(optimizer: DatabaseOptimizer = Depends(get_database_optimizer)):
    results = await optimizer.run_maintenance()
    return success_response(
        optimizations=[r.model_dump(by_alias=True) for r in results],
        timestamp=datetime.now(timezone.utc).isoformat(),
    )


@router.get("/performance-report")
async def performance_report(
    reporter: PerformanceReporter = Depends(get_performance_reporter),
):
    report = await reporter.report()
    return success_response(**report.model_dump(by_alias=True, mode="json"))


@router.api_route("/clear-cache", methods=ALL_METHODS)
async def clear_cache(
    pattern: str | None = Query(None),
    cache: CacheStore = Depends(get_cache_store),
):
    cleared = cache.clear(pattern or None)
    return success_response(cleared=cleared, pattern=pattern or "all")


@router.api_route("/{path:path}", methods=[*ALL_METHODS, "OPTIONS"], include_in_schema=False)
async def unmatched_action(path: str, request: Request):
    """Everything under the prefix that no action route accepted.

    Plain OPTIONS (not a CORS preflight) is acknowledged. Actions live one
    segment below the prefix; nested paths are reported as unknown.
    """
    if request.method == "OPTIONS":
        return PlainTextResponse("ok")
    if path in ACTIONS:
        raise UnsupportedMethodError(path, request.method)
    raise UnknownActionError(path)
