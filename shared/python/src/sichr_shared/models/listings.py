"""
models/listings.py — Pydantic models for listing search and image variants.

Wire format is camelCase (the marketplace frontend's convention); Python
attributes stay snake_case. Every model accepts either form on input.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from sichr_shared.constants import DEFAULT_RADIUS_KM


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class GeoPoint(CamelModel):
    model_config = ConfigDict(frozen=True)

    lat: float = Field(ge=-90, le=90)
    lng: float = Field(ge=-180, le=180)


class SearchFilters(CamelModel):
    """Immutable per-request search parameters.

    Used only to derive a cache key and a query plan.
    """

    model_config = ConfigDict(frozen=True)

    text: str | None = None
    min_price: float | None = None
    max_price: float | None = None
    rooms: int | None = None
    furnished: bool | None = None
    city: str | None = None
    location: GeoPoint | None = None
    radius_km: float = Field(default=DEFAULT_RADIUS_KM, gt=0)


class OptimizedListing(CamelModel):
    """Slim projection of an `apartments` row with its images and analytics."""

    id: Any
    title: str | None = None
    address: str | None = None
    rent: float | None = None
    rooms: int | None = None
    size: float | None = None
    furnished: bool | None = None
    city: str | None = None
    created_at: str | None = None
    primary_image_url: str | None = None
    total_views: int = 0
    total_likes: int = 0

    @classmethod
    def from_db_row(cls, row: dict[str, Any]) -> "OptimizedListing":
        images = row.get("apartment_images") or []
        primary = next((img for img in images if img.get("is_primary")), None)
        if primary is None and images:
            primary = images[0]

        # PostgREST embeds one-to-one joins as an object, one-to-many as a list
        analytics = row.get("apartment_analytics") or {}
        if isinstance(analytics, list):
            analytics = analytics[0] if analytics else {}

        return cls(
            id=row["id"],
            title=row.get("title"),
            address=row.get("address"),
            rent=row.get("rent_amount"),
            rooms=row.get("rooms"),
            size=row.get("size_sqm"),
            furnished=row.get("furnished"),
            city=row.get("city"),
            created_at=row.get("created_at"),
            primary_image_url=primary.get("image_url") if primary else None,
            total_views=analytics.get("total_views") or 0,
            total_likes=analytics.get("total_likes") or 0,
        )

    def to_cache_dict(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json")


class ImageVariants(CamelModel):
    thumbnail: list[str] = Field(default_factory=list)
    medium: list[str] = Field(default_factory=list)
    large: list[str] = Field(default_factory=list)
    original: list[str] = Field(default_factory=list)
