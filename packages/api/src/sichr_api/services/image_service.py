"""Image variant URLs and preload hints for listing galleries.

Variant URLs only rewrite the query string that the image CDN interprets
(`resize`, `quality`, `format`), so nothing here touches storage.
"""

from __future__ import annotations

import json
from collections.abc import Iterable, Sequence
from typing import Any
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

import structlog

from sichr_shared.constants import (
    APARTMENT_IMAGES_TABLE,
    IMAGE_FORMAT,
    IMAGE_QUALITY,
    IMAGE_VARIANTS,
    PRELOAD_THUMBNAILS_PER_APARTMENT,
    ImageSize,
)
from sichr_shared.models.listings import ImageVariants

from sichr_api.errors import ImageUrlError

logger = structlog.get_logger(__name__)


def build_variant(original_url: str, size: ImageSize) -> str:
    """Return `original_url` with resize/quality/format forced for `size`.

    Existing values for those parameters are replaced in place; every other
    query parameter is kept in order.
    """
    if size not in IMAGE_VARIANTS:
        raise ValueError(f"Unknown image size: {size!r}")
    parts = urlsplit(original_url)
    if not parts.scheme or not parts.netloc:
        raise ImageUrlError(original_url)

    overrides = {
        "resize": IMAGE_VARIANTS[size],
        "quality": IMAGE_QUALITY,
        "format": IMAGE_FORMAT,
    }
    params: list[tuple[str, str]] = []
    placed: set[str] = set()
    for name, value in parse_qsl(parts.query, keep_blank_values=True):
        if name in overrides:
            if name in placed:
                continue
            value = overrides[name]
            placed.add(name)
        params.append((name, value))
    params.extend((name, value) for name, value in overrides.items() if name not in placed)

    return urlunsplit(parts._replace(query=urlencode(params)))


def group_image_variants(rows: Iterable[dict[str, Any]]) -> dict[str, ImageVariants]:
    """Group `apartment_images` rows by apartment, primary images first."""
    grouped: dict[str, list[str]] = {}
    # sorted() is stable, so non-primary images keep their original order
    for row in sorted(rows, key=lambda r: not r.get("is_primary")):
        grouped.setdefault(str(row["apartment_id"]), []).append(row["image_url"])

    return {
        apartment_id: ImageVariants(
            thumbnail=[build_variant(url, "thumbnail") for url in urls],
            medium=[build_variant(url, "medium") for url in urls],
            large=[build_variant(url, "large") for url in urls],
            original=list(urls),
        )
        for apartment_id, urls in grouped.items()
    }


def build_preload_script(images: dict[str, ImageVariants]) -> str:
    """Browser snippet adding `<link rel=preload>` for the first thumbnails."""
    urls = [
        url
        for variants in images.values()
        for url in variants.thumbnail[:PRELOAD_THUMBNAILS_PER_APARTMENT]
    ]
    return (
        "\n"
        "    // Preload critical images\n"
        f"    const preloadImages = {json.dumps(urls)};\n"
        "    preloadImages.forEach(url => {\n"
        "      const link = document.createElement('link');\n"
        "      link.rel = 'preload';\n"
        "      link.as = 'image';\n"
        "      link.href = url;\n"
        "      document.head.appendChild(link);\n"
        "    });\n"
        "  "
    )


class ImagePreloader:
    """Loads image rows for a set of apartments and derives their variants."""

    def __init__(self, supabase: Any) -> None:
        self._supabase = supabase

    async def preload(self, apartment_ids: Sequence[str]) -> dict[str, ImageVariants]:
        if not apartment_ids:
            return {}
        response = await (
            self._supabase.table(APARTMENT_IMAGES_TABLE)
            .select("image_url, apartment_id, is_primary")
            .in_("apartment_id", list(apartment_ids))
            .order("is_primary", desc=True)
            .execute()
        )
        images = group_image_variants(response.data or [])
        logger.info(
            "images_preloaded",
            requested=len(apartment_ids),
            apartments_with_images=len(images),
        )
        return images
