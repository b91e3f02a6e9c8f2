"""Tests for image variant URLs and preloading."""

from __future__ import annotations

import json

import pytest

from sichr_api.errors import ImageUrlError
from sichr_api.services.image_service import (
    ImagePreloader,
    build_preload_script,
    build_variant,
    group_image_variants,
)
from tests.conftest import make_supabase


def test_thumbnail_variant():
    assert (
        build_variant("https://cdn.example.com/apt/1.jpg", "thumbnail")
        == "https://cdn.example.com/apt/1.jpg?resize=150x150&quality=85&format=webp"
    )


def test_variant_is_deterministic():
    url = "https://cdn.example.com/apt/1.jpg?token=abc"
    assert build_variant(url, "medium") == build_variant(url, "medium")


@pytest.mark.parametrize(
    ("size", "dimensions"),
    [("thumbnail", "150x150"), ("medium", "400x300"), ("large", "800x600")],
)
def test_sizes_map_to_fixed_dimensions(size, dimensions):
    assert f"resize={dimensions}&quality=85&format=webp" in build_variant(
        "https://cdn.example.com/x.png", size
    )


def test_existing_query_parameters_are_merged():
    url = "https://cdn.example.com/x.jpg?token=abc&resize=10x10&quality=20"
    assert (
        build_variant(url, "large")
        == "https://cdn.example.com/x.jpg?token=abc&resize=800x600&quality=85&format=webp"
    )


def test_repeated_parameters_collapse_to_one():
    url = "https://cdn.example.com/x.jpg?format=png&format=gif"
    assert build_variant(url, "thumbnail").count("format=") == 1


def test_relative_url_is_rejected():
    with pytest.raises(ImageUrlError):
        build_variant("/images/1.jpg", "thumbnail")


def test_unknown_size_is_rejected():
    with pytest.raises(ValueError):
        build_variant("https://cdn.example.com/x.jpg", "huge")


def test_grouping_puts_primary_images_first():
    rows = [
        {"apartment_id": "a", "image_url": "https://cdn.example.com/a1.jpg", "is_primary": False},
        {"apartment_id": "b", "image_url": "https://cdn.example.com/b1.jpg", "is_primary": False},
        {"apartment_id": "a", "image_url": "https://cdn.example.com/a2.jpg", "is_primary": True},
        {"apartment_id": "a", "image_url": "https://cdn.example.com/a3.jpg", "is_primary": False},
    ]

    images = group_image_variants(rows)

    assert set(images) == {"a", "b"}
    assert images["a"].original == [
        "https://cdn.example.com/a2.jpg",
        "https://cdn.example.com/a1.jpg",
        "https://cdn.example.com/a3.jpg",
    ]
    assert images["a"].thumbnail[0] == build_variant("https://cdn.example.com/a2.jpg", "thumbnail")
    assert len(images["a"].medium) == len(images["a"].large) == 3
    assert images["b"].original == ["https://cdn.example.com/b1.jpg"]


def test_preload_script_lists_first_two_thumbnails_per_apartment():
    rows = [
        {"apartment_id": 1, "image_url": f"https://cdn.example.com/{i}.jpg", "is_primary": i == 0}
        for i in range(3)
    ]
    images = group_image_variants(rows)

    script = build_preload_script(images)

    expected = json.dumps(images["1"].thumbnail[:2])
    assert f"const preloadImages = {expected};" in script
    assert images["1"].thumbnail[2] not in script
    assert "link.rel = 'preload';" in script


class TestImagePreloader:
    @pytest.mark.asyncio
    async def test_loads_rows_for_requested_apartments(self):
        mock = make_supabase({
            "apartment_images": [
                {"apartment_id": "a", "image_url": "https://cdn.example.com/a.jpg", "is_primary": True},
            ]
        })

        images = await ImagePreloader(mock).preload(["a", "b"])

        chain = mock.chains["apartment_images"][0]
        chain.in_.assert_called_once_with("apartment_id", ["a", "b"])
        chain.order.assert_called_once_with("is_primary", desc=True)
        assert list(images) == ["a"]

    @pytest.mark.asyncio
    async def test_no_ids_skips_the_query(self):
        mock = make_supabase()
        assert await ImagePreloader(mock).preload([]) == {}
        mock.table.assert_not_called()
