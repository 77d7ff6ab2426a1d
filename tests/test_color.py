import numpy as np
import pytest

from matte_core import (
    BLACK,
    WHITE,
    Color,
    InvalidColor,
    InvalidRaster,
    RasterImage,
    estimate_background_color,
    parse_color,
    resolve_background,
)


@pytest.mark.parametrize(
    "spec, expected",
    [
        ("white", WHITE),
        ("black", BLACK),
        ("#00ff00", Color(0, 255, 0)),
        ("00FF00", Color(0, 255, 0)),
        ("#1a2B3c", Color(26, 43, 60)),
    ],
)
def test_parse_color(spec, expected):
    assert parse_color(spec) == expected


@pytest.mark.parametrize("spec", ["#fff", "#GG0000", "green", "", "#1234567"])
def test_parse_color_rejects_malformed(spec):
    with pytest.raises(InvalidColor):
        parse_color(spec)


def test_estimate_solid():
    img = RasterImage.filled(10, 10, (10, 20, 30, 255))
    assert estimate_background_color(img) == (10, 20, 30)


def test_estimate_corner_average():
    arr = np.zeros((2, 2, 4), dtype=np.uint8)
    arr[0, 0, :3] = 0
    arr[0, 1, :3] = 40
    arr[1, 0, :3] = 80
    arr[1, 1, :3] = 120
    assert estimate_background_color(RasterImage.from_array(arr)) == (60, 60, 60)


def test_estimate_ignores_interior_and_rounds_half_up():
    arr = np.full((5, 5, 4), 200, dtype=np.uint8)
    arr[0, 0, :3] = (1, 0, 0)
    arr[0, 4, :3] = (1, 0, 0)
    arr[4, 0, :3] = (0, 0, 0)
    arr[4, 4, :3] = (0, 0, 3)
    # r: 2/4 = 0.5 -> 1, b: 3/4 = 0.75 -> 1
    assert estimate_background_color(RasterImage.from_array(arr)) == (1, 0, 1)


def test_estimate_empty_image():
    with pytest.raises(InvalidRaster):
        estimate_background_color(RasterImage(width=0, height=0, pixels=b""))


def test_resolve_background():
    img = RasterImage.filled(3, 3, (5, 6, 7, 255))
    assert resolve_background(img, "auto") == (5, 6, 7)
    assert resolve_background(img, None) == (5, 6, 7)
    assert resolve_background(img, "#ffffff") == WHITE
    assert resolve_background(img, (1, 2, 3)) == (1, 2, 3)
    with pytest.raises(InvalidColor):
        resolve_background(img, (300, 0, 0))
