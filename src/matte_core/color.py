# background colour parsing and estimation

from __future__ import annotations

import logging
import re

import numpy as np

from .errors import InvalidColor, InvalidRaster
from .raster import Color, ColorSpec, RasterImage, round_half_up

logger = logging.getLogger(__name__)

WHITE = Color(255, 255, 255)
BLACK = Color(0, 0, 0)

_NAMED = {"white": WHITE, "black": BLACK}
_HEX_RE = re.compile(r"^[0-9a-fA-F]{6}$")


def parse_color(spec: str) -> Color:
    """Parse ``white``, ``black``, ``#RRGGBB`` or ``RRGGBB``."""
    if not isinstance(spec, str):
        raise InvalidColor(f"Invalid color: {spec!r}")
    named = _NAMED.get(spec.strip().lower())
    if named is not None:
        return named
    hex_part = spec.strip()
    if hex_part.startswith("#"):
        hex_part = hex_part[1:]
    if not _HEX_RE.match(hex_part):
        raise InvalidColor(f"Invalid hex color: {spec}. Use format #RRGGBB or RRGGBB")
    return Color(int(hex_part[0:2], 16), int(hex_part[2:4], 16), int(hex_part[4:6], 16))


def estimate_background_color(img: RasterImage) -> Color:
    """Average the four corner pixels, rounding each channel half-up."""
    if img.width == 0 or img.height == 0:
        raise InvalidRaster("Cannot estimate the background of an empty image")
    arr = img.to_array()
    corners = arr[[0, 0, -1, -1], [0, -1, 0, -1], :3].astype(np.int32)
    avg = round_half_up(corners.sum(axis=0) / 4.0).astype(int)
    color = Color(int(avg[0]), int(avg[1]), int(avg[2]))
    logger.debug("Estimated background %s from corners of %dx%d image", color, img.width, img.height)
    return color


def check_color_spec(spec: ColorSpec | None) -> Color | None:
    """Validate a background spec without an image; ``None`` means auto."""
    if spec is None or (isinstance(spec, str) and spec.strip().lower() == "auto"):
        return None
    if isinstance(spec, str):
        return parse_color(spec)
    try:
        r, g, b = (int(c) for c in spec)
    except (TypeError, ValueError) as e:
        raise InvalidColor(f"Invalid color: {spec!r}") from e
    if not all(0 <= c <= 255 for c in (r, g, b)):
        raise InvalidColor(f"Color channels must be between 0 and 255: {spec!r}")
    return Color(r, g, b)


def resolve_background(img: RasterImage, spec: ColorSpec | None) -> Color:
    color = check_color_spec(spec)
    if color is None:
        return estimate_background_color(img)
    return color


def format_color(color: Color) -> str:
    return "#{:02x}{:02x}{:02x}".format(*color)
