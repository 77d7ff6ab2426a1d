# local chroma key: alpha from distance to a background colour

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

import numpy as np

from .color import check_color_spec, resolve_background
from .errors import InvalidTolerance
from .io import decode, encode, expand_inputs, infer_output_path
from .raster import Color, ColorSpec, RasterImage, round_half_up

logger = logging.getLogger(__name__)

ProgressCb = Callable[[int, int, Path, str], None]

DEFAULT_TOLERANCE = 30


@dataclass(frozen=True)
class ToleranceBand:
    inner: int

    @property
    def outer(self) -> int:
        return 2 * self.inner

    @property
    def inner_sq(self) -> int:
        return self.inner * self.inner

    @property
    def outer_sq(self) -> int:
        return self.outer * self.outer


@dataclass(frozen=True)
class ChromaKeyOptions:
    bg_color: Optional[ColorSpec] = "auto"  # white | black | auto | #RRGGBB | Color
    tolerance: int = DEFAULT_TOLERANCE  # 0..255


def validate_tolerance(tolerance: int) -> ToleranceBand:
    if isinstance(tolerance, bool) or not isinstance(tolerance, (int, np.integer)):
        raise InvalidTolerance(f"tolerance must be an integer, got {tolerance!r}")
    if not (0 <= tolerance <= 255):
        raise InvalidTolerance("tolerance must be between 0 and 255")
    return ToleranceBand(int(tolerance))


def chroma_alpha(rgb: np.ndarray, bg: Color, band: ToleranceBand) -> np.ndarray:
    """Alpha in [0, 1] for an ``H x W x 3`` array."""
    diff = rgb.astype(np.int32) - np.array(bg, dtype=np.int32).reshape((1, 1, 3))
    dist_sq = (diff * diff).sum(axis=2)

    alpha = np.ones(dist_sq.shape, dtype=np.float64)
    alpha[dist_sq <= band.inner_sq] = 0.0
    # empty when inner == 0, so no division by zero
    ramp = (dist_sq > band.inner_sq) & (dist_sq <= band.outer_sq)
    if ramp.any():
        dist = np.sqrt(dist_sq[ramp].astype(np.float64))
        alpha[ramp] = (dist - band.inner) / band.inner
    return alpha


def chroma_key(
    img: RasterImage,
    bg_color: Optional[ColorSpec] = "auto",
    tolerance: int = DEFAULT_TOLERANCE,
) -> RasterImage:
    """
    Make pixels close to ``bg_color`` transparent.

    Pixels within ``tolerance`` of the background get alpha 0, pixels beyond
    twice the tolerance get alpha 255, and the band between ramps linearly.
    RGB is copied unchanged, so background colour can bleed into soft edges.
    """
    band = validate_tolerance(tolerance)
    bg = resolve_background(img, bg_color)
    logger.debug(
        "Chroma key %dx%d against %s (tolerance=%d)", img.width, img.height, bg, band.inner
    )

    out = np.array(img.to_array(), dtype=np.uint8)
    alpha = chroma_alpha(out[:, :, :3], bg, band)
    out[:, :, 3] = round_half_up(alpha * 255.0).astype(np.uint8)
    return RasterImage.from_array(out)


def chroma_key_file(
    in_path: Path,
    out_path: Path,
    opts: ChromaKeyOptions = ChromaKeyOptions(),
    *,
    overwrite: bool = True,
) -> Path:
    img = decode(in_path)
    out = chroma_key(img, opts.bg_color, opts.tolerance)
    return encode(out, out_path, overwrite=overwrite)


def chroma_key_files(
    in_paths: list[Path],
    out_dir: Path,
    opts: ChromaKeyOptions = ChromaKeyOptions(),
    *,
    out_suffix: str = "_transparent",
    overwrite: bool = False,
    continue_on_error: bool = True,
    progress_cb: Optional[ProgressCb] = None,
    cancel_flag=None,  # threading.Event-like; must have is_set()
) -> list[Path]:
    # fail fast on bad options rather than once per file
    validate_tolerance(opts.tolerance)
    check_color_spec(opts.bg_color)

    files = expand_inputs(in_paths)
    total = len(files)
    outputs: list[Path] = []

    for i, p in enumerate(files, start=1):
        if cancel_flag is not None and getattr(cancel_flag, "is_set", lambda: False)():
            logger.info("Chroma key batch canceled after %d/%d files", i - 1, total)
            break

        if progress_cb:
            progress_cb(i - 1, total, p, "Keying background")

        out_path = infer_output_path(p, out_dir, suffix=out_suffix, ext=".png")

        try:
            outputs.append(chroma_key_file(p, out_path, opts, overwrite=overwrite))
        except Exception as e:
            if not continue_on_error:
                raise
            logger.warning("Skipping %s: %s", p, e)
            continue

        if progress_cb:
            progress_cb(i, total, p, "Done")

    return outputs
