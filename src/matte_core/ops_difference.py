# two-pass difference matting (same content over white and over black)

from __future__ import annotations

import logging
import math
from pathlib import Path
from typing import Callable, Optional

import numpy as np

from .errors import DimensionMismatch
from .io import decode, encode
from .naming import PairingRule, relative_stem
from .raster import RasterImage, round_half_up

logger = logging.getLogger(__name__)

ProgressCb = Callable[[int, int, Path, str], None]

# distance between pure white and pure black, ~441.67
BG_DIST = math.sqrt(3 * 255 * 255)
# below this alpha the un-premultiply would blow up; colour is zeroed instead
MIN_RECOVERABLE_ALPHA = 0.01


def difference_alpha(white_rgb: np.ndarray, black_rgb: np.ndarray) -> np.ndarray:
    """
    Alpha in [0, 1] from the white-pass and black-pass RGB planes.

    An opaque pixel looks the same on both backgrounds (distance 0, alpha 1);
    a fully transparent one shows the full white-to-black swing (alpha 0).
    """
    diff = white_rgb.astype(np.float64) - black_rgb.astype(np.float64)
    pixel_dist = np.sqrt((diff * diff).sum(axis=2))
    return np.clip(1.0 - pixel_dist / BG_DIST, 0.0, 1.0)


def recover_color(black_rgb: np.ndarray, alpha: np.ndarray) -> np.ndarray:
    """
    Un-premultiply against black: ``C / alpha``, capped at 255.

    Only the upper bound is clamped. Pixels with alpha at or below
    ``MIN_RECOVERABLE_ALPHA`` come back as (0, 0, 0).
    """
    out = np.zeros(black_rgb.shape, dtype=np.float64)
    keep = alpha > MIN_RECOVERABLE_ALPHA
    out[keep] = black_rgb[keep].astype(np.float64) / alpha[keep][:, None]
    return np.minimum(255.0, out)


def difference_matte(on_white: RasterImage, on_black: RasterImage) -> RasterImage:
    if on_white.size != on_black.size:
        raise DimensionMismatch(
            f"Dimension mismatch: white pass is {on_white.width}x{on_white.height}, "
            f"black pass is {on_black.width}x{on_black.height}"
        )
    logger.debug("Difference matting %dx%d", on_white.width, on_white.height)

    white_rgb = on_white.to_array()[:, :, :3]
    black_rgb = on_black.to_array()[:, :, :3]

    alpha = difference_alpha(white_rgb, black_rgb)
    color = recover_color(black_rgb, alpha)

    out = np.empty((on_white.height, on_white.width, 4), dtype=np.uint8)
    out[:, :, :3] = round_half_up(color).astype(np.uint8)
    out[:, :, 3] = round_half_up(alpha * 255.0).astype(np.uint8)
    return RasterImage.from_array(out)


def difference_matte_file(
    white_path: Path,
    black_path: Path,
    out_path: Path,
    *,
    overwrite: bool = True,
) -> Path:
    on_white = decode(white_path)
    on_black = decode(black_path)
    out = difference_matte(on_white, on_black)
    return encode(out, out_path, overwrite=overwrite)


def difference_matte_files(
    pairs: list[tuple[Path, Path]],
    out_dir: Path,
    *,
    out_suffix: str = "_transparent",
    rule: PairingRule = PairingRule(),
    overwrite: bool = False,
    continue_on_error: bool = True,
    progress_cb: Optional[ProgressCb] = None,
    cancel_flag=None,
) -> list[Path]:
    """Run difference matting over ``(white_path, black_path)`` pairs."""
    total = len(pairs)
    outputs: list[Path] = []

    for i, (white_p, black_p) in enumerate(pairs, start=1):
        if cancel_flag is not None and getattr(cancel_flag, "is_set", lambda: False)():
            logger.info("Difference matting batch canceled after %d/%d pairs", i - 1, total)
            break

        if progress_cb:
            progress_cb(i - 1, total, white_p, "Extracting alpha")

        # foo_white.png -> foo_transparent.png, white/icons/star.png -> icons/star_transparent.png
        rel = relative_stem(white_p, rule)
        out_path = Path(out_dir) / rel.parent / f"{rel.name}{out_suffix}.png"

        try:
            outputs.append(
                difference_matte_file(white_p, black_p, out_path, overwrite=overwrite)
            )
        except Exception as e:
            if not continue_on_error:
                raise
            logger.warning("Skipping pair %s / %s: %s", white_p, black_p, e)
            continue

        if progress_cb:
            progress_cb(i, total, white_p, "Done")

    return outputs
