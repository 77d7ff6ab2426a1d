# load/save helpers

from __future__ import annotations

import logging
from io import BytesIO
from pathlib import Path
from typing import Iterable

import numpy as np
from PIL import Image

from .errors import MatteIOError, MissingInput
from .raster import RasterImage

logger = logging.getLogger(__name__)

SUPPORTED_IMAGE_EXTS = {".png", ".tga", ".tif", ".tiff", ".bmp", ".webp", ".jpg", ".jpeg"}


def safe_mkdir(path: Path) -> None:
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise MatteIOError(f"Failed to create directory: {path} ({e})") from e


def is_image_file(path: Path) -> bool:
    return path.is_file() and path.suffix.lower() in SUPPORTED_IMAGE_EXTS


def load_image(path: Path) -> Image.Image:
    path = Path(path)
    if not path.exists():
        raise MissingInput(f"Input file not found: {path}")
    try:
        img = Image.open(path)
        img.load()
        return img
    except Exception as e:
        raise MatteIOError(f"Failed to load image: {path} ({e})") from e


def ensure_rgba(img: Image.Image) -> Image.Image:
    if img.mode == "RGBA":
        return img
    # P, L, LA, RGB, CMYK, I;16 ... all go through Pillow's converter;
    # images without alpha come out fully opaque.
    return img.convert("RGBA")


def from_pil(img: Image.Image) -> RasterImage:
    rgba = ensure_rgba(img)
    return RasterImage(width=rgba.width, height=rgba.height, pixels=rgba.tobytes())


def to_pil(raster: RasterImage) -> Image.Image:
    return Image.fromarray(np.array(raster.to_array()))


def decode(path: Path) -> RasterImage:
    return from_pil(load_image(path))


def decode_bytes(data: bytes) -> RasterImage:
    try:
        img = Image.open(BytesIO(data))
        img.load()
    except Exception as e:
        raise MatteIOError(f"Failed to decode image bytes ({e})") from e
    return from_pil(img)


def save_png(img: Image.Image, path: Path, *, overwrite: bool = False) -> None:
    path = Path(path)
    if path.exists() and not overwrite:
        raise MatteIOError(f"Refusing to overwrite existing file: {path}")
    safe_mkdir(path.parent)
    try:
        img.save(path, format="PNG")
    except Exception as e:
        raise MatteIOError(f"Failed to save PNG: {path} ({e})") from e
    logger.info("Wrote %s", path)


def encode(raster: RasterImage, path: Path, *, overwrite: bool = True) -> Path:
    """Write ``raster`` as an RGBA PNG. Only PNG is ever emitted."""
    path = Path(path)
    save_png(to_pil(raster), path, overwrite=overwrite)
    return path


def write_bytes(data: bytes, path: Path) -> Path:
    path = Path(path)
    safe_mkdir(path.parent)
    try:
        path.write_bytes(data)
    except OSError as e:
        raise MatteIOError(f"Failed to write file: {path} ({e})") from e
    logger.info("Wrote %s", path)
    return path


def infer_output_path(
    in_path: Path,
    out_dir: Path,
    *,
    suffix: str = "",
    ext: str = ".png",
) -> Path:
    stem = in_path.stem
    return out_dir / f"{stem}{suffix}{ext}"


def expand_inputs(paths: Iterable[Path]) -> list[Path]:
    """Expand directories into contained images; return sorted unique list."""
    out: list[Path] = []
    for p in paths:
        p = Path(p)
        if p.is_dir():
            for child in sorted(p.rglob("*")):
                if is_image_file(child):
                    out.append(child)
        elif is_image_file(p):
            out.append(p)
    # unique (stable)
    seen = set()
    uniq: list[Path] = []
    for p in out:
        key = str(p.resolve())
        if key not in seen:
            seen.add(key)
            uniq.append(p)
    return uniq
