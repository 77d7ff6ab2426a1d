# end-to-end transparency extraction over files and a rendering service

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Literal, Optional, Protocol, Union

from .color import format_color, resolve_background
from .errors import MatteIOError, MissingInput
from .io import decode, decode_bytes, encode, safe_mkdir, write_bytes
from .ops_chromakey import ChromaKeyOptions, chroma_key, validate_tolerance
from .ops_difference import difference_matte

logger = logging.getLogger(__name__)

Method = Literal["local", "two-pass"]


class ImageGenerationService(Protocol):
    """
    Remote renderer supplying the white and black passes.

    Every method returns encoded image bytes (PNG/JPEG/WebP).
    """

    def render_on_white(self, prompt: str) -> bytes: ...

    def edit_to_black(self, image: bytes) -> bytes: ...

    def remove_background_to_white(self, image: bytes) -> bytes: ...

    def remove_background_to_black(self, image: bytes) -> bytes: ...


@dataclass(frozen=True)
class Intermediates:
    white: str
    black: str


@dataclass(frozen=True)
class TransparencyResult:
    path: str
    intermediates: Intermediates
    method: str
    input: Optional[str] = None
    prompt: Optional[str] = None


@dataclass(frozen=True)
class LocalTransparencyResult:
    path: str
    input: str
    bg_color: str
    tolerance: int
    resolved_color: str
    method: str = "local"


AnyResult = Union[TransparencyResult, LocalTransparencyResult]


def _timestamp() -> int:
    return int(time.time() * 1000)


def _input_stem(path: Path) -> str:
    # "shot.jpg.png" -> "shot", "shot.final.jpg" -> "shot.final"
    stem = path.stem
    if path.suffix.lower() == ".png":
        stem = Path(stem).stem
    return stem


def _two_pass(
    white_bytes: bytes,
    black_bytes: bytes,
    out_dir: Path,
    filename: str,
    ts: int,
) -> tuple[Path, Intermediates]:
    white_path = write_bytes(white_bytes, (out_dir / f"_white_{ts}.png").resolve())
    black_path = write_bytes(black_bytes, (out_dir / f"_black_{ts}.png").resolve())

    out = difference_matte(decode_bytes(white_bytes), decode_bytes(black_bytes))
    out_path = encode(out, (out_dir / filename).resolve())
    return out_path, Intermediates(white=str(white_path), black=str(black_path))


def extract_transparency_from_image(
    input_path: Path,
    out_dir: Path,
    *,
    method: Method = "local",
    service: Optional[ImageGenerationService] = None,
    opts: ChromaKeyOptions = ChromaKeyOptions(),
    filename: Optional[str] = None,
) -> AnyResult:
    """
    Remove the background of an existing image.

    ``local`` keys out a solid background colour without any service call.
    ``two-pass`` asks ``service`` for white and black background versions and
    recovers alpha by difference matting.
    """
    input_path = Path(input_path)
    out_dir = Path(out_dir)
    if not input_path.exists():
        raise MissingInput(f"Input file not found: {input_path}")

    ts = _timestamp()
    filename = filename or f"{_input_stem(input_path)}_transparent_{ts}.png"

    if method == "local":
        validate_tolerance(opts.tolerance)
        img = decode(input_path)
        bg = resolve_background(img, opts.bg_color)
        safe_mkdir(out_dir)
        out_path = encode(chroma_key(img, bg, opts.tolerance), (out_dir / filename).resolve())
        return LocalTransparencyResult(
            path=str(out_path),
            input=str(input_path.resolve()),
            bg_color=opts.bg_color if isinstance(opts.bg_color, str) else (
                "auto" if opts.bg_color is None else format_color(bg)
            ),
            tolerance=opts.tolerance,
            resolved_color=format_color(bg),
        )

    if method != "two-pass":
        raise MatteIOError(f"Unknown transparency method: {method}")
    if service is None:
        raise MatteIOError("The two-pass method needs an image generation service")

    safe_mkdir(out_dir)
    try:
        source = input_path.read_bytes()
    except OSError as e:
        raise MatteIOError(f"Failed to read input: {input_path} ({e})") from e
    logger.info("Requesting white and black background passes for %s", input_path)
    white_bytes = service.remove_background_to_white(source)
    black_bytes = service.remove_background_to_black(source)

    out_path, intermediates = _two_pass(white_bytes, black_bytes, out_dir, filename, ts)
    return TransparencyResult(
        path=str(out_path),
        intermediates=intermediates,
        method=method,
        input=str(input_path.resolve()),
    )


def generate_with_transparency(
    prompt: str,
    out_dir: Path,
    service: ImageGenerationService,
    *,
    filename: Optional[str] = None,
) -> TransparencyResult:
    """Render ``prompt`` on white, edit the result to black, then extract alpha."""
    out_dir = Path(out_dir)
    safe_mkdir(out_dir)
    ts = _timestamp()

    logger.info("Rendering white pass")
    white_bytes = service.render_on_white(prompt)
    logger.info("Editing to black pass")
    black_bytes = service.edit_to_black(white_bytes)

    filename = filename or f"transparent_{ts}.png"
    out_path, intermediates = _two_pass(white_bytes, black_bytes, out_dir, filename, ts)
    return TransparencyResult(
        path=str(out_path),
        intermediates=intermediates,
        method="two-pass",
        prompt=prompt,
    )
