# src/matte_core/__init__.py
"""
matte_core: headless alpha-extraction engine (chroma key / difference matting).

The engines are pure functions over in-memory RGBA buffers; file and batch
helpers wrap them for the CLI.
"""

from .errors import (
    MatteError,
    MatteIOError,
    MissingInput,
    DimensionMismatch,
    InvalidColor,
    InvalidTolerance,
    InvalidRaster,
)
from .raster import Color, RasterImage
from .color import WHITE, BLACK, parse_color, estimate_background_color, resolve_background
from .io import decode, decode_bytes, encode, from_pil, to_pil
from .naming import PairingRule, build_pairs, list_images
from .ops_chromakey import (
    ChromaKeyOptions,
    ToleranceBand,
    chroma_key,
    chroma_key_file,
    chroma_key_files,
)
from .ops_difference import (
    BG_DIST,
    difference_matte,
    difference_matte_file,
    difference_matte_files,
)
from .pipeline import (
    ImageGenerationService,
    TransparencyResult,
    LocalTransparencyResult,
    extract_transparency_from_image,
    generate_with_transparency,
)

__all__ = [
    # errors
    "MatteError",
    "MatteIOError",
    "MissingInput",
    "DimensionMismatch",
    "InvalidColor",
    "InvalidTolerance",
    "InvalidRaster",
    # data model
    "Color",
    "RasterImage",
    # color
    "WHITE",
    "BLACK",
    "parse_color",
    "estimate_background_color",
    "resolve_background",
    # codec
    "decode",
    "decode_bytes",
    "encode",
    "from_pil",
    "to_pil",
    # naming
    "PairingRule",
    "build_pairs",
    "list_images",
    # chroma key
    "ChromaKeyOptions",
    "ToleranceBand",
    "chroma_key",
    "chroma_key_file",
    "chroma_key_files",
    # difference matting
    "BG_DIST",
    "difference_matte",
    "difference_matte_file",
    "difference_matte_files",
    # pipeline
    "ImageGenerationService",
    "TransparencyResult",
    "LocalTransparencyResult",
    "extract_transparency_from_image",
    "generate_with_transparency",
]

__version__ = "0.1.0"
