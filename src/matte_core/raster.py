# in-memory RGBA buffers

from __future__ import annotations

from dataclasses import dataclass
from typing import NamedTuple, Union

import numpy as np

from .errors import InvalidRaster

CHANNELS = 4


class Color(NamedTuple):
    r: int
    g: int
    b: int


@dataclass(frozen=True)
class RasterImage:
    """
    Interleaved RGBA, 8 bits per channel, row-major, top-to-bottom, no padding.

    The buffer is copied into an immutable ``bytes`` object, so two images
    never share storage.
    """

    width: int
    height: int
    pixels: bytes

    def __post_init__(self) -> None:
        for dim in (self.width, self.height):
            if isinstance(dim, bool) or not isinstance(dim, (int, np.integer)):
                raise InvalidRaster(f"Image size must be integers, got {self.width!r}x{self.height!r}")
        object.__setattr__(self, "width", int(self.width))
        object.__setattr__(self, "height", int(self.height))
        if self.width < 0 or self.height < 0:
            raise InvalidRaster(f"Negative image size: {self.width}x{self.height}")
        data = bytes(self.pixels)
        expected = self.width * self.height * CHANNELS
        if len(data) != expected:
            raise InvalidRaster(
                f"Pixel buffer has {len(data)} bytes, expected {expected} "
                f"for {self.width}x{self.height} RGBA."
            )
        object.__setattr__(self, "pixels", data)

    @property
    def size(self) -> tuple[int, int]:
        return self.width, self.height

    @classmethod
    def from_array(cls, arr: np.ndarray) -> "RasterImage":
        """Build from an ``H x W x 4`` uint8 array."""
        if arr.ndim != 3 or arr.shape[2] != CHANNELS:
            raise InvalidRaster(f"Expected an HxWx4 array, got shape {arr.shape}")
        h, w = arr.shape[:2]
        data = np.ascontiguousarray(arr, dtype=np.uint8).tobytes()
        return cls(width=w, height=h, pixels=data)

    @classmethod
    def filled(cls, width: int, height: int, rgba: tuple[int, int, int, int]) -> "RasterImage":
        arr = np.empty((height, width, CHANNELS), dtype=np.uint8)
        arr[:, :] = rgba
        return cls.from_array(arr)

    def to_array(self) -> np.ndarray:
        # read-only view over the immutable buffer
        return np.frombuffer(self.pixels, dtype=np.uint8).reshape(
            (self.height, self.width, CHANNELS)
        )

    def pixel(self, x: int, y: int) -> tuple[int, int, int, int]:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"Pixel ({x}, {y}) outside {self.width}x{self.height} image")
        off = (y * self.width + x) * CHANNELS
        r, g, b, a = self.pixels[off : off + CHANNELS]
        return r, g, b, a

    def alpha_plane(self) -> np.ndarray:
        return self.to_array()[:, :, 3]


ColorSpec = Union[str, Color, tuple[int, int, int]]


def round_half_up(values: np.ndarray) -> np.ndarray:
    """Round .5 away from zero for non-negative input (numpy's rint rounds to even)."""
    return np.floor(values + 0.5)
