# error taxonomy

from __future__ import annotations


class MatteError(RuntimeError):
    pass


class MatteIOError(MatteError):
    pass


class MissingInput(MatteError, FileNotFoundError):
    pass


class DimensionMismatch(MatteError):
    pass


class InvalidColor(MatteError, ValueError):
    pass


class InvalidTolerance(MatteError, ValueError):
    pass


class InvalidRaster(MatteError, ValueError):
    pass
