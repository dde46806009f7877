"""Exception types raised by the image utilities."""

from __future__ import annotations


class ImageUtilError(Exception):
    """Base class for all errors raised by this package."""


class UnsupportedPixelTypeError(ImageUtilError, TypeError):
    """An operation was given a pixel type it does not implement."""

    def __init__(self, operation: str, type_name: str) -> None:
        self.operation = operation
        self.type_name = type_name
        super().__init__(f"{operation}: unsupported image type {type_name}")


class InvalidSpecError(ImageUtilError, ValueError):
    """A collage spec cannot produce a valid layout."""


class InternalConsistencyError(ImageUtilError, RuntimeError):
    """The vision library returned a result that should be impossible."""
