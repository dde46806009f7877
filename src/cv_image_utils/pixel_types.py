"""
Pixel type tagging for numpy image buffers.

Every operation in the package dispatches on a PixelType derived from the
array's dtype and channel count rather than on raw dtypes, so the set of
supported encodings lives in one place.
"""

from __future__ import annotations

from enum import Enum

import numpy as np

from cv_image_utils.errors import UnsupportedPixelTypeError
from cv_image_utils.logging_utils import logger

_CHANNELS_RGB = 3
_CHANNELS_RGBA = 4
_NDIM_MULTI = 3


class PixelType(Enum):
    """Supported pixel encodings, valued by their short display name."""

    UINT8 = "8U"
    UINT16 = "16U"
    INT32 = "32S"
    FLOAT32 = "32F"
    UINT8_C3 = "8UC3"
    UINT8_C4 = "ARGB"  # or BGRA
    FLOAT32_C3 = "32FC3"

    @property
    def channels(self) -> int:
        """Return the number of channels per pixel."""
        if self in (PixelType.UINT8_C3, PixelType.FLOAT32_C3):
            return _CHANNELS_RGB
        if self is PixelType.UINT8_C4:
            return _CHANNELS_RGBA
        return 1

    @property
    def is_single_channel(self) -> bool:
        return self.channels == 1


_TYPE_TABLE: dict[tuple[np.dtype, int], PixelType] = {
    (np.dtype(np.uint8), 1): PixelType.UINT8,
    (np.dtype(np.uint16), 1): PixelType.UINT16,
    (np.dtype(np.int32), 1): PixelType.INT32,
    (np.dtype(np.float32), 1): PixelType.FLOAT32,
    (np.dtype(np.uint8), 3): PixelType.UINT8_C3,
    (np.dtype(np.uint8), 4): PixelType.UINT8_C4,
    (np.dtype(np.float32), 3): PixelType.FLOAT32_C3,
}


def channel_count(img: np.ndarray) -> int:
    """Return the channel count of a 2-D or 3-D image array."""
    if img.ndim == _NDIM_MULTI:
        return int(img.shape[2])
    return 1


def _describe_raw(img: np.ndarray) -> str:
    return f"{img.dtype}x{channel_count(img)} ndim={img.ndim}"


def pixel_type(img: np.ndarray, operation: str = "pixel_type") -> PixelType:
    """
    Return the PixelType tag for an image array.

    Args:
        img: 2-D (rows, cols) or 3-D (rows, cols, channels) array.
        operation: Name reported in the error when the type is unknown.

    Raises:
        UnsupportedPixelTypeError: If dtype, channel count or dimensionality
            is not one of the supported encodings.

    """
    ptype = try_pixel_type(img)
    if ptype is None:
        raise UnsupportedPixelTypeError(operation, _describe_raw(img))
    return ptype


def as_single_channel(img: np.ndarray) -> np.ndarray:
    """Drop a trailing channel axis of size one, if present."""
    if img.ndim == _NDIM_MULTI and img.shape[2] == 1:
        return img[:, :, 0]
    return img


def try_pixel_type(img: np.ndarray) -> PixelType | None:
    """Return the PixelType tag, or None for an unsupported image."""
    if img.ndim not in (2, _NDIM_MULTI):
        return None
    return _TYPE_TABLE.get((img.dtype, channel_count(img)))


def image_type_string(img_or_type: np.ndarray | PixelType) -> str:
    """Return the short type name of an image, or "UNKNOWN"."""
    if isinstance(img_or_type, PixelType):
        return img_or_type.value
    ptype = try_pixel_type(img_or_type)
    return "UNKNOWN" if ptype is None else ptype.value


def image_desc_string(img: np.ndarray) -> str:
    """Return e.g. "16U 640x480" (type, then cols x rows)."""
    rows, cols = img.shape[:2]
    return f"{image_type_string(img)} {cols}x{rows}"


def pixel_value_string(img: np.ndarray, pt: tuple[int, int]) -> str:
    """
    Format the pixel value at point (x, y) for display.

    Returns a string so that every format, including RGB, can be shown
    the same way. An empty string is returned for an empty image or a
    point outside the image.
    """
    x, y = pt
    if img.size == 0 or not (0 <= x < img.shape[1] and 0 <= y < img.shape[0]):
        return ""

    img = as_single_channel(img)
    ptype = try_pixel_type(img)
    if ptype is None:
        return f"numpy: {img.dtype}"

    value = img[y, x]
    match ptype:
        case PixelType.UINT8 | PixelType.UINT16 | PixelType.INT32:
            return f"{int(value)}"
        case PixelType.FLOAT32:
            return f"{float(value):.1f}"
        case PixelType.UINT8_C3 | PixelType.UINT8_C4:
            return ", ".join(str(int(v)) for v in value)
        case PixelType.FLOAT32_C3:
            return ", ".join(f"{float(v):.1f}" for v in value)


def log_image_info(img: np.ndarray) -> None:
    """Log the layout details of an image buffer at DEBUG level."""
    logger.debug("rows: %d", img.shape[0])
    logger.debug("cols: %d", img.shape[1])
    logger.debug("channels: %d", channel_count(img))
    logger.debug("type: %s %s", img.dtype, image_type_string(img))
    logger.debug("elemSize: %d", img.itemsize * channel_count(img))
    logger.debug("strides: %s (bytes per axis)", img.strides)
    logger.debug("isContinuous: %s", img.flags["C_CONTIGUOUS"])
