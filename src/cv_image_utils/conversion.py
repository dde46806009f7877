"""
File-extension driven color and depth conversions.

OpenCV cannot write every pixel type to every format, and a few formats
load with channels in an unexpected order. These helpers convert an
in-memory image right after loading or right before saving; the actual
file I/O is left to the caller.
"""

from __future__ import annotations

import cv2
import numpy as np

from cv_image_utils.constants import (
    ALL_IMAGE_EXTENSIONS,
    SAVE_HIGH_PERCENTILE,
    SAVE_LOW_PERCENTILE,
    TIFF_EXTENSIONS,
)
from cv_image_utils.errors import UnsupportedPixelTypeError
from cv_image_utils.histogram import hist_percentiles
from cv_image_utils.logging_utils import logger
from cv_image_utils.pixel_types import (
    PixelType,
    as_single_channel,
    image_type_string,
    try_pixel_type,
)
from cv_image_utils.stats import img_to_8u

# Built once at import so lookups never mutate shared state
_EXTENSION_FILTER_STRINGS: dict[str, str] = {
    ext: f"{ext}|*.{ext}" for ext in ALL_IMAGE_EXTENSIONS
}

_DEEP_TYPES = (PixelType.UINT16, PixelType.INT32, PixelType.FLOAT32)


def normalize_ext(ext: str) -> str:
    """Return the extension lower-cased and without a leading period."""
    return ext.strip().lstrip(".").lower()


def get_all_extensions() -> list[str]:
    """
    Get all extensions (without the period).

    Watch out, all platforms do not support all image types.
    """
    return list(ALL_IMAGE_EXTENSIONS)


def get_all_extensions_to_filter_strings() -> dict[str, str]:
    """Map every extension to a file dialog filter string like "png|*.png"."""
    return dict(_EXTENSION_FILTER_STRINGS)


def check_supported_extension(ext: str) -> bool:
    """
    Check if the extension is possibly supported by OpenCV load.

    The list is hardcoded, so actual support still depends on the OS and
    the OpenCV build.

    Args:
        ext: Extension, with or without the period.

    """
    return normalize_ext(ext) in _EXTENSION_FILTER_STRINGS


def convert_after_load(img: np.ndarray, ext: str) -> np.ndarray | None:
    """
    Fix up an image just loaded from a file with the given extension.

    Returns:
        The converted image, or None if no conversion was needed.

    """
    if normalize_ext(ext) not in TIFF_EXTENSIONS:
        return None

    # TIF coming in swapped
    match try_pixel_type(img):
        case PixelType.UINT8_C3:
            logger.debug("convert_after_load: swapping BGR to RGB for TIFF")
            return cv2.cvtColor(img, cv2.COLOR_BGR2RGB)
        case PixelType.UINT8_C4:
            logger.debug("convert_after_load: dropping alpha for TIFF")
            return cv2.cvtColor(img, cv2.COLOR_BGRA2BGR)
        case _:
            return None


def _auto_range_to_8u(img: np.ndarray, ptype: PixelType) -> np.ndarray:
    work = img.astype(np.float32) if ptype is PixelType.INT32 else img
    low, high = hist_percentiles(
        work,
        SAVE_LOW_PERCENTILE,
        SAVE_HIGH_PERCENTILE,
    )
    logger.debug(
        "convert_for_save: auto-ranging %s [%s, %s] to 8U",
        ptype.value,
        low,
        high,
    )
    return img_to_8u(work, low, high)


def convert_for_save(img: np.ndarray, ext: str) -> tuple[np.ndarray, bool]:
    """
    Convert an image so it can be saved with the given extension.

    Deep images going to anything but TIFF are auto-ranged to 8U using
    the 1st and 99th percentiles; PPM gets BGR and PBM/PGM get 8U gray.

    Args:
        img: Image to save.
        ext: Target file extension, with or without the period.

    Returns:
        (image to save, whether a conversion was done). When nothing was
        converted the input array itself is returned.

    Raises:
        UnsupportedPixelTypeError: If PPM/PBM/PGM output cannot be
            produced from the pixel type.

    """
    ext = normalize_ext(ext)
    is_tiff = ext in TIFF_EXTENSIONS
    ptype = try_pixel_type(as_single_channel(img))
    if ptype is not None and ptype.is_single_channel:
        img = as_single_channel(img)

    if ptype in _DEEP_TYPES and not is_tiff:
        return _auto_range_to_8u(img, ptype), True

    if ptype is PixelType.INT32 and is_tiff:
        return img.astype(np.float32), True

    if ext == "ppm":
        # ppm needs BGR
        match ptype:
            case PixelType.UINT8:
                return cv2.cvtColor(img, cv2.COLOR_GRAY2BGR), True
            case PixelType.UINT8_C3:
                return img, False
            case PixelType.UINT8_C4:
                return cv2.cvtColor(img, cv2.COLOR_BGRA2BGR), True
            case _:
                raise UnsupportedPixelTypeError(
                    "convert_for_save(ppm)",
                    image_type_string(img),
                )

    if ext in ("pbm", "pgm"):
        # pbm needs 8UC1; pgm just says "gray" but use 8UC1 also
        match ptype:
            case PixelType.UINT8:
                return img.copy(), True
            case PixelType.UINT8_C3:
                return cv2.cvtColor(img, cv2.COLOR_BGR2GRAY), True
            case PixelType.UINT8_C4:
                return cv2.cvtColor(img, cv2.COLOR_BGRA2GRAY), True
            case _:
                raise UnsupportedPixelTypeError(
                    f"convert_for_save({ext})",
                    image_type_string(img),
                )

    return img, False
