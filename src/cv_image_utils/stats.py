"""
Image statistics built on OpenCV primitives.

Includes the NaN-aware min/max used by the histogram engine, simple
summary statistics, row/column profiles and conversions to 8-bit.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

import cv2
import numpy as np

from cv_image_utils.constants import U8_MAX
from cv_image_utils.errors import (
    InternalConsistencyError,
    UnsupportedPixelTypeError,
)
from cv_image_utils.logging_utils import logger
from cv_image_utils.pixel_types import (
    PixelType,
    as_single_channel,
    image_type_string,
    pixel_type,
)

_FLOAT_TYPES = (PixelType.FLOAT32, PixelType.FLOAT32_C3)
_COUNTABLE_TYPES = (PixelType.UINT8, PixelType.UINT16)


def _nan_skipping_min_max(img: np.ndarray) -> tuple[float, float]:
    """Scan a float image for min/max while ignoring NaN pixels."""
    valid = img[~np.isnan(img)]
    if valid.size == 0:
        return math.nan, math.nan
    return float(valid.min()), float(valid.max())


def img_min_max(img: np.ndarray) -> tuple[float, float]:
    """
    Find min and max of any supported image, returned as floats.

    Delegates to cv2.minMaxLoc. The library's NaN handling differs between
    platforms: it may report NaN, or a finite value that ignores only
    some of the NaN pixels. Float images containing NaN therefore always
    use a scan that skips NaN pixels.

    Args:
        img: Image of any supported pixel type.

    Returns:
        (min, max). Both are NaN when the image is empty or every pixel
        is NaN.

    Raises:
        UnsupportedPixelTypeError: If the pixel type is not supported.
        InternalConsistencyError: If the library reports NaN for an
            image that cannot hold NaN.

    """
    ptype = pixel_type(img, "img_min_max")
    if img.size == 0:
        return math.nan, math.nan

    # minMaxLoc needs a single-channel view; channels are folded into cols
    flat = img.reshape(img.shape[0], -1)
    min_val, max_val, _, _ = cv2.minMaxLoc(flat)
    low, high = float(min_val), float(max_val)
    lib_nan = math.isnan(low) or math.isnan(high)

    if ptype not in _FLOAT_TYPES:
        if lib_nan:
            msg = f"minMaxLoc gave NaN on a {ptype.value} image"
            raise InternalConsistencyError(msg)
        return low, high

    if lib_nan or bool(np.isnan(img).any()):
        logger.debug("NaN pixels present, using NaN-skipping min/max scan")
        return _nan_skipping_min_max(img)
    return low, high


def img_to_8u(
    img: np.ndarray,
    low_val: float = math.nan,
    high_val: float = math.nan,
) -> np.ndarray:
    """
    Linearly map to 8U, saturating outside [low_val, high_val].

    Args:
        img: Single-channel image of any supported depth.
        low_val: Pixel value pinned to 0. Defaults to the image min.
        high_val: Pixel value pinned to 255. Defaults to the image max.

    Returns:
        A new uint8 image. All zeros if the resolved range is empty.

    """
    if math.isnan(low_val) or math.isnan(high_val) or high_val <= low_val:
        # range not specified so use min/max
        low_val, high_val = img_min_max(img)

    if math.isnan(low_val) or high_val <= low_val:
        logger.warning(
            "img_to_8u: empty range [%s, %s], returning zeros",
            low_val,
            high_val,
        )
        return np.zeros(img.shape[:2], dtype=np.uint8)

    alpha = U8_MAX / (high_val - low_val)
    beta = -alpha * low_val
    # clip first: convertScaleAbs would fold values below low_val back up
    scaled = np.nan_to_num(img.astype(np.float32) * alpha + beta)
    return cv2.convertScaleAbs(np.clip(scaled, 0.0, U8_MAX))


def img_to_rgb(img8u: np.ndarray) -> np.ndarray:
    """Replicate an 8U gray image into interleaved RGB."""
    img8u = as_single_channel(img8u)
    if pixel_type(img8u, "img_to_rgb") is not PixelType.UINT8:
        raise UnsupportedPixelTypeError("img_to_rgb", image_type_string(img8u))
    return cv2.cvtColor(img8u, cv2.COLOR_GRAY2RGB)


@dataclass(slots=True)
class ImageStats:
    """Summary statistics for one image."""

    pixel_type: PixelType
    width: int
    height: int
    nonzero_count: int = 0
    sum: float = 0.0
    min_val: float = math.nan
    max_val: float = math.nan


def compute_stats(img: np.ndarray) -> ImageStats:
    """
    Compute some stats on the input image.

    Multi-channel images only get type and dimensions; everything else
    is left at its default.
    """
    img = as_single_channel(img)
    ptype = pixel_type(img, "compute_stats")
    stats = ImageStats(
        pixel_type=ptype,
        width=int(img.shape[1]),
        height=int(img.shape[0]),
    )

    # just skip rgb for now
    if not ptype.is_single_channel:
        return stats

    if ptype in _COUNTABLE_TYPES and img.size > 0:
        stats.nonzero_count = int(cv2.countNonZero(img))

    if img.size > 0:
        stats.sum = float(cv2.sumElems(img)[0])
        stats.min_val, stats.max_val = img_min_max(img)

    return stats


def profile(img: np.ndarray, *, vertical: bool) -> np.ndarray:
    """
    Create a profile of the image: column sums or row sums.

    Args:
        img: Single-channel image.
        vertical: True for one sum per column, False for one per row.

    Returns:
        1-D float32 array with one value per column or row.

    """
    img = as_single_channel(img)
    ptype = pixel_type(img, "profile")
    if not ptype.is_single_channel:
        raise UnsupportedPixelTypeError("profile", ptype.value)
    if ptype is PixelType.INT32:
        # reduce has no 32S -> 32F sum path
        img = img.astype(np.float32)
    reduced = cv2.reduce(
        img,
        0 if vertical else 1,
        cv2.REDUCE_SUM,
        dtype=cv2.CV_32F,
    )
    return reduced.ravel()
