"""
Histogram and percentile engine for single-channel images.

Integer histograms bucket 8U and 16U pixels directly (optionally coarsened
by a bit shift). Float histograms use uniform bins over a range that
defaults to [0, image max] and never count NaN pixels. Percentiles are
read off either kind of histogram with a single cumulative scan.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import numpy as np

from cv_image_utils.constants import (
    BITS_8U,
    BITS_16U,
    DEFAULT_FLOAT_BIN_COUNT,
    HIST_8U_SIZE,
    HIST_16U_SIZE,
    PERCENT_MAX,
    UPPER_BOUND_NUDGE_FRAC,
)
from cv_image_utils.errors import UnsupportedPixelTypeError
from cv_image_utils.logging_utils import logger
from cv_image_utils.pixel_types import PixelType, as_single_channel, pixel_type
from cv_image_utils.stats import img_min_max

if TYPE_CHECKING:  # pragma: no cover
    from collections.abc import Sequence


@dataclass(slots=True)
class FloatHist:
    """
    Float-binned histogram.

    bins holds the lower edge of each bin and counts the matching pixel
    counts; both always have the same length. min_val and max_val are
    the resolved range the histogram was built from.
    """

    bins: list[float] = field(default_factory=list)
    counts: list[int] = field(default_factory=list)
    min_val: float = math.nan
    max_val: float = math.nan

    def __len__(self) -> int:
        return len(self.counts)

    @property
    def total(self) -> int:
        """Return the number of pixels counted."""
        return sum(self.counts)


def hist_int(img: np.ndarray, bin_shift: int = 0) -> np.ndarray:
    """
    Compute an integer histogram of an 8U or 16U image.

    Bin width is given as a bit shift so bucketing stays a shift rather
    than a division: each pixel value is right-shifted by bin_shift
    before counting.

    Args:
        img: Single-channel 8U or 16U image.
        bin_shift: Bit-shift divisor for how wide bins are.

    Returns:
        Counts array of length 256 >> bin_shift (8U) or
        65536 >> bin_shift (16U).

    Raises:
        UnsupportedPixelTypeError: For any other pixel type.
        ValueError: If bin_shift is negative or not below the bit depth.

    """
    img = as_single_channel(img)
    match pixel_type(img, "hist_int"):
        case PixelType.UINT8:
            size, bits = HIST_8U_SIZE, BITS_8U
        case PixelType.UINT16:
            size, bits = HIST_16U_SIZE, BITS_16U
        case other:
            raise UnsupportedPixelTypeError("hist_int", other.value)

    if not 0 <= bin_shift < bits:
        msg = f"bin_shift must be in [0, {bits}), got {bin_shift}"
        raise ValueError(msg)

    values = img.ravel() >> bin_shift
    return np.bincount(values, minlength=size >> bin_shift)


def hist_float(
    img: np.ndarray,
    bin_count: int,
    min_val: float = math.nan,
    max_val: float = math.nan,
) -> FloatHist:
    """
    Uniform histogram on any single-channel image, with float bins.

    If max_val <= min_val then bin_count is ignored and a single bin at
    min_val with count 0 is returned.

    Args:
        img: Single-channel image of any supported depth.
        bin_count: Number of equal-width bins.
        min_val: Bottom of the first bin. NaN selects the default, 0.
        max_val: Top of the last bin. NaN selects the default, the
            largest non-NaN value in the image.

    Returns:
        The histogram. Empty when the image has no non-NaN values and no
        explicit max_val was given.

    """
    if bin_count < 1:
        msg = f"bin_count must be at least 1, got {bin_count}"
        raise ValueError(msg)

    img = as_single_channel(img)
    ptype = pixel_type(img, "hist_float")
    if not ptype.is_single_channel:
        raise UnsupportedPixelTypeError("hist_float", ptype.value)

    if math.isnan(min_val):
        min_val = 0.0

    if math.isnan(max_val):
        max_val = img_min_max(img)[1]

    # no non-nan values in image
    if math.isnan(max_val):
        return FloatHist(min_val=min_val, max_val=max_val)

    if max_val <= min_val:
        logger.debug(
            "hist_float: empty range [%s, %s], returning a single empty bin",
            min_val,
            max_val,
        )
        return FloatHist(
            bins=[min_val],
            counts=[0],
            min_val=min_val,
            max_val=max_val,
        )

    bin_size = (max_val - min_val) / bin_count
    bins = [min_val + i * bin_size for i in range(bin_count)]

    # max_val may be exactly the max value in the image; float epsilon is
    # too small relative to the bin width, so only the last bin is widened
    upper = max_val + UPPER_BOUND_NUDGE_FRAC * bin_size

    values = img.ravel()
    if ptype is PixelType.FLOAT32:
        values = values[~np.isnan(values)]
    # explicit edges so each count covers exactly [bins[i], bins[i + 1])
    raw, _ = np.histogram(values, bins=np.array([*bins, upper]))
    counts = [int(c) for c in raw]

    return FloatHist(bins=bins, counts=counts, min_val=min_val, max_val=max_val)


def find_percentile_in_hist(counts: Sequence[int] | np.ndarray, pct: float) -> int:
    """
    Return the index of the bin where the given percentile falls.

    This is the smallest index whose inclusive cumulative count reaches
    pct / 100 of the total, so ties go to the lowest bin.

    Raises:
        ValueError: If counts is empty or pct is outside [0, 100].

    """
    if not 0.0 <= pct <= PERCENT_MAX:
        msg = f"Percentile must be between 0 and 100, got {pct}"
        raise ValueError(msg)

    arr = np.asarray(counts)
    if arr.size == 0:
        msg = "Cannot find a percentile in an empty histogram"
        raise ValueError(msg)

    cumulative = np.cumsum(arr)
    target = pct / PERCENT_MAX * float(cumulative[-1])
    idx = int(np.searchsorted(cumulative, target, side="left"))
    return min(idx, arr.size - 1)


def hist_percentiles_int(
    img: np.ndarray,
    low_pct: float,
    high_pct: float,
) -> tuple[int, int]:
    """
    Compute two percentiles on an 8U or 16U image.

    Args:
        img: Single-channel 8U or 16U image.
        low_pct: Percentile to compute, 0 to 100.
        high_pct: Percentile to compute, 0 to 100.

    Returns:
        The pixel values at the two percentiles.

    """
    img = as_single_channel(img)
    ptype = pixel_type(img, "hist_percentiles_int")
    if ptype not in (PixelType.UINT8, PixelType.UINT16):
        raise UnsupportedPixelTypeError("hist_percentiles_int", ptype.value)
    counts = hist_int(img)
    return (
        find_percentile_in_hist(counts, low_pct),
        find_percentile_in_hist(counts, high_pct),
    )


def hist_percentiles_32f(
    img: np.ndarray,
    low_pct: float,
    high_pct: float,
) -> tuple[float, float]:
    """
    Compute two percentiles on a 32F image.

    Uses a 256-bin histogram over [0, image max]; the result is the lower
    edge of the bin each percentile falls in. Returns (NaN, NaN) when the
    image holds no non-NaN values.
    """
    img = as_single_channel(img)
    ptype = pixel_type(img, "hist_percentiles_32f")
    if ptype is not PixelType.FLOAT32:
        raise UnsupportedPixelTypeError("hist_percentiles_32f", ptype.value)

    hist = hist_float(img, DEFAULT_FLOAT_BIN_COUNT)
    if not hist.counts:
        return math.nan, math.nan
    low_idx = find_percentile_in_hist(hist.counts, low_pct)
    high_idx = find_percentile_in_hist(hist.counts, high_pct)
    return hist.bins[low_idx], hist.bins[high_idx]


def hist_percentiles(
    img: np.ndarray,
    low_pct: float,
    high_pct: float,
) -> tuple[float, float]:
    """Compute two percentiles on an 8U, 16U or 32F image, as floats."""
    img = as_single_channel(img)
    match pixel_type(img, "hist_percentiles"):
        case PixelType.UINT8 | PixelType.UINT16:
            low, high = hist_percentiles_int(img, low_pct, high_pct)
            return float(low), float(high)
        case PixelType.FLOAT32:
            return hist_percentiles_32f(img, low_pct, high_pct)
        case other:
            raise UnsupportedPixelTypeError("hist_percentiles", other.value)
