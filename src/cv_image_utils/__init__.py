"""Public package exports for the OpenCV image utilities."""

from __future__ import annotations

from .collage import CollageSpec, render_collage
from .errors import (
    ImageUtilError,
    InternalConsistencyError,
    InvalidSpecError,
    UnsupportedPixelTypeError,
)
from .histogram import (
    FloatHist,
    find_percentile_in_hist,
    hist_float,
    hist_int,
    hist_percentiles,
    hist_percentiles_32f,
    hist_percentiles_int,
)
from .logging_utils import init
from .pixel_types import PixelType, pixel_type
from .stats import ImageStats, compute_stats, img_min_max

__all__ = [
    "CollageSpec",
    "FloatHist",
    "ImageStats",
    "ImageUtilError",
    "InternalConsistencyError",
    "InvalidSpecError",
    "PixelType",
    "UnsupportedPixelTypeError",
    "compute_stats",
    "find_percentile_in_hist",
    "hist_float",
    "hist_int",
    "hist_percentiles",
    "hist_percentiles_32f",
    "hist_percentiles_int",
    "img_min_max",
    "init",
    "pixel_type",
    "render_collage",
]
