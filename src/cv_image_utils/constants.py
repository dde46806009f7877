"""
Constants used internally by the image utilities.

These are implementation-level values that should not be overridden
via config files.
"""

# Histogram
HIST_8U_SIZE = 256
HIST_16U_SIZE = 65536
BITS_8U = 8
BITS_16U = 16
DEFAULT_FLOAT_BIN_COUNT = 256

# Fraction of one bin width added to the exclusive upper bound of a float
# histogram so a pixel equal to the maximum lands in the last bin.
UPPER_BOUND_NUDGE_FRAC = 0.1

PERCENT_MAX = 100.0

# Percentiles used to auto-range deep images to 8U for saving
SAVE_LOW_PERCENTILE = 1.0
SAVE_HIGH_PERCENTILE = 99.0

# 8U output range
U8_MAX = 255.0

# Internal color constants
COLOR_BLACK = (0, 0, 0)
COLOR_WHITE = (255, 255, 255)

# Caption rendering
CAPTION_SAMPLE_TEXT = "Foo1"
BASE_FONT_PX = 22
CAPTION_FONT_FILE = "DejaVuSans.ttf"

# Text contrast (relative luminance offset)
CONTRAST_OFFSET = 0.05

# All extensions OpenCV may load; not every platform supports all of them.
ALL_IMAGE_EXTENSIONS: tuple[str, ...] = (
    "jpg", "jpeg", "tif", "tiff", "png", "bmp", "jpe", "ppm", "pgm", "pnm",
    "ras", "dib", "pxm", "jp2", "webp",
    "exr",                      # no encoder in some builds
    "hdr", "pfm", "sr", "pic",
    "pbm",
)
TIFF_EXTENSIONS = frozenset({"tif", "tiff"})
