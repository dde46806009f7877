"""Shared default values for user-facing configuration settings."""

# Collage
DEFAULT_COLLAGE_WIDTH_PX = 1920
DEFAULT_COLLAGE_COL_COUNT = 4
DEFAULT_COLLAGE_MARGIN_PX = 10
DEFAULT_COLLAGE_CAPTIONS = True
DEFAULT_COLLAGE_BLACK_BACKGROUND = True
DEFAULT_COLLAGE_FONT_SCALE = 1.0

# Histogram
DEFAULT_HIST_BIN_COUNT = 256
DEFAULT_LOW_PERCENTILE = 1.0
DEFAULT_HIGH_PERCENTILE = 99.0

# Logging
DEFAULT_LOG_LEVEL = "INFO"
