"""
Configuration schema and loader for the image utilities.

Defines Pydantic models representing structured configuration sections
and a TOML-based config loader with validation support.
"""

from pathlib import Path
from typing import Literal, Self

import tomlkit
from pydantic import BaseModel, Field, model_validator

from cv_image_utils.collage import CollageSpec
from cv_image_utils.config_defaults import (
    DEFAULT_COLLAGE_BLACK_BACKGROUND,
    DEFAULT_COLLAGE_CAPTIONS,
    DEFAULT_COLLAGE_COL_COUNT,
    DEFAULT_COLLAGE_FONT_SCALE,
    DEFAULT_COLLAGE_MARGIN_PX,
    DEFAULT_COLLAGE_WIDTH_PX,
    DEFAULT_HIGH_PERCENTILE,
    DEFAULT_HIST_BIN_COUNT,
    DEFAULT_LOG_LEVEL,
    DEFAULT_LOW_PERCENTILE,
)

LogLevelName = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class CollageConfig(BaseModel):
    """Control collage layout and caption settings."""

    image_width_px: int = Field(DEFAULT_COLLAGE_WIDTH_PX, ge=1)
    col_count: int = Field(DEFAULT_COLLAGE_COL_COUNT, ge=1)
    margin_px: int = Field(DEFAULT_COLLAGE_MARGIN_PX, ge=0)
    do_captions: bool = DEFAULT_COLLAGE_CAPTIONS
    do_black_background: bool = DEFAULT_COLLAGE_BLACK_BACKGROUND
    font_scale: float = Field(DEFAULT_COLLAGE_FONT_SCALE, gt=0)

    def to_spec(self) -> CollageSpec:
        """Build the immutable render spec from this section."""
        return CollageSpec(
            image_width_px=self.image_width_px,
            col_count=self.col_count,
            margin_px=self.margin_px,
            do_captions=self.do_captions,
            do_black_background=self.do_black_background,
            font_scale=self.font_scale,
        )


class HistogramConfig(BaseModel):
    """Control float histogram binning and auto-range percentiles."""

    bin_count: int = Field(DEFAULT_HIST_BIN_COUNT, ge=1)
    low_percentile: float = Field(DEFAULT_LOW_PERCENTILE, ge=0, le=100)
    high_percentile: float = Field(DEFAULT_HIGH_PERCENTILE, ge=0, le=100)

    @model_validator(mode="after")
    def _check_order(self) -> Self:
        if self.low_percentile > self.high_percentile:
            msg = (f"low_percentile {self.low_percentile} is above "
                   f"high_percentile {self.high_percentile}")
            raise ValueError(msg)
        return self


class LoggingConfig(BaseModel):
    """Select the package log level."""

    level: LogLevelName = DEFAULT_LOG_LEVEL


class ImageUtilConfig(BaseModel):
    """
    Root configuration object combining all supported sections.

    Mirrors the structure of the TOML file, grouping related parameters
    under logical categories.
    """

    collage: CollageConfig = Field(
        default_factory=lambda: CollageConfig.model_validate({}),
    )
    histogram: HistogramConfig = Field(
        default_factory=lambda: HistogramConfig.model_validate({}),
    )
    logging: LoggingConfig = Field(
        default_factory=lambda: LoggingConfig.model_validate({}),
    )


class ConfigLoader:
    """
    Loads and parses a TOML configuration file into a typed config object.

    Falls back to defaults for any missing subsections or fields.
    """

    @staticmethod
    def load(path: str | Path) -> ImageUtilConfig:
        """
        Load a configuration from a TOML file.

        Returns a validated ImageUtilConfig instance based on the file
        contents.
        """
        config_path = Path(path)
        if not config_path.is_file():
            msg = f"Config file not found: {path}"
            raise FileNotFoundError(msg)

        with config_path.open("r", encoding="utf-8") as f:
            doc = tomlkit.load(f)

        return ImageUtilConfig.model_validate(doc.unwrap())
