"""
Test configuration and shared fixtures for cv_image_utils.

This module defines reusable pytest fixtures for small synthetic images
and collage specs used across the test modules.

Note:
    This file is automatically loaded by pytest and should not be
    renamed.

"""
from collections.abc import Callable
from typing import Any

import numpy as np
import pytest

from cv_image_utils.collage import CollageSpec
from cv_image_utils.logging_utils import logger


@pytest.fixture
def gray_image() -> np.ndarray:
    """Provide a 4x4 8U image with every pixel set to 10."""
    return np.full((4, 4), 10, dtype=np.uint8)


@pytest.fixture
def ramp_image() -> np.ndarray:
    """Provide a 16x16 8U image holding each value 0..255 once."""
    return np.arange(256, dtype=np.uint8).reshape(16, 16)


@pytest.fixture
def color_image() -> np.ndarray:
    """Provide a 6x8 8UC3 image filled with (10, 20, 30)."""
    img = np.zeros((6, 8, 3), dtype=np.uint8)
    img[:, :] = (10, 20, 30)
    return img


@pytest.fixture
def float_image_with_nan() -> np.ndarray:
    """Provide a 1x5 32F image holding 1, 2, 3, 4 and NaN."""
    return np.array([[1.0, 2.0, 3.0, 4.0, np.nan]], dtype=np.float32)


@pytest.fixture
def make_collage_spec() -> Callable[..., CollageSpec]:
    """Build CollageSpec instances with optional field overrides."""

    def _build(**overrides: Any) -> CollageSpec:  # noqa: ANN401
        fields: dict[str, Any] = {
            "image_width_px": 210,
            "col_count": 2,
            "margin_px": 10,
            "do_captions": False,
            "do_black_background": True,
            "font_scale": 1.0,
        }
        fields.update(overrides)
        return CollageSpec(**fields)

    return _build


@pytest.fixture(autouse=True)
def enable_logger_propagation(monkeypatch: pytest.MonkeyPatch) -> None:
    """Enable propagation for the package logger to allow caplog to work."""
    monkeypatch.setattr(logger, "propagate", True)
