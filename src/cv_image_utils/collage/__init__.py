"""
Grid collage rendering split into text/color primitives and layouts.

The package exposes the most commonly used entry points directly.
"""

from __future__ import annotations

from . import core, layouts
from .core import compute_text_color, fit_caption
from .layouts import (
    CollageLayout,
    CollageSpec,
    compute_layout,
    render_collage,
)

__all__ = [
    "CollageLayout",
    "CollageSpec",
    "compute_layout",
    "compute_text_color",
    "core",
    "fit_caption",
    "layouts",
    "render_collage",
]
