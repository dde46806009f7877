"""Text and color primitives for rendering collage captions."""

from __future__ import annotations

from functools import lru_cache

import cv2
import numpy as np
from PIL import Image, ImageDraw, ImageFont

from cv_image_utils.constants import (
    BASE_FONT_PX,
    CAPTION_FONT_FILE,
    COLOR_BLACK,
    COLOR_WHITE,
    CONTRAST_OFFSET,
    U8_MAX,
)
from cv_image_utils.errors import UnsupportedPixelTypeError
from cv_image_utils.logging_utils import logger
from cv_image_utils.pixel_types import PixelType, as_single_channel, pixel_type

_RGB = tuple[int, int, int]
_Font = ImageFont.FreeTypeFont | ImageFont.ImageFont

COLLAGE_INPUT_TYPES = (PixelType.UINT8, PixelType.UINT8_C3)


def font_px_for_scale(font_scale: float) -> int:
    """Convert a relative font scale to a pixel size (at least 1)."""
    return max(1, round(BASE_FONT_PX * font_scale))


@lru_cache(maxsize=16)
def get_font(px: int) -> _Font:
    """Load the caption font at the given pixel size with fallback; cached."""
    try:
        return ImageFont.truetype(CAPTION_FONT_FILE, px)
    except OSError:
        logger.debug("%s not found, using Pillow default font", CAPTION_FONT_FILE)
        return ImageFont.load_default(size=px)


def measure_text(text: str, font: _Font) -> tuple[int, int]:
    """Return (width, height) of the inked box of text."""
    left, top, right, bottom = font.getbbox(text)
    return int(right - left), int(bottom - top)


def fit_caption(text: str, max_width: int, font: _Font) -> str:
    """
    Clip text from the end until its width is less than max_width.

    The first character is always kept, even if it alone is too wide.
    """
    clipped = text
    width, _ = measure_text(clipped, font)
    while width >= max_width and len(clipped) > 1:
        clipped = clipped[:-1]
        width, _ = measure_text(clipped, font)
    if clipped != text:
        logger.debug("Caption %r clipped to %r", text, clipped)
    return clipped


def caption_color(*, black_background: bool) -> _RGB:
    """Caption color contrasting with the collage background."""
    return COLOR_WHITE if black_background else COLOR_BLACK


def draw_caption(  # noqa: PLR0913
    draw: ImageDraw.ImageDraw,
    text: str,
    cell_xy: tuple[int, int],
    cell_size: tuple[int, int],
    top_y: int,
    font: _Font,
    fill: _RGB,
) -> None:
    """
    Draw text clipped to the cell width and centered under the cell.

    Args:
        draw: Drawing context of the canvas.
        text: Caption, non-empty.
        cell_xy: Top-left corner of the image cell.
        cell_size: (width, height) of the image cell.
        top_y: Canvas row where the top of the text goes.
        font: Caption font.
        fill: Text color.

    """
    cell_w, _ = cell_size
    clipped = fit_caption(text, cell_w, font)
    left, top, right, _ = font.getbbox(clipped)
    text_w = right - left
    x = cell_xy[0] + (cell_w - text_w) // 2
    draw.text((x - left, top_y - top), clipped, font=font, fill=fill)


def to_rgb_image(img: np.ndarray) -> Image.Image:
    """
    Wrap an 8UC1 or 8UC3 array as a 3-channel PIL image.

    Gray images are replicated into three channels. Channel order of
    color images is passed through unchanged.
    """
    img = as_single_channel(img)
    ptype = pixel_type(img, "render_collage")
    if ptype not in COLLAGE_INPUT_TYPES:
        raise UnsupportedPixelTypeError("render_collage", ptype.value)
    pil_img = Image.fromarray(np.ascontiguousarray(img))
    return pil_img.convert("RGB")


def compute_text_color(img: np.ndarray, pixel: tuple[int, int]) -> _RGB:
    """
    Choose black or white text for maximum contrast at a pixel.

    Args:
        img: 8UC3 (BGR) or 8U image.
        pixel: (x, y) location to sample.

    """
    img = as_single_channel(img)
    ptype = pixel_type(img, "compute_text_color")
    x, y = pixel
    if ptype is PixelType.UINT8_C3:
        sample = np.ascontiguousarray(img[y:y + 1, x:x + 1])
        gray = int(cv2.cvtColor(sample, cv2.COLOR_BGR2GRAY)[0, 0])
    elif ptype is PixelType.UINT8:
        gray = int(img[y, x])
    else:
        raise UnsupportedPixelTypeError("compute_text_color", ptype.value)

    luminance = gray / U8_MAX
    contrast_with_black = (luminance + CONTRAST_OFFSET) / CONTRAST_OFFSET
    contrast_with_white = (1.0 + CONTRAST_OFFSET - luminance) / CONTRAST_OFFSET
    if contrast_with_black > contrast_with_white:
        return COLOR_BLACK
    return COLOR_WHITE
