"""Grid layout and rendering of image collages with optional captions."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np
from PIL import Image, ImageDraw

from cv_image_utils.collage.core import (
    caption_color,
    draw_caption,
    font_px_for_scale,
    get_font,
    measure_text,
    to_rgb_image,
)
from cv_image_utils.constants import (
    CAPTION_SAMPLE_TEXT,
    COLOR_BLACK,
    COLOR_WHITE,
)
from cv_image_utils.errors import InvalidSpecError
from cv_image_utils.logging_utils import logger

if TYPE_CHECKING:  # pragma: no cover
    from collections.abc import Sequence


@dataclass(frozen=True)
class CollageSpec:
    """
    How to lay out and draw a collage.

    Every field is required. Construction fails with InvalidSpecError if
    the values cannot produce a layout.
    """

    image_width_px: int
    col_count: int
    margin_px: int
    do_captions: bool
    do_black_background: bool
    font_scale: float

    def __post_init__(self) -> None:
        if self.col_count < 1:
            msg = f"col_count must be at least 1, got {self.col_count}"
            raise InvalidSpecError(msg)
        if self.margin_px < 0:
            msg = f"margin_px must not be negative, got {self.margin_px}"
            raise InvalidSpecError(msg)
        if self.font_scale <= 0:
            msg = f"font_scale must be positive, got {self.font_scale}"
            raise InvalidSpecError(msg)
        usable = self.image_width_px - (self.col_count + 1) * self.margin_px
        if usable < self.col_count:
            msg = (f"image_width_px {self.image_width_px} leaves no room for "
                   f"{self.col_count} columns with {self.margin_px}px margins")
            raise InvalidSpecError(msg)


@dataclass(frozen=True)
class CollageLayout:
    """Pixel geometry of a collage, computed from a spec and inputs."""

    col_count: int
    row_count: int
    margin_px: int
    cell_width: int
    cell_height: int
    text_height: int
    caption_margin: int
    width: int
    height: int

    @property
    def band_height(self) -> int:
        """Caption band height added once below every grid row."""
        return 2 * self.caption_margin + self.text_height

    @property
    def cell_size(self) -> tuple[int, int]:
        return self.cell_width, self.cell_height

    @property
    def canvas_size(self) -> tuple[int, int]:
        return self.width, self.height

    def cell_origin(self, index: int) -> tuple[int, int]:
        """Return the top-left (x, y) of the cell for the index-th image."""
        row, col = divmod(index, self.col_count)
        x = col * self.cell_width + (col + 1) * self.margin_px
        y = (row * self.cell_height + (row + 1) * self.margin_px
             + row * self.band_height)
        return x, y

    def caption_top(self, index: int) -> int:
        """Return the canvas row where the index-th caption text starts."""
        _, y = self.cell_origin(index)
        return y + self.cell_height + self.caption_margin


def compute_layout(
    first_shape: tuple[int, ...],
    image_count: int,
    spec: CollageSpec,
    text_height: int = 0,
) -> CollageLayout:
    """
    Compute collage geometry.

    All cells take the aspect ratio of the first image and share one
    scale, chosen so the columns and margins fill the spec width.

    Args:
        first_shape: Array shape of the first image, (rows, cols, ...).
        image_count: Number of images in the collage.
        spec: Layout parameters.
        text_height: Height of one caption line; 0 disables the band.

    """
    if image_count < 1:
        msg = "Cannot lay out a collage with no images"
        raise ValueError(msg)
    img_rows, img_cols = int(first_shape[0]), int(first_shape[1])
    if img_rows < 1 or img_cols < 1:
        msg = f"First image has empty shape {first_shape}"
        raise ValueError(msg)

    total_margin_col = (spec.col_count + 1) * spec.margin_px
    usable_w = spec.image_width_px - total_margin_col
    cell_width = usable_w // spec.col_count
    row_count = -(-image_count // spec.col_count)
    img_scale = usable_w / (spec.col_count * img_cols)
    cell_height = max(1, int(img_scale * img_rows))

    caption_margin = text_height // 2
    band = 2 * caption_margin + text_height
    height = (cell_height * row_count + spec.margin_px * (row_count + 1)
              + row_count * band)

    return CollageLayout(
        col_count=spec.col_count,
        row_count=row_count,
        margin_px=spec.margin_px,
        cell_width=cell_width,
        cell_height=cell_height,
        text_height=text_height,
        caption_margin=caption_margin,
        width=spec.image_width_px,
        height=height,
    )


def render_collage(
    images: Sequence[np.ndarray],
    captions: Sequence[str],
    spec: CollageSpec,
) -> np.ndarray | None:
    """
    Render images into one canvas as a grid of rows and columns.

    Args:
        images: 8UC1 or 8UC3 images. All are drawn at the aspect ratio of
            the first; others get stretched.
        captions: One caption per image, or empty for none. Empty strings
            skip that image's caption.
        spec: Parameters for how to render.

    Returns:
        A new (height, width, 3) uint8 canvas, or None when images is
        empty. Channel order of color inputs is kept as given.

    Raises:
        UnsupportedPixelTypeError: If an image is not 8UC1 or 8UC3.
        ValueError: If captions is non-empty and its length differs.

    """
    if not images:
        return None

    if captions and len(captions) != len(images):
        msg = (f"Got {len(captions)} captions for {len(images)} images; "
               "pass one per image or none")
        raise ValueError(msg)

    cells = [to_rgb_image(img) for img in images]

    font = get_font(font_px_for_scale(spec.font_scale))
    text_height = 0
    if spec.do_captions:
        _, text_height = measure_text(CAPTION_SAMPLE_TEXT, font)

    layout = compute_layout(images[0].shape, len(images), spec, text_height)
    logger.debug(
        "Collage %dx%d: %d rows of %d, cell %dx%d",
        layout.width,
        layout.height,
        layout.row_count,
        layout.col_count,
        layout.cell_width,
        layout.cell_height,
    )

    bg = COLOR_BLACK if spec.do_black_background else COLOR_WHITE
    fill = caption_color(black_background=spec.do_black_background)
    canvas = Image.new("RGB", layout.canvas_size, bg)
    draw = ImageDraw.Draw(canvas)

    for i, cell in enumerate(cells):
        origin = layout.cell_origin(i)
        scaled = cell.resize(layout.cell_size, Image.Resampling.BILINEAR)
        canvas.paste(scaled, origin)

        if spec.do_captions and captions and captions[i]:
            draw_caption(
                draw,
                captions[i],
                origin,
                layout.cell_size,
                layout.caption_top(i),
                font,
                fill,
            )

    return np.array(canvas)
