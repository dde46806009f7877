"""
Tests for the grid collage compositor.

Covers:
- Spec validation
- Layout geometry (cell size, rows, caption bands, cell origins)
- Rendering of gray and color cells on black or white backgrounds
- Caption placement, clipping and contrast colors
"""

from __future__ import annotations

from collections.abc import Callable

import numpy as np
import pytest

from cv_image_utils.collage import core as cl_core
from cv_image_utils.collage import layouts as cl_layouts
from cv_image_utils.constants import COLOR_BLACK, COLOR_WHITE
from cv_image_utils.errors import InvalidSpecError, UnsupportedPixelTypeError

pytestmark = pytest.mark.visual

SpecFactory = Callable[..., cl_layouts.CollageSpec]

CELL = 90
MARGIN = 10


def _gray(value: int, rows: int = CELL, cols: int = CELL) -> np.ndarray:
    return np.full((rows, cols), value, dtype=np.uint8)


class TestCollageSpec:
    """Test spec validation on construction."""

    @pytest.mark.parametrize(
        "overrides",
        [
            {"col_count": 0},
            {"margin_px": -1},
            {"font_scale": 0.0},
            {"image_width_px": 30},
        ],
    )
    def test_invalid_spec(
        self,
        make_collage_spec: SpecFactory,
        overrides: dict[str, float],
    ) -> None:
        """Specs that cannot produce a layout fail fast."""
        with pytest.raises(InvalidSpecError) as exc_info:
            make_collage_spec(**overrides)
        assert isinstance(exc_info.value, ValueError)

    def test_spec_is_frozen(self, make_collage_spec: SpecFactory) -> None:
        """Specs are immutable."""
        spec = make_collage_spec()
        with pytest.raises(AttributeError):
            spec.col_count = 3  # type: ignore[misc]


class TestComputeLayout:
    """Test collage geometry."""

    def test_square_images_without_captions(
        self,
        make_collage_spec: SpecFactory,
    ) -> None:
        """Three square images in two columns make two rows."""
        layout = cl_layouts.compute_layout(
            (CELL, CELL), 3, make_collage_spec())
        assert layout.cell_size == (CELL, CELL)
        assert layout.row_count == 2
        assert layout.band_height == 0
        assert layout.canvas_size == (210, 2 * CELL + 3 * MARGIN)
        assert layout.cell_origin(0) == (MARGIN, MARGIN)
        assert layout.cell_origin(1) == (CELL + 2 * MARGIN, MARGIN)
        assert layout.cell_origin(2) == (MARGIN, CELL + 2 * MARGIN)

    def test_caption_band_per_row(
        self,
        make_collage_spec: SpecFactory,
    ) -> None:
        """Each row gets one caption band of text plus two half margins."""
        layout = cl_layouts.compute_layout(
            (CELL, CELL), 3, make_collage_spec(), text_height=20)
        assert layout.caption_margin == 10
        assert layout.band_height == 40
        assert layout.height == 2 * CELL + 3 * MARGIN + 2 * 40
        assert layout.cell_origin(3) == (CELL + 2 * MARGIN, 150)
        assert layout.caption_top(0) == MARGIN + CELL + 10

    def test_scale_from_first_image(
        self,
        make_collage_spec: SpecFactory,
    ) -> None:
        """Cell height follows the aspect ratio of the first image."""
        layout = cl_layouts.compute_layout(
            (50, 100), 1, make_collage_spec())
        assert layout.cell_size == (CELL, 45)
        assert layout.row_count == 1

    def test_no_images(self, make_collage_spec: SpecFactory) -> None:
        """A layout needs at least one image."""
        with pytest.raises(ValueError, match="no images"):
            cl_layouts.compute_layout((CELL, CELL), 0, make_collage_spec())


class TestRenderCollage:
    """Test rendering collages."""

    def test_empty_input_is_noop(self, make_collage_spec: SpecFactory) -> None:
        """No images means no canvas."""
        assert cl_layouts.render_collage([], [], make_collage_spec()) is None

    def test_grid_cells_and_background(
        self,
        make_collage_spec: SpecFactory,
    ) -> None:
        """The third cell is filled, the fourth stays background."""
        images = [_gray(50), _gray(100), _gray(200)]
        canvas = cl_layouts.render_collage(images, [], make_collage_spec())
        assert canvas is not None
        assert canvas.shape == (2 * CELL + 3 * MARGIN, 210, 3)
        assert canvas.dtype == np.uint8

        row1_y = CELL + 2 * MARGIN + CELL // 2
        assert canvas[row1_y, MARGIN + CELL // 2].tolist() == [200] * 3
        assert canvas[row1_y, 2 * MARGIN + CELL + CELL // 2].tolist() == [0] * 3
        assert canvas[MARGIN + 5, 2 * MARGIN + CELL + 5].tolist() == [100] * 3
        assert canvas[0, 0].tolist() == [0, 0, 0]

    def test_white_background(self, make_collage_spec: SpecFactory) -> None:
        """Margins use the white background when requested."""
        spec = make_collage_spec(do_black_background=False)
        canvas = cl_layouts.render_collage([_gray(0)], [], spec)
        assert canvas is not None
        assert canvas[0, 0].tolist() == list(COLOR_WHITE)
        assert canvas[MARGIN + 1, MARGIN + 1].tolist() == [0, 0, 0]

    def test_color_cells_keep_channel_order(
        self,
        make_collage_spec: SpecFactory,
    ) -> None:
        """8UC3 pixels are copied through as given."""
        img = np.zeros((CELL, CELL, 3), dtype=np.uint8)
        img[:, :] = (10, 20, 30)
        canvas = cl_layouts.render_collage([img], [], make_collage_spec())
        assert canvas is not None
        assert canvas[MARGIN + 1, MARGIN + 1].tolist() == [10, 20, 30]

    def test_cells_are_resized(self, make_collage_spec: SpecFactory) -> None:
        """Other sizes are resized to the first image's cell size."""
        images = [_gray(255), _gray(255, rows=30, cols=60)]
        canvas = cl_layouts.render_collage(images, [], make_collage_spec())
        assert canvas is not None
        assert canvas.shape[0] == CELL + 2 * MARGIN
        cell = canvas[MARGIN:MARGIN + CELL, 2 * MARGIN + CELL:2 * (MARGIN + CELL)]
        assert (cell == 255).all()

    def test_captions_drawn_in_band(
        self,
        make_collage_spec: SpecFactory,
    ) -> None:
        """Non-empty captions ink the band below their cell only."""
        spec = make_collage_spec(do_captions=True)
        images = [_gray(0), _gray(0), _gray(0)]
        canvas = cl_layouts.render_collage(images, ["Alpha", "", "B"], spec)
        assert canvas is not None
        assert canvas.shape[0] > 2 * CELL + 3 * MARGIN

        band_top = MARGIN + CELL
        band_bottom = band_top + (canvas.shape[0] - 2 * CELL - 3 * MARGIN) // 2
        left_band = canvas[band_top:band_bottom, MARGIN:MARGIN + CELL]
        right_band = canvas[band_top:band_bottom, 2 * MARGIN + CELL:210 - MARGIN]
        assert left_band.any()
        assert not right_band.any()

    def test_captions_ignored_when_disabled(
        self,
        make_collage_spec: SpecFactory,
    ) -> None:
        """With captions off no band is reserved and nothing is drawn."""
        canvas = cl_layouts.render_collage(
            [_gray(0)], ["Alpha"], make_collage_spec())
        assert canvas is not None
        assert canvas.shape[0] == CELL + 2 * MARGIN
        assert not canvas.any()

    def test_caption_count_mismatch(
        self,
        make_collage_spec: SpecFactory,
    ) -> None:
        """Captions must be empty or one per image."""
        with pytest.raises(ValueError, match="captions"):
            cl_layouts.render_collage(
                [_gray(0), _gray(0)], ["only one"], make_collage_spec())

    def test_float_image_rejected(
        self,
        make_collage_spec: SpecFactory,
    ) -> None:
        """Only 8UC1 and 8UC3 images can be rendered."""
        img = np.zeros((CELL, CELL), dtype=np.float32)
        with pytest.raises(UnsupportedPixelTypeError, match="render_collage"):
            cl_layouts.render_collage([img], [], make_collage_spec())


class TestCaptionPrimitives:
    """Test caption clipping and colors."""

    def test_fit_caption_clips_from_end(self) -> None:
        """Long captions are cut from the end until they fit."""
        font = cl_core.get_font(20)
        text = "W" * 200
        clipped = cl_core.fit_caption(text, 50, font)
        assert text.startswith(clipped)
        assert 1 <= len(clipped) < len(text)
        assert cl_core.measure_text(clipped, font)[0] < 50

    def test_fit_caption_keeps_first_character(self) -> None:
        """Clipping never removes the first character."""
        font = cl_core.get_font(20)
        assert cl_core.fit_caption("Wide", 1, font) == "W"

    def test_fit_caption_short_text_unchanged(self) -> None:
        """Captions that fit are returned as is."""
        font = cl_core.get_font(20)
        assert cl_core.fit_caption("Hi", 1000, font) == "Hi"

    def test_caption_color_contrasts_background(self) -> None:
        """White text on black, black text on white."""
        assert cl_core.caption_color(black_background=True) == COLOR_WHITE
        assert cl_core.caption_color(black_background=False) == COLOR_BLACK

    @pytest.mark.parametrize(
        ("value", "expected"),
        [(255, COLOR_BLACK), (0, COLOR_WHITE), (200, COLOR_BLACK)],
    )
    def test_compute_text_color(
        self,
        value: int,
        expected: tuple[int, int, int],
    ) -> None:
        """Text color maximizes contrast with the sampled pixel."""
        color = np.full((3, 3, 3), value, dtype=np.uint8)
        assert cl_core.compute_text_color(color, (1, 1)) == expected
        gray = np.full((3, 3), value, dtype=np.uint8)
        assert cl_core.compute_text_color(gray, (1, 1)) == expected

    def test_compute_text_color_rejects_float(self) -> None:
        """Only 8U and 8UC3 images are sampled."""
        img = np.zeros((2, 2), dtype=np.float32)
        with pytest.raises(UnsupportedPixelTypeError):
            cl_core.compute_text_color(img, (0, 0))
