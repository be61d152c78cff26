"""
Unit Tests for Page Sizes

Tests physical page sizes, proportions, preview dimensions and the
preview -> physical unit mapping.
"""

import pytest

from album_layout.common.page_sizes import (
    PREVIEW_LONG_EDGE_PX,
    PageProportion,
    page_dimensions_mm,
    page_proportion,
    page_size_mm,
    preview_dimensions,
    preview_to_mm,
    to_page_units,
)
from album_layout.core.models import ImageRef, PositionedImage, Rect
from album_layout.engine.config import LayoutSettings


class TestPageSizes:
    """Tests for physical sizes and proportions."""

    def test_page_size_mm_when_a4_then_297_by_210(self):
        """Test A4 dimensions in millimetres."""
        long_mm, short_mm = page_size_mm("a4")

        assert long_mm == pytest.approx(297, abs=0.5)
        assert short_mm == pytest.approx(210, abs=0.5)

    def test_page_size_mm_when_uppercase_then_accepted(self):
        """Test page size names are case-insensitive."""
        assert page_size_mm("Letter") == page_size_mm("letter")

    def test_page_size_mm_when_unknown_then_raises(self):
        """Test unsupported page sizes raise."""
        with pytest.raises(ValueError, match="Unsupported page size"):
            page_size_mm("a3")

    @pytest.mark.parametrize(
        "size, expected",
        [
            ("a4", PageProportion.STANDARD),
            ("letter", PageProportion.COMPACT),
            ("legal", PageProportion.ELONGATED),
        ],
    )
    def test_page_proportion_maps_sizes_to_families(self, size, expected):
        """Test page sizes map to proportion families."""
        assert page_proportion(size) == expected

    def test_page_dimensions_when_portrait_then_swapped(self):
        """Test portrait swaps width and height."""
        landscape = page_dimensions_mm("a4", "landscape")
        portrait = page_dimensions_mm("a4", "portrait")

        assert portrait == (landscape[1], landscape[0])


class TestPreviewDimensions:
    """Tests for the preview canvas size."""

    def test_preview_when_landscape_then_long_edge_is_width(self):
        """Test the landscape preview is 480 px wide."""
        width, height = preview_dimensions(LayoutSettings())

        assert width == PREVIEW_LONG_EDGE_PX == 480
        assert height == pytest.approx(480 * 210 / 297, rel=1e-3)

    def test_preview_when_portrait_then_long_edge_is_height(self):
        """Test the portrait preview is 480 px tall."""
        width, height = preview_dimensions(LayoutSettings(orientation="portrait"))

        assert height == 480
        assert width < height

    def test_preview_when_legal_then_shorter_than_a4(self):
        """Test Legal previews are narrower in proportion."""
        _, a4_height = preview_dimensions(LayoutSettings(page_size="a4"))
        _, legal_height = preview_dimensions(LayoutSettings(page_size="legal"))

        assert legal_height < a4_height


class TestPhysicalMapping:
    """Tests for preview -> physical unit conversion."""

    def test_preview_to_mm_when_full_width_then_page_width(self):
        """Test the preview width maps to the page width."""
        settings = LayoutSettings()

        assert preview_to_mm(480, settings) == pytest.approx(297, abs=0.5)

    def test_to_page_units_when_full_page_then_page_points(self):
        """Test a full-page rectangle maps to page points."""
        # Arrange
        settings = LayoutSettings()
        width, height = preview_dimensions(settings)
        placed = [PositionedImage(ImageRef("a"), Rect(0, 0, width, height), 0, 0)]

        # Act
        ((image_id, x, y, w, h),) = to_page_units(placed, settings)

        # Assert
        assert image_id == "a"
        assert (x, y) == (0, 0)
        assert w == pytest.approx(841.89, abs=0.5)
        assert h == pytest.approx(595.27, abs=0.5)
