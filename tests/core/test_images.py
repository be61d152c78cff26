"""
Unit Tests for Image Models

Tests ImageRef, Rect, GridSpan and PositionedImage.
"""

import pytest

from album_layout.core.models import GridSpan, ImageRef, PositionedImage, Rect, as_image_ref


class TestImageRef:
    """Tests for ImageRef."""

    def test_aspect_ratio_when_dimensions_known_then_width_over_height(self):
        """Test aspect ratio is width over height."""
        assert ImageRef("a", 1600, 800).aspect_ratio == 2.0

    @pytest.mark.parametrize("width, height", [(None, None), (100, None), (0, 100), (-5, 10)])
    def test_aspect_ratio_when_dimensions_missing_or_invalid_then_none(self, width, height):
        """Test unknown or invalid sizes have no aspect ratio."""
        image = ImageRef("a", width, height)

        assert image.aspect_ratio is None
        assert not image.has_dimensions

    def test_from_dict_when_camel_case_then_parsed(self):
        """Test host keys are parsed."""
        image = ImageRef.from_dict({"id": 7, "naturalWidth": 640, "naturalHeight": 480})

        assert image == ImageRef("7", 640, 480)

    def test_from_dict_when_no_size_then_dimensions_none(self):
        """Test missing sizes stay unknown."""
        image = ImageRef.from_dict({"id": "x"})

        assert image.natural_width is None
        assert image.natural_height is None

    def test_from_path_when_png_then_reads_header_size(self, sample_image):
        """Test the size is read from the file header."""
        image = ImageRef.from_path(sample_image)

        assert image.id == "sample.png"
        assert (image.natural_width, image.natural_height) == (200, 100)

    def test_from_path_when_id_given_then_used(self, sample_image):
        """Test an explicit id replaces the path."""
        assert ImageRef.from_path(sample_image, image_id="upload-1").id == "upload-1"

    def test_to_dict_round_trips_host_keys(self):
        """Test host mapping round trip."""
        data = {"id": "a", "naturalWidth": 10, "naturalHeight": 20}

        assert ImageRef.from_dict(data).to_dict() == data


class TestRect:
    """Tests for Rect geometry."""

    def test_intersects_when_edges_touch_then_false(self):
        """Test touching rectangles do not intersect."""
        left = Rect(0, 0, 100, 100)
        right = Rect(100, 0, 100, 100)

        assert not left.intersects(right)

    def test_intersects_when_overlapping_then_true(self):
        """Test overlapping rectangles intersect."""
        assert Rect(0, 0, 100, 100).intersects(Rect(50, 50, 100, 100))

    def test_right_and_bottom(self):
        """Test right and bottom edges."""
        rect = Rect(10, 20, 30, 40)

        assert (rect.right, rect.bottom, rect.area) == (40, 60, 1200)


class TestGridSpan:
    """Tests for GridSpan."""

    def test_from_cell_uses_spans(self):
        """Test single-cell spans."""
        span = GridSpan.from_cell(1, 2, row_span=2, col_span=3)

        assert span == GridSpan(1, 3, 2, 5)
        assert (span.row_span, span.col_span, span.cell_count) == (2, 3, 6)

    def test_init_when_empty_range_then_raises(self):
        """Test spans must cover at least one cell."""
        with pytest.raises(ValueError, match="row_end must be > row_start"):
            GridSpan(1, 1, 0, 1)

    def test_init_when_negative_start_then_raises(self):
        """Test spans cannot start before the grid."""
        with pytest.raises(ValueError, match="span start"):
            GridSpan(-1, 1, 0, 1)

    def test_cells_lists_every_covered_cell(self):
        """Test every covered cell is listed."""
        assert list(GridSpan(0, 2, 0, 2).cells()) == [(0, 0), (0, 1), (1, 0), (1, 1)]

    def test_overlaps_when_adjacent_then_false(self):
        """Test adjacent spans do not overlap."""
        assert not GridSpan(0, 1, 0, 1).overlaps(GridSpan(0, 1, 1, 2))
        assert GridSpan(0, 2, 0, 2).overlaps(GridSpan(1, 2, 1, 3))

    def test_transposed_twice_restores(self):
        """Test transposing twice restores the span."""
        span = GridSpan(0, 2, 1, 4)

        assert span.transposed() == GridSpan(1, 4, 0, 2)
        assert span.transposed().transposed() == span


class TestPositionedImage:
    """Tests for PositionedImage."""

    def test_with_image_keeps_geometry(self):
        """Test swapping the image keeps the rectangle."""
        # Arrange
        original = PositionedImage(ImageRef("a"), Rect(1, 2, 3, 4), 1, 0, GridSpan(1, 2, 0, 1))

        # Act
        swapped = original.with_image(ImageRef("b"))

        # Assert
        assert swapped.image_id == "b"
        assert swapped.rect == original.rect
        assert swapped.grid_span == original.grid_span
        assert (swapped.row_index, swapped.col_index) == (1, 0)

    def test_to_dict_when_grid_span_then_host_format(self):
        """Test grid spans serialize in host format."""
        placed = PositionedImage(ImageRef("a"), Rect(0, 0, 240, 170), 0, 1, GridSpan(0, 1, 1, 2))

        data = placed.to_dict()

        assert data["previewWidth"] == 240
        assert data["fullCoverMode"] is True
        assert data["gridSpan"] == {"rowStart": 0, "rowEnd": 1, "colStart": 1, "colEnd": 2}

    def test_as_image_ref_unwraps_positioned_and_mappings(self):
        """Test image-like inputs become ImageRefs."""
        ref = ImageRef("a")
        placed = PositionedImage(ref, Rect(0, 0, 1, 1), 0, 0)

        assert as_image_ref(placed) is ref
        assert as_image_ref({"id": "a"}) == ref
        assert as_image_ref(ref) is ref
