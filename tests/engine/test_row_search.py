"""
Unit Tests for Row Layout Search

Tests the bounded images-per-row enumeration.
"""

import logging

import pytest

from album_layout.engine.row_search import basic_grid_rows, generate_row_layouts


class TestGenerateRowLayouts:
    """Tests for generate_row_layouts."""

    def test_four_images_default_limits(self):
        """Test the four image layouts under default limits."""
        assert generate_row_layouts(4, 4, 2) == [(4,), (1, 3), (2, 2), (3, 1)]

    def test_every_layout_respects_bounds(self):
        """Test every row is within bounds and sums to the total."""
        layouts = generate_row_layouts(7, 3, 4)

        assert layouts
        for layout in layouts:
            assert sum(layout) == 7
            assert len(layout) <= 4
            assert all(1 <= n <= 3 for n in layout)
        assert len(layouts) == len(set(layouts))

    def test_when_total_exceeds_capacity_then_empty(self):
        """Test no layouts when images exceed capacity."""
        assert generate_row_layouts(9, 4, 2) == []

    @pytest.mark.parametrize("args", [(0, 4, 2), (3, 0, 2), (3, 4, 0)])
    def test_when_non_positive_input_then_empty(self, args):
        """Test non-positive inputs give no layouts."""
        assert generate_row_layouts(*args) == []

    def test_when_limit_reached_then_truncated_with_warning(self, caplog):
        """Test the search stops at the cap and warns."""
        with caplog.at_level(logging.WARNING):
            layouts = generate_row_layouts(8, 4, 4, limit=3)

        assert len(layouts) == 3
        assert "stopped at 3 combinations" in caplog.text

    def test_when_limit_equals_layout_count_then_no_warning(self, caplog):
        """Test an exact-limit search does not warn."""
        with caplog.at_level(logging.WARNING):
            layouts = generate_row_layouts(4, 4, 2, limit=4)

        assert layouts == [(4,), (1, 3), (2, 2), (3, 1)]
        assert "stopped" not in caplog.text

    def test_single_image(self):
        """Test a single image gives one row."""
        assert generate_row_layouts(1, 4, 2) == [(1,)]


class TestBasicGridRows:
    """Tests for basic_grid_rows."""

    @pytest.mark.parametrize(
        "total, per_row, expected",
        [(10, 4, (4, 3, 3)), (9, 4, (3, 3, 3)), (4, 4, (4,)), (0, 4, ()), (3, 0, (1, 1, 1))],
    )
    def test_basic_grid_rows(self, total, per_row, expected):
        """Test balanced fallback rows."""
        assert basic_grid_rows(total, per_row) == expected
