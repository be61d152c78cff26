"""
Unit Tests for Template Models

Tests the compact catalog notation and the portrait transpose.
"""

import pytest

from album_layout.core.models import GridSize, GridSpan, Template


@pytest.fixture
def large_left() -> Template:
    return Template.from_dict(
        {
            "id": "3-large-left",
            "name": "Large Left + 2 Right",
            "grid": [2, 2],
            "cells": [[0, 0, 2, 1], [0, 1, 1, 1], [1, 1, 1, 1]],
        }
    )


class TestTemplateParsing:
    """Tests for Template.from_dict / to_dict."""

    def test_from_dict_when_valid_then_placements_in_index_order(self, large_left):
        """Test parsing compact cells into ordered placements."""
        assert large_left.image_count == 3
        assert large_left.grid == GridSize(2, 2)
        assert [p.image_index for p in large_left.placements] == [0, 1, 2]
        assert large_left.placements[0].region == GridSpan(0, 2, 0, 1)

    def test_to_dict_when_parsed_then_same_notation(self, large_left):
        """Test serializing back to compact cells."""
        assert large_left.to_dict()["cells"] == [[0, 0, 2, 1], [0, 1, 1, 1], [1, 1, 1, 1]]

    def test_from_dict_when_region_outside_grid_then_raises(self):
        """Test regions must fit inside the grid."""
        with pytest.raises(ValueError, match="exceeds grid"):
            Template.from_dict({"id": "bad", "name": "Bad", "grid": [1, 2], "cells": [[0, 1, 1, 2]]})

    def test_from_dict_when_name_missing_then_id_used(self):
        """Test the id doubles as the name."""
        template = Template.from_dict({"id": "t", "grid": [1, 1], "cells": [[0, 0, 1, 1]]})

        assert template.name == "t"

    def test_description_names_grid(self, large_left):
        """Test the grid description."""
        assert large_left.description == "2×2 grid"


class TestTranspose:
    """Tests for the structural 90° transpose."""

    def test_transpose_swaps_grid_and_regions(self):
        """Test transposing swaps rows and columns."""
        # Arrange
        template = Template.from_spans(
            "2-70-30", "70/30 Split", 1, 10, [GridSpan(0, 1, 0, 7), GridSpan(0, 1, 7, 10)]
        )

        # Act
        portrait = template.transpose()

        # Assert
        assert portrait.grid == GridSize(10, 1)
        assert portrait.regions == (GridSpan(0, 7, 0, 1), GridSpan(7, 10, 0, 1))
        assert portrait.id == template.id

    def test_transpose_when_applied_twice_then_original_restored(self, large_left):
        """Test transpose is its own inverse."""
        assert large_left.transpose().transpose() == large_left

    def test_grid_size_when_zero_then_raises(self):
        """Test grids need at least one cell."""
        with pytest.raises(ValueError, match="at least 1x1"):
            GridSize(0, 3)
