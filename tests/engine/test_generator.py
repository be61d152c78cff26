"""
Unit Tests for the Template Generator

Tests featured compositions, balanced grids and generator caching.
"""

import pytest

from album_layout.engine.generator import (
    COMPOSITIONS,
    Composition,
    GridTemplateGenerator,
    balanced_grid,
    balanced_row_counts,
    featured_template,
)
from album_layout.engine.validation import check_template


class TestFeaturedTemplate:
    """Tests for featured_template."""

    @pytest.mark.parametrize("count", sorted(COMPOSITIONS))
    def test_every_composition_tiles_its_grid(self, count):
        """Test every composition covers its grid exactly."""
        for composition in COMPOSITIONS[count]:
            template = featured_template(count, composition)

            assert template.image_count == count
            assert check_template(template).is_full_cover, template.id

    def test_featured_block_is_image_zero(self):
        """Test the featured block holds the first image."""
        composition = Composition("featured-right", "Large Right + 2", 2, 2, (0, 1, 2, 1))

        template = featured_template(3, composition)

        assert template.id == "flex-3-featured-right"
        assert template.placements[0].region.row_span == 2
        # Remaining cells filled row-major
        assert [(p.region.row_start, p.region.col_start) for p in template.placements[1:]] == [
            (0, 0),
            (1, 0),
        ]

    def test_when_count_mismatch_then_raises(self):
        """Test a composition must match the image count."""
        with pytest.raises(ValueError, match="holds 4 images, not 3"):
            featured_template(3, Composition("grid", "2x2 Grid", 2, 2))


class TestBalancedGrid:
    """Tests for balanced_row_counts / balanced_grid."""

    @pytest.mark.parametrize(
        "count, rows, expected",
        [(7, 3, (3, 2, 2)), (10, 3, (4, 3, 3)), (8, 2, (4, 4)), (3, 0, ())],
    )
    def test_balanced_row_counts(self, count, rows, expected):
        """Test rows differ by at most one image."""
        assert balanced_row_counts(count, rows) == expected

    @pytest.mark.parametrize("count", range(7, 21))
    def test_balanced_grid_when_large_count_then_full_cover(self, count):
        """Test balanced grids cover the page."""
        template = balanced_grid(count)

        assert template.image_count == count
        assert check_template(template).is_full_cover

    def test_balanced_grid_id_names_row_shape(self):
        """Test the grid id names its rows."""
        template = balanced_grid(7)

        assert template.id == "flex-7-grid-3x2x2"
        assert (template.grid.rows, template.grid.cols) == (3, 6)


class TestGridTemplateGenerator:
    """Tests for GridTemplateGenerator."""

    def test_generate_when_single_image_then_full_page(self):
        """Test one image fills the page."""
        templates = GridTemplateGenerator().generate(1)

        assert [t.id for t in templates] == ["flex-1-full"]

    def test_generate_when_zero_then_empty(self):
        """Test no images give no templates."""
        assert GridTemplateGenerator().generate(0) == []

    def test_generate_order_is_stable(self):
        """Test generation order is repeatable."""
        first = [t.id for t in GridTemplateGenerator().generate(4)]
        second = [t.id for t in GridTemplateGenerator().generate(4)]

        assert first == second
        assert first[0] == "flex-4-grid"

    def test_generate_when_above_featured_limit_then_balanced_grid(self):
        """Test large counts use a balanced grid."""
        templates = GridTemplateGenerator(max_featured_count=4).generate(5)

        assert [t.id for t in templates] == ["flex-5-grid-3x2"]

    def test_generate_when_portrait_then_transposed(self):
        """Test portrait templates are transposed."""
        generator = GridTemplateGenerator()

        landscape = generator.generate(2)[0]
        portrait = generator.generate(2, is_portrait=True)[0]

        assert portrait == landscape.transpose()

    def test_generate_returns_copy_of_cache(self):
        """Test callers cannot change the cache."""
        generator = GridTemplateGenerator()

        generator.generate(3).clear()

        assert len(generator.generate(3)) == len(COMPOSITIONS[3])

    def test_find_by_id(self):
        """Test lookup by template id."""
        generator = GridTemplateGenerator()

        assert generator.find(5, False, "flex-5-strip").image_count == 5
        assert generator.find(5, False, "flex-4-grid") is None
