"""
Unit Tests for Layout Cycling

Tests the per-page state machine: lazy initialization, circular cycling,
reapplication to changed image arrays, pinning and reset.
"""

import logging

import pytest

from album_layout.common.page_sizes import preview_dimensions
from album_layout.core.models import FlexibleOption, GridOption, HardcodedOption, PageLayoutState
from album_layout.engine.arranger import FullCoverArranger
from album_layout.engine.catalog import LayoutCatalog, default_catalog
from album_layout.engine.config import LayoutMode, LayoutSettings
from album_layout.engine.controller import detect_row_structure
from album_layout.engine.cycling import LayoutCycleController, LayoutStateStore, signature_for

GRID = LayoutSettings(layout_mode=LayoutMode.GRID)


@pytest.fixture
def cycler() -> LayoutCycleController:
    return LayoutCycleController()


def _rect_multiset(placed):
    return sorted(p.rect.as_tuple() for p in placed)


class TestLayoutStateStore:
    """Tests for the explicit state registry."""

    def test_get_set_delete(self):
        """Test storing and removing page state."""
        store = LayoutStateStore()
        state = PageLayoutState(options=(GridOption(),))

        store.set("p1", state)

        assert store.get("p1") is state
        assert "p1" in store and len(store) == 1
        store.delete("p1")
        store.delete("p1")
        assert store.get("p1") is None

    def test_stores_are_isolated(self, make_images, settings):
        """Test separate stores do not share state."""
        first = LayoutCycleController(LayoutStateStore())
        second = LayoutCycleController(LayoutStateStore())

        first.next("p1", make_images(4), settings)

        assert first.current_info("p1") is not None
        assert second.current_info("p1") is None


class TestBuildOptions:
    """Tests for option lists."""

    def test_hardcoded_options_follow_catalog_order(self, cycler, settings):
        """Test catalog options keep catalog order."""
        options = cycler.build_options(4, settings)

        assert all(isinstance(o, HardcodedOption) for o in options)
        assert [o.template.id for o in options] == [
            t.id for t in default_catalog().get_templates(settings.proportion, 4)
        ]

    def test_grid_options_are_row_combinations(self, cycler):
        """Test grid options are the bounded row layouts."""
        options = cycler.build_options(4, GRID)

        assert [o.rows for o in options] == [(4,), (1, 3), (2, 2), (3, 1)]

    def test_when_nothing_available_then_placeholder(self, settings):
        """Test a placeholder option when nothing is available."""
        cycler = LayoutCycleController(arranger=FullCoverArranger(catalog=LayoutCatalog.empty()))

        assert cycler.build_options(3, settings) == (GridOption(None),)


class TestCycling:
    """Tests for next/previous."""

    def test_next_starts_at_second_option(self, cycler, make_images, settings):
        """Test the first next moves past the default."""
        placed = cycler.next("p1", make_images(4), settings)

        info = cycler.current_info("p1")
        assert info.current_index == 1
        assert info.option.template.id == "4-strip"
        assert detect_row_structure(placed) == (4,)

    def test_next_total_times_wraps_to_start(self, cycler, make_images, settings):
        """Test cycling through every option returns to the start."""
        # Arrange
        images = make_images(4)
        cycler.ensure_state("p1", images, settings)
        total = cycler.current_info("p1").total

        # Act
        for _ in range(total):
            cycler.next("p1", images, settings)

        # Assert
        assert cycler.current_info("p1").current_index == 0

    def test_previous_after_next_restores_index(self, cycler, make_images, settings):
        """Test previous undoes next."""
        images = make_images(5)
        cycler.next("p1", images, settings)
        before = cycler.current_info("p1").current_index

        cycler.next("p1", images, settings)
        cycler.previous("p1", images, settings)

        assert cycler.current_info("p1").current_index == before

    def test_previous_from_start_wraps_to_last(self, cycler, make_images, settings):
        """Test previous from the start wraps to the last option."""
        images = make_images(3)

        cycler.previous("p1", images, settings)

        info = cycler.current_info("p1")
        assert info.current_index == info.total - 1

    def test_when_image_count_changes_then_state_rebuilt(self, cycler, make_images, settings):
        """Test a new image count rebuilds the state."""
        cycler.next("p1", make_images(4), settings)

        cycler.next("p1", make_images(3), settings)

        info = cycler.current_info("p1")
        assert info.total == len(default_catalog().get_templates(settings.proportion, 3))
        assert info.current_index == 1

    def test_when_orientation_changes_then_state_rebuilt(self, cycler, make_images, settings):
        """Test a new orientation rebuilds the state."""
        images = make_images(4)
        cycler.next("p1", images, settings)
        cycler.next("p1", images, settings)

        cycler.next("p1", images, settings.with_overrides(orientation="portrait"))

        assert cycler.current_info("p1").current_index == 1

    def test_when_no_images_then_empty_and_no_state(self, cycler, settings):
        """Test no images leave no state behind."""
        assert cycler.next("p1", [], settings) == []
        assert cycler.current_info("p1") is None


class TestReapply:
    """Tests for reapply."""

    def test_reordered_images_keep_rectangles(self, cycler, make_images, settings):
        """Test reordered images reuse the same rectangles."""
        # Arrange
        images = make_images(5, size=(1600, 1200))
        cycler.next("p1", images, settings)
        original = cycler.next("p1", images, settings)
        reordered = list(reversed(images))

        # Act
        reapplied = cycler.reapply("p1", reordered, settings)

        # Assert
        assert _rect_multiset(reapplied) == _rect_multiset(original)
        assert [p.image_id for p in reapplied] == [img.id for img in reordered]

    def test_unknown_page_returns_input_unchanged(self, cycler, make_images, settings):
        """Test pages without state return the input as is."""
        images = make_images(3)

        assert cycler.reapply("unknown-page", images, settings) is images

    def test_when_render_fails_then_none(self, cycler, make_images, caplog):
        """Test a failed render returns None with a warning."""
        cycler.next("p1", make_images(4), GRID)

        with caplog.at_level(logging.WARNING):
            result = cycler.reapply("p1", make_images(3), GRID)

        assert result is None
        assert "Could not reapply layout" in caplog.text

    def test_when_more_images_than_template_slots_then_none(self, cycler, make_images, settings, caplog):
        """Test an extra image fails the reapply instead of vanishing."""
        # Arrange
        cycler.ensure_state("p1", make_images(4), settings)

        # Act
        with caplog.at_level(logging.WARNING):
            result = cycler.reapply("p1", make_images(5), settings)

        # Assert
        assert result is None
        assert "4 slots for 5 images" in caplog.text

    def test_reapply_does_not_move_index(self, cycler, make_images, settings):
        """Test reapplying keeps the current index."""
        images = make_images(4)
        cycler.next("p1", images, settings)

        cycler.reapply("p1", images, settings)

        assert cycler.current_info("p1").current_index == 1


class TestPinSelectReset:
    """Tests for pin, select and reset."""

    def test_pin_anchors_single_template(self, cycler, make_images, settings):
        """Test pinning leaves exactly one option."""
        # Arrange
        template = default_catalog().find(settings.proportion, 4, False, "4-large-left")
        images = make_images(4)

        # Act
        cycler.pin("p1", template, settings)
        placed = cycler.next("p1", images, settings)

        # Assert
        info = cycler.current_info("p1")
        assert info.total == 1
        assert info.option.template.id == "4-large-left"
        assert placed[0].rect.height == pytest.approx(preview_dimensions(settings)[1])
        assert _rect_multiset(cycler.reapply("p1", images, settings)) == _rect_multiset(placed)

    def test_pin_signature_uses_image_count(self, cycler, settings):
        """Test the pinned signature uses the given count."""
        template = default_catalog().get_templates(settings.proportion, 4)[0]

        state = cycler.pin("p1", template, settings, image_count=3)

        assert state.signature == signature_for(3, settings)

    def test_select_pins_and_renders(self, cycler, make_images, settings):
        """Test selecting a catalog id pins and renders it."""
        placed = cycler.select("p1", "3-strip", make_images(3), settings)

        assert detect_row_structure(placed) == (3,)
        assert cycler.current_info("p1").total == 1

    def test_pin_generated_template_records_generation_index(self, cycler, settings):
        """Test generated templates are pinned with their generation index."""
        template = cycler.arranger.generator.find(3, False, "flex-3-featured-top")

        state = cycler.pin("p1", template, settings)

        assert state.current == FlexibleOption(template, 2)

    def test_select_when_generated_id_then_flexible_option(self, cycler, make_images, settings):
        """Test the picker falls back to generated templates."""
        placed = cycler.select("p1", "flex-3-strip", make_images(3), settings)

        option = cycler.current_info("p1").option
        generated = cycler.arranger.generator.generate(3, False)
        assert isinstance(option, FlexibleOption)
        assert generated[option.selection_index].id == "flex-3-strip"
        assert detect_row_structure(placed) == (3,)

    def test_select_when_unknown_id_then_none(self, cycler, make_images, settings, caplog):
        """Test unknown ids return None and keep no state."""
        with caplog.at_level(logging.WARNING):
            assert cycler.select("p1", "9-grid-3x3", make_images(3), settings) is None

        assert cycler.current_info("p1") is None
        assert "not available" in caplog.text

    def test_reset_discards_state(self, cycler, make_images, settings):
        """Test reset forgets the page."""
        cycler.next("p1", make_images(4), settings)

        cycler.reset("p1")

        assert cycler.current_info("p1") is None
        assert cycler.reapply("p1", [], settings) == []
