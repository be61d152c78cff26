"""
Module: engine.arranger

Purpose:
    Full cover arrangement. Chooses between catalog templates, generated
    templates and row grids, and produces rectangles that tile the usable
    area exactly.

Key Classes:
    - FullCoverArranger: Strategy dispatch and option rendering
    - RenderError: A stored option cannot be rendered for an image set

Key Functions:
    - arrange(): Convenience wrapper using the packaged catalog
    - place_rows(): Row-major placement of an images-per-row layout

Algorithm:
    Usable area = canvas minus a symmetric page border inset.
    - HARDCODED (default): pinned catalog template if found, else the first
      catalog template; no template -> GRID
    - GRID: forced row layout if consistent, else the best scoring bounded
      row combination, else a basic balanced grid
    - FLEXIBLE: durable template id, then raw generation index, else the
      best scoring generated template; no template -> GRID
    Empty input gives no rectangles; one image always fills the usable area.

Dependencies:
    - engine.catalog, engine.generator, engine.scoring, engine.row_search

Used By:
    - engine.controller: design_style == full_cover
    - engine.cycling: render_option()
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence

from album_layout.core.models.images import (
    GridSpan,
    ImageLike,
    ImageRef,
    PositionedImage,
    Rect,
    as_image_ref,
)
from album_layout.core.models.options import (
    FlexibleOption,
    GridOption,
    HardcodedOption,
    LayoutOption,
)
from album_layout.core.models.templates import Template

from .catalog import LayoutCatalog, default_catalog, to_pixels
from .config import (
    LayoutMode,
    LayoutSettings,
    PageData,
    PageDataLike,
    SettingsLike,
    as_page_data,
    as_settings,
    border_inset,
)
from .generator import GridTemplateGenerator
from .row_search import RowLayout, basic_grid_rows, generate_row_layouts
from .scoring import pick_best, score_row_partition, score_template

logger = logging.getLogger(__name__)


class RenderError(Exception):
    """Raised when a layout option cannot be rendered for an image set."""


@dataclass(frozen=True)
class UsableArea:
    """Canvas area left after the page border inset."""

    offset: float
    width: float
    height: float

    @classmethod
    def for_page(
        cls,
        width: float,
        height: float,
        settings: LayoutSettings,
        page_data: PageData,
    ) -> UsableArea:
        inset = border_inset(settings, page_data)
        return cls(
            offset=inset,
            width=max(width - 2 * inset, 0.0),
            height=max(height - 2 * inset, 0.0),
        )


def place_rows(
    images: Sequence[ImageRef],
    rows: RowLayout,
    area: UsableArea,
) -> List[PositionedImage]:
    """
    Place images row-major over an images-per-row layout.

    Row height = area.height / len(rows); cell width = area.width / images
    in that row.

    Raises:
        RenderError: If the layout does not hold exactly len(images) images
    """
    if sum(rows) != len(images) or any(n < 1 for n in rows):
        raise RenderError(f"Row layout {list(rows)} does not fit {len(images)} image(s)")

    row_height = area.height / len(rows)
    placed: List[PositionedImage] = []
    index = 0
    for row_index, in_row in enumerate(rows):
        cell_width = area.width / in_row
        for col_index in range(in_row):
            rect = Rect(
                x=area.offset + col_index * cell_width,
                y=area.offset + row_index * row_height,
                width=cell_width,
                height=row_height,
            )
            placed.append(PositionedImage(images[index], rect, row_index, col_index))
            index += 1
    return placed


class FullCoverArranger:
    """
    Full cover arranger.

    Holds the template sources; all arrangement calls are pure with respect
    to the arranger (no per-call state is kept).

    Args:
        catalog: Template library (defaults to the packaged catalog)
        generator: Generated template source

    Example:
        >>> arranger = FullCoverArranger()
        >>> placed = arranger.arrange([ImageRef(str(i)) for i in range(4)], 480, 340)
        >>> [p.grid_span.row_start for p in placed]
        [0, 0, 1, 1]
    """

    def __init__(
        self,
        catalog: Optional[LayoutCatalog] = None,
        generator: Optional[GridTemplateGenerator] = None,
    ):
        self.catalog = catalog if catalog is not None else default_catalog()
        self.generator = generator if generator is not None else GridTemplateGenerator()

    # ─────────────────────────────────────────────────────────────────────────
    # Entry Points
    # ─────────────────────────────────────────────────────────────────────────

    def arrange(
        self,
        images: Sequence[ImageLike],
        width: float,
        height: float,
        settings: SettingsLike = None,
        page_data: PageDataLike = None,
    ) -> List[PositionedImage]:
        """
        Arrange images to cover the usable area.

        Args:
            images: Images in placement order
            width: Canvas width in preview pixels
            height: Canvas height in preview pixels
            settings: Layout settings (mode and override hooks)
            page_data: Per-page flags (page border)

        Returns:
            One PositionedImage per image whose areas sum to the usable area
        """
        if not images:
            return []
        settings = as_settings(settings)
        refs = [as_image_ref(item) for item in images]
        area = UsableArea.for_page(width, height, settings, as_page_data(page_data))

        if len(refs) == 1:
            return [self._whole_area(refs[0], area)]

        mode = settings.layout_mode
        if mode == LayoutMode.FLEXIBLE:
            placed = self._arrange_flexible(refs, area, settings)
            if placed is not None:
                return placed
            logger.debug(f"No flexible template for {len(refs)} images; using grid")
        elif mode == LayoutMode.HARDCODED:
            placed = self._arrange_hardcoded(refs, area, settings)
            if placed is not None:
                return placed
            logger.debug(f"No catalog template for {len(refs)} images; using grid")

        return self._arrange_grid(refs, area, settings)

    def render_option(
        self,
        option: LayoutOption,
        images: Sequence[ImageLike],
        width: float,
        height: float,
        settings: SettingsLike = None,
        page_data: PageDataLike = None,
    ) -> List[PositionedImage]:
        """
        Render one stored layout option for an image set.

        Template options skip slots beyond the supplied images. A placeholder
        GridOption renders the scored grid.

        Raises:
            RenderError: If a row layout does not match the image count, or a
                template has fewer slots than images
        """
        if not images:
            return []
        settings = as_settings(settings)
        refs = [as_image_ref(item) for item in images]
        area = UsableArea.for_page(width, height, settings, as_page_data(page_data))

        if isinstance(option, GridOption):
            if option.is_placeholder:
                return self._arrange_grid(refs, area, settings.without_overrides())
            return place_rows(refs, option.rows, area)
        if isinstance(option, (HardcodedOption, FlexibleOption)):
            if len(refs) > option.template.image_count:
                raise RenderError(
                    f"Template {option.template.id} has {option.template.image_count} slots "
                    f"for {len(refs)} images"
                )
            return to_pixels(option.template, refs, area.width, area.height, area.offset)
        raise RenderError(f"Unknown layout option: {option!r}")

    # ─────────────────────────────────────────────────────────────────────────
    # Strategies
    # ─────────────────────────────────────────────────────────────────────────

    def _whole_area(self, image: ImageRef, area: UsableArea) -> PositionedImage:
        return PositionedImage(
            image=image,
            rect=Rect(area.offset, area.offset, area.width, area.height),
            row_index=0,
            col_index=0,
            grid_span=GridSpan(0, 1, 0, 1),
        )

    def _arrange_hardcoded(
        self,
        images: List[ImageRef],
        area: UsableArea,
        settings: LayoutSettings,
    ) -> Optional[List[PositionedImage]]:
        templates = self.catalog.get_templates(settings.proportion, len(images), settings.is_portrait)
        if not templates:
            return None

        template = templates[0]
        if settings.hardcoded_layout_id:
            pinned = next((t for t in templates if t.id == settings.hardcoded_layout_id), None)
            if pinned is None:
                logger.debug(
                    f"Pinned layout {settings.hardcoded_layout_id} not available for "
                    f"{len(images)} images; using {template.id}"
                )
            else:
                template = pinned

        logger.debug(f"Hardcoded layout {template.id} for {len(images)} images")
        return to_pixels(template, images, area.width, area.height, area.offset)

    def _arrange_flexible(
        self,
        images: List[ImageRef],
        area: UsableArea,
        settings: LayoutSettings,
    ) -> Optional[List[PositionedImage]]:
        candidates = self.generator.generate(len(images), settings.is_portrait)
        if not candidates:
            return None

        template = self.select_flexible(candidates, images, area, settings)
        logger.debug(f"Flexible layout {template.id} for {len(images)} images")
        return to_pixels(template, images, area.width, area.height, area.offset)

    def select_flexible(
        self,
        candidates: List[Template],
        images: Sequence[ImageRef],
        area: UsableArea,
        settings: LayoutSettings,
    ) -> Template:
        """
        Pick a generated template.

        Order of precedence: durable id, raw generation index, best score.
        """
        if settings.flexible_layout_id:
            for template in candidates:
                if template.id == settings.flexible_layout_id:
                    return template
            logger.debug(f"Flexible layout id {settings.flexible_layout_id} not generated")

        index = settings.forced_flexible_layout
        if index is not None:
            if index < len(candidates):
                return candidates[index]
            logger.debug(f"Flexible index {index} out of range ({len(candidates)} candidates)")

        best = pick_best(
            candidates,
            lambda t: score_template(t, images, area.width, area.height),
        )
        return best[0]

    def _arrange_grid(
        self,
        images: List[ImageRef],
        area: UsableArea,
        settings: LayoutSettings,
    ) -> List[PositionedImage]:
        rows = self.choose_rows(images, area, settings)
        logger.debug(f"Grid layout {list(rows)} for {len(images)} images")
        return place_rows(images, rows, area)

    def choose_rows(
        self,
        images: Sequence[ImageRef],
        area: UsableArea,
        settings: LayoutSettings,
    ) -> RowLayout:
        """
        Images-per-row layout for GRID mode.

        A forced layout is used only when it sums to the image count and no
        row exceeds max_images_per_row; otherwise it is logged and ignored.
        """
        count = len(images)
        forced = settings.forced_layout
        if forced is not None:
            if sum(forced) == count and max(forced) <= settings.max_images_per_row:
                return forced
            logger.warning(
                f"Ignoring forced layout {list(forced)} for {count} images "
                f"(max {settings.max_images_per_row} per row)"
            )

        combinations = generate_row_layouts(
            count, settings.max_images_per_row, settings.max_number_of_rows
        )
        if not combinations:
            return basic_grid_rows(count, settings.max_images_per_row)

        best = pick_best(
            combinations,
            lambda rows: score_row_partition(rows, images, area.width, area.height),
        )
        return best[0]


def arrange(
    images: Sequence[ImageLike],
    width: float,
    height: float,
    settings: SettingsLike = None,
    page_data: PageDataLike = None,
) -> List[PositionedImage]:
    """Arrange with the packaged catalog (see FullCoverArranger.arrange)."""
    return FullCoverArranger().arrange(images, width, height, settings, page_data)
