"""
Module: engine.controller

Purpose:
    Page-level orchestration used by hosts: dispatch on design style, and
    keep a page's arrangement when its images change.

Key Functions:
    - arrange_images(): full_cover -> FullCoverArranger, classic -> planner
    - detect_row_structure(): Images per row of an arranged page
    - place_in_rows(): Full cover placement over a given row structure
    - arrange_preserving_layout(): reapply -> detected rows -> fresh layout

Dependencies:
    - engine.arranger: Full cover arrangement
    - engine.classic: Classic arrangement
    - engine.cycling: Reapplying the current option

Used By:
    - engine.distributor: Per-page arrangement
    - Host applications
"""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence, Tuple

from album_layout.common.page_sizes import preview_dimensions
from album_layout.core.models.images import ImageLike, PositionedImage, as_image_ref

from .arranger import FullCoverArranger, UsableArea, place_rows
from .classic import arrange_classic
from .config import DesignStyle, PageDataLike, SettingsLike, as_page_data, as_settings
from .cycling import LayoutCycleController, signature_for

logger = logging.getLogger(__name__)


def arrange_images(
    images: Sequence[ImageLike],
    width: float,
    height: float,
    settings: SettingsLike = None,
    page_data: PageDataLike = None,
    arranger: Optional[FullCoverArranger] = None,
) -> List[PositionedImage]:
    """
    Arrange one page according to settings.design_style.

    Args:
        images: Images in placement order
        width: Canvas width in preview pixels
        height: Canvas height in preview pixels
        settings: Layout settings
        page_data: Per-page flags
        arranger: Full cover arranger to use (packaged catalog by default)

    Returns:
        Positioned images
    """
    settings = as_settings(settings)
    if settings.design_style == DesignStyle.CLASSIC:
        return arrange_classic(images, width, height, settings, page_data)
    arranger = arranger if arranger is not None else FullCoverArranger()
    return arranger.arrange(images, width, height, settings, page_data)


def detect_row_structure(positioned: Sequence[PositionedImage]) -> Tuple[int, ...]:
    """
    Images per row of an arranged page, in row order.

    Rows are keyed by row_index; for template placements that is the grid
    row where each region starts.
    """
    counts: dict[int, int] = {}
    for item in positioned:
        counts[item.row_index] = counts.get(item.row_index, 0) + 1
    return tuple(counts[row] for row in sorted(counts))


def place_in_rows(
    images: Sequence[ImageLike],
    rows: Sequence[int],
    width: float,
    height: float,
    settings: SettingsLike = None,
    page_data: PageDataLike = None,
) -> List[PositionedImage]:
    """
    Full cover placement of images over a fixed row structure.

    Raises:
        RenderError: If the row structure does not hold exactly len(images)
    """
    settings = as_settings(settings)
    area = UsableArea.for_page(width, height, settings, as_page_data(page_data))
    refs = [as_image_ref(item) for item in images]
    return place_rows(refs, tuple(rows), area)


def arrange_preserving_layout(
    cycler: LayoutCycleController,
    page_id: str,
    images: Sequence[ImageLike],
    settings: SettingsLike = None,
    page_data: PageDataLike = None,
    previous: Optional[Sequence[PositionedImage]] = None,
) -> List[PositionedImage]:
    """
    Re-arrange a page after its images changed, keeping its structure.

    Steps, first success wins:
    1. Reapply the page's current cycling option if it was built for this
       image count and page shape; accepted only when it produced one
       rectangle per image
    2. Reuse the row structure detected from the previous arrangement, when
       it holds the same number of images
    3. Arrange from scratch

    Args:
        cycler: Cycle controller holding the page's state
        page_id: Page identifier
        images: New image array
        settings: Layout settings
        page_data: Per-page flags
        previous: The page's arrangement before the change

    Returns:
        Positioned images
    """
    if not images:
        return []
    settings = as_settings(settings)
    width, height = preview_dimensions(settings)

    if settings.design_style == DesignStyle.CLASSIC:
        return arrange_images(images, width, height, settings, page_data, cycler.arranger)

    state = cycler.store.get(page_id)
    if state is not None and state.signature != signature_for(len(images), settings):
        # Options were built for another image count or page shape
        cycler.reset(page_id)
    elif state is not None:
        result = cycler.reapply(page_id, images, settings, page_data)
        if result is not None and result is not images and len(result) == len(images):
            logger.debug(f"Page {page_id}: reapplied current layout")
            return list(result)
        logger.debug(f"Page {page_id}: reapply unusable, trying detected rows")

    if previous:
        rows = detect_row_structure(previous)
        if sum(rows) == len(images):
            logger.debug(f"Page {page_id}: reusing row structure {list(rows)}")
            return place_in_rows(images, rows, width, height, settings, page_data)

    return arrange_images(images, width, height, settings, page_data, cycler.arranger)
