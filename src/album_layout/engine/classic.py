"""
Module: engine.classic

Purpose:
    Classic (margined, non-full-cover) arrangement. Images keep their own
    aspect ratio and are packed into centered rows with gaps.

Key Functions:
    - normalize_row_height(): Uniform height for a single row of images
    - plan_fixed_grid(): Fixed rows × per_row grid at a global row height
    - arrange_classic(): Entry point used by the design-style dispatcher

Key Classes:
    - PlannedImage, PlannedRow, ClassicPlan: Intermediate plan (sizes only)

Algorithm:
    Small sets (at most max_images_per_row) form one row. The row height
    search starts at 80% of the available height and steps down 10 px at a
    time until the row fits the available width; if the search bottoms out
    the row is scaled down proportionally. Larger sets use a fixed
    max_number_of_rows × max_images_per_row grid normalized to the global
    maximum image height, shrinking any row that is too wide.

Dependencies:
    - common.thresholds: Search ratios and step
    - engine.config: Margins, gaps and grid limits

Used By:
    - engine.controller: design_style == classic
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Sequence, Tuple

from album_layout.common.thresholds import CLASSIC_THRESHOLDS
from album_layout.core.models.images import ImageLike, ImageRef, PositionedImage, Rect, as_image_ref

from .config import PageDataLike, SettingsLike, as_page_data, as_settings, border_inset

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlannedImage:
    """Image with a planned size (no position yet)."""

    image: ImageRef
    width: float
    height: float


@dataclass(frozen=True)
class PlannedRow:
    """A row of planned images; width includes the gaps."""

    images: Tuple[PlannedImage, ...]
    width: float
    height: float

    @property
    def is_empty(self) -> bool:
        return not self.images


@dataclass(frozen=True)
class ClassicPlan:
    """
    Result of plan_fixed_grid.

    Attributes:
        rows: Planned rows (empty rows kept)
        total_height: Sum of row heights plus gaps between rows
        fits: total_height fits the available height
        placed_count: Images placed in the plan
    """

    rows: Tuple[PlannedRow, ...]
    total_height: float
    fits: bool
    placed_count: int


def _aspect(image: ImageRef) -> float:
    # Unknown sizes are planned as squares
    return image.aspect_ratio or 1.0


def _row_at_height(images: Sequence[ImageRef], height: float, gap: float) -> PlannedRow:
    planned = tuple(PlannedImage(img, height * _aspect(img), height) for img in images)
    width = sum(p.width for p in planned) + gap * max(len(planned) - 1, 0)
    return PlannedRow(planned, width, height if planned else 0.0)


def _scaled(row: PlannedRow, factor: float, gap: float) -> PlannedRow:
    planned = tuple(PlannedImage(p.image, p.width * factor, p.height * factor) for p in row.images)
    width = sum(p.width for p in planned) + gap * max(len(planned) - 1, 0)
    return PlannedRow(planned, width, row.height * factor)


def normalize_row_height(
    images: Sequence[ImageRef],
    available_width: float,
    available_height: float,
    gap: float,
) -> PlannedRow:
    """
    Give a row of images one uniform height that fits the available width.

    Args:
        images: Images in row order
        available_width: Width inside the margins
        available_height: Height inside the margins
        gap: Horizontal gap between images

    Returns:
        PlannedRow (empty row for empty input)
    """
    if not images:
        return PlannedRow((), 0.0, 0.0)

    start = available_height * CLASSIC_THRESHOLDS.start_height_ratio
    floor = start * CLASSIC_THRESHOLDS.min_height_ratio
    height = start
    while height > floor:
        row = _row_at_height(images, height, gap)
        if row.width <= available_width:
            return row
        height -= CLASSIC_THRESHOLDS.height_step_px

    # Nothing in the stepped range fits: scale proportionally
    total_aspect = sum(_aspect(img) for img in images)
    free_width = max(available_width - gap * (len(images) - 1), 0.0)
    height = min(start, free_width / total_aspect)
    logger.debug(f"Row of {len(images)} scaled to height {height:.1f}")
    return _row_at_height(images, height, gap)


def plan_fixed_grid(
    images: Sequence[ImageRef],
    rows: int,
    per_row: int,
    available_width: float,
    available_height: float,
    gap: float,
) -> ClassicPlan:
    """
    Plan a fixed rows × per_row grid.

    Every image is first fitted into an equal grid cell; the largest of
    those heights becomes the global row height. Each row is normalized to
    it and shrunk proportionally if it is wider than the available width.
    Rows without images are kept (zero size) so the grid structure is
    stable.
    """
    placed = list(images[: rows * per_row])
    cell_w = max((available_width - gap * (per_row - 1)) / per_row, 0.0)
    cell_h = max((available_height - gap * (rows - 1)) / rows, 0.0)

    def fitted_height(image: ImageRef) -> float:
        aspect = _aspect(image)
        if cell_h <= 0:
            return 0.0
        if aspect >= cell_w / cell_h:
            return cell_w / aspect
        return cell_h

    global_height = max((fitted_height(img) for img in placed), default=0.0)

    planned_rows: List[PlannedRow] = []
    for row_index in range(rows):
        row_images = placed[row_index * per_row:(row_index + 1) * per_row]
        if not row_images:
            planned_rows.append(PlannedRow((), 0.0, 0.0))
            continue
        row = _row_at_height(row_images, global_height, gap)
        gaps = gap * (len(row_images) - 1)
        if row.width > available_width and row.width > gaps:
            # Gaps keep their size; only the images shrink
            row = _scaled(row, max(available_width - gaps, 0.0) / (row.width - gaps), gap)
        planned_rows.append(row)

    total_height = sum(r.height for r in planned_rows) + gap * max(rows - 1, 0)
    return ClassicPlan(
        rows=tuple(planned_rows),
        total_height=total_height,
        fits=total_height <= available_height,
        placed_count=len(placed),
    )


def _place_row(
    row: PlannedRow,
    row_index: int,
    left: float,
    top: float,
    available_width: float,
    gap: float,
) -> List[PositionedImage]:
    x = left + (available_width - row.width) / 2
    placed: List[PositionedImage] = []
    for col_index, planned in enumerate(row.images):
        if col_index > 0:
            x += gap
        placed.append(
            PositionedImage(
                image=planned.image,
                rect=Rect(x, top, planned.width, planned.height),
                row_index=row_index,
                col_index=col_index,
                full_cover=False,
            )
        )
        x += planned.width
    return placed


def arrange_classic(
    images: Sequence[ImageLike],
    width: float,
    height: float,
    settings: SettingsLike = None,
    page_data: PageDataLike = None,
) -> List[PositionedImage]:
    """
    Arrange images in centered rows with margins and gaps.

    Args:
        images: Images to place
        width: Canvas width in preview pixels
        height: Canvas height in preview pixels
        settings: Layout settings (page_margin, image_gap, grid limits)
        page_data: Per-page flags (page border)

    Returns:
        Positioned images (full_cover False). Images beyond the page
        capacity are left out.
    """
    if not images:
        return []
    settings = as_settings(settings)
    page_data = as_page_data(page_data)

    refs = [as_image_ref(item) for item in images]
    if len(refs) > settings.capacity:
        logger.warning(
            f"Classic layout holds {settings.capacity} images; "
            f"{len(refs) - settings.capacity} left out"
        )

    margin = settings.page_margin + border_inset(settings, page_data)
    gap = settings.image_gap
    available_width = max(width - 2 * margin, 0.0)
    available_height = max(height - 2 * margin, 0.0)

    if len(refs) <= settings.max_images_per_row:
        row = normalize_row_height(refs, available_width, available_height, gap)
        top = margin + (available_height - row.height) / 2
        return _place_row(row, 0, margin, top, available_width, gap)

    plan = plan_fixed_grid(
        refs,
        settings.max_number_of_rows,
        settings.max_images_per_row,
        available_width,
        available_height,
        gap,
    )
    if not plan.fits:
        logger.debug(f"Classic grid overflows: {plan.total_height:.1f} > {available_height:.1f}")

    placed: List[PositionedImage] = []
    y = margin + (available_height - plan.total_height) / 2
    for row_index, row in enumerate(plan.rows):
        placed.extend(_place_row(row, row_index, margin, y, available_width, gap))
        y += row.height + gap
    return placed
