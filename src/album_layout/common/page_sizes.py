"""
Module: common.page_sizes

Purpose:
    Physical page sizes, page proportions, and the preview canvas that the
    layout engine works in. Also maps preview pixels back to physical page
    units for the export collaborator.

Key Functions:
    - page_size_mm(): Physical (long, short) edge lengths of a page size
    - page_proportion(): Catalog proportion family for a page size
    - preview_dimensions(): Preview canvas (width, height) in pixels
    - preview_to_mm(): Convert a preview length to millimetres
    - to_page_units(): Map positioned rectangles to PDF points

Dependencies:
    - reportlab.lib.pagesizes: Standard page dimensions (points)
    - reportlab.lib.units: Point/millimetre conversion

Used By:
    - engine.config: Settings validation
    - engine.catalog: Proportion lookup
    - engine.cycling: Canvas size for re-rendering
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Dict, List, Tuple

from reportlab.lib.pagesizes import A4, LEGAL, LETTER
from reportlab.lib.units import mm

if TYPE_CHECKING:
    from album_layout.core.models.images import PositionedImage
    from album_layout.engine.config import LayoutSettings


# Preview canvas: long edge in pixels (600 scaled by 0.8)
PREVIEW_BASE_PX = 600
PREVIEW_SCALE = 0.8
PREVIEW_LONG_EDGE_PX = PREVIEW_BASE_PX * PREVIEW_SCALE


class PageProportion(str, Enum):
    """Catalog family keyed by the long:short ratio of the page."""

    STANDARD = "standard"  # A4, ~1.41
    COMPACT = "compact"  # Letter, ~1.29
    ELONGATED = "elongated"  # Legal, ~1.65


# reportlab sizes are (width, height) in points, portrait
_PAGE_POINTS: Dict[str, Tuple[float, float]] = {
    "a4": A4,
    "letter": LETTER,
    "legal": LEGAL,
}

_PROPORTIONS: Dict[str, PageProportion] = {
    "a4": PageProportion.STANDARD,
    "letter": PageProportion.COMPACT,
    "legal": PageProportion.ELONGATED,
}

SUPPORTED_PAGE_SIZES: Tuple[str, ...] = tuple(_PAGE_POINTS)


def _normalise(page_size: str) -> str:
    key = (page_size or "a4").strip().lower()
    if key not in _PAGE_POINTS:
        raise ValueError(
            f"Unsupported page size {page_size!r}; expected one of {SUPPORTED_PAGE_SIZES}"
        )
    return key


def page_size_points(page_size: str) -> Tuple[float, float]:
    """
    Physical (long, short) edge lengths in PDF points.

    Args:
        page_size: One of "a4", "letter", "legal" (case-insensitive)

    Returns:
        Tuple of (long_edge, short_edge) in points
    """
    width, height = _PAGE_POINTS[_normalise(page_size)]
    return (max(width, height), min(width, height))


def page_size_mm(page_size: str) -> Tuple[float, float]:
    """
    Physical (long, short) edge lengths in millimetres.

    Example:
        >>> page_size_mm("a4")
        (297.0, 210.0)  # approximately
    """
    long_pt, short_pt = page_size_points(page_size)
    return (long_pt / mm, short_pt / mm)


def page_proportion(page_size: str) -> PageProportion:
    """Catalog proportion family for a page size."""
    return _PROPORTIONS[_normalise(page_size)]


def page_dimensions_mm(page_size: str, orientation: str) -> Tuple[float, float]:
    """Physical (width, height) in millimetres for an orientation."""
    long_mm, short_mm = page_size_mm(page_size)
    if orientation == "portrait":
        return (short_mm, long_mm)
    return (long_mm, short_mm)


def preview_dimensions(settings: "LayoutSettings") -> Tuple[float, float]:
    """
    Preview canvas size in pixels for the settings' page size and orientation.

    The long edge of the page is always PREVIEW_LONG_EDGE_PX; the short edge
    follows the physical page ratio.

    Args:
        settings: Layout settings (page_size, orientation)

    Returns:
        Tuple of (width, height) in preview pixels

    Example:
        >>> preview_dimensions(LayoutSettings())
        (480.0, 339.39...)
    """
    long_mm, short_mm = page_size_mm(settings.page_size)
    short_px = PREVIEW_LONG_EDGE_PX * short_mm / long_mm
    if settings.is_portrait:
        return (short_px, PREVIEW_LONG_EDGE_PX)
    return (PREVIEW_LONG_EDGE_PX, short_px)


def preview_to_mm(length_px: float, settings: "LayoutSettings") -> float:
    """
    Convert a preview length to millimetres on the physical page.

    The mapping is linear along the page width, so it applies equally to
    horizontal and vertical lengths.
    """
    preview_width, _ = preview_dimensions(settings)
    page_width_mm, _ = page_dimensions_mm(settings.page_size, settings.orientation)
    if preview_width <= 0:
        return 0.0
    return length_px / preview_width * page_width_mm


def to_page_units(
    positioned: List["PositionedImage"],
    settings: "LayoutSettings",
) -> List[Tuple[str, float, float, float, float]]:
    """
    Map positioned preview rectangles to PDF points.

    Origin stays top-left; callers drawing with reportlab flip the y axis.

    Args:
        positioned: Arranged images in preview pixels
        settings: Settings the arrangement was computed for

    Returns:
        List of (image_id, x, y, width, height) tuples in points
    """
    factor = preview_to_mm(1.0, settings) * mm
    return [
        (
            item.image.id,
            item.rect.x * factor,
            item.rect.y * factor,
            item.rect.width * factor,
            item.rect.height * factor,
        )
        for item in positioned
    ]
