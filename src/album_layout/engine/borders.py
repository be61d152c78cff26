"""Picture border dividers.

Picture borders act as dividers between adjacent images, not as frames: an
edge gets a border only when another image touches it. Edges on the page
boundary never get one.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from album_layout.core.models.images import PositionedImage

from .config import SettingsLike, as_settings


@dataclass(frozen=True)
class BorderEdges:
    """Which edges of an image get a divider."""

    top: bool = False
    right: bool = False
    bottom: bool = False
    left: bool = False

    @property
    def any(self) -> bool:
        return self.top or self.right or self.bottom or self.left


@dataclass(frozen=True)
class DividerInsets:
    """Per-edge inset in pixels (half the divider width on shared edges)."""

    top: float = 0.0
    right: float = 0.0
    bottom: float = 0.0
    left: float = 0.0


def _overlaps(start_a: float, end_a: float, start_b: float, end_b: float) -> bool:
    return not (end_b <= start_a or start_b >= end_a)


def border_edges(
    image: PositionedImage,
    all_images: Sequence[PositionedImage],
    page_width: float,
    page_height: float,
    tolerance: float = 1.0,
) -> BorderEdges:
    """
    Edges of an image that touch another image.

    Args:
        image: Image to inspect
        all_images: Every image on the page (may include image itself)
        page_width: Page width in preview pixels
        page_height: Page height in preview pixels
        tolerance: Distance in pixels under which two edges touch

    Returns:
        BorderEdges flags
    """
    rect = image.rect
    at_left = abs(rect.x) <= tolerance
    at_top = abs(rect.y) <= tolerance
    at_right = abs(rect.right - page_width) <= tolerance
    at_bottom = abs(rect.bottom - page_height) <= tolerance

    others = [o.rect for o in all_images if o is not image and o.image_id != image.image_id]

    left = not at_left and any(
        abs(o.right - rect.x) <= tolerance and _overlaps(rect.y, rect.bottom, o.y, o.bottom)
        for o in others
    )
    right = not at_right and any(
        abs(o.x - rect.right) <= tolerance and _overlaps(rect.y, rect.bottom, o.y, o.bottom)
        for o in others
    )
    top = not at_top and any(
        abs(o.bottom - rect.y) <= tolerance and _overlaps(rect.x, rect.right, o.x, o.right)
        for o in others
    )
    bottom = not at_bottom and any(
        abs(o.y - rect.bottom) <= tolerance and _overlaps(rect.x, rect.right, o.x, o.right)
        for o in others
    )
    return BorderEdges(top=top, right=right, bottom=bottom, left=left)


def divider_insets(
    image: PositionedImage,
    all_images: Sequence[PositionedImage],
    page_width: float,
    page_height: float,
    settings: SettingsLike = None,
) -> DividerInsets:
    """
    Insets that draw settings.picture_border_width between adjacent images.

    Each neighbour draws half the divider, so two touching images together
    show one full-width line.
    """
    width = as_settings(settings).picture_border_width
    if width <= 0:
        return DividerInsets()
    edges = border_edges(image, all_images, page_width, page_height)
    half = width / 2
    return DividerInsets(
        top=half if edges.top else 0.0,
        right=half if edges.right else 0.0,
        bottom=half if edges.bottom else 0.0,
        left=half if edges.left else 0.0,
    )
