"""
Core Models Package

Immutable, validated data models shared by every engine component.

All models in this package are frozen dataclasses. This ensures:
1. Arrangers can never mutate caller input
2. Stored cycling state cannot drift from what was rendered
3. Models can be used as dict keys or in sets
"""

from .images import ImageRef, Rect, GridSpan, PositionedImage, as_image_ref
from .templates import GridSize, Placement, Region, Template
from .options import (
    LayoutKind,
    GridOption,
    HardcodedOption,
    FlexibleOption,
    LayoutOption,
    StateSignature,
    PageLayoutState,
)

__all__ = [
    "ImageRef",
    "Rect",
    "GridSpan",
    "PositionedImage",
    "as_image_ref",
    "GridSize",
    "Placement",
    "Region",
    "Template",
    "LayoutKind",
    "GridOption",
    "HardcodedOption",
    "FlexibleOption",
    "LayoutOption",
    "StateSignature",
    "PageLayoutState",
]
