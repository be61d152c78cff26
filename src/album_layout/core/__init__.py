"""
Album Layout Core Package

Shared data models and schema validation. These models are the single
source of truth for every engine component:

1. **Immutable Data Models**
   - Frozen dataclasses; arrangers build new PositionedImage instances
     instead of mutating caller input.

2. **Templates Are Data**
   - The template library is a JSON file validated against a schema once
     at load time, never per lookup.
"""

from .models import (
    ImageRef,
    Rect,
    GridSpan,
    PositionedImage,
    GridSize,
    Placement,
    Region,
    Template,
    LayoutKind,
    GridOption,
    HardcodedOption,
    FlexibleOption,
    PageLayoutState,
)

__all__ = [
    "ImageRef",
    "Rect",
    "GridSpan",
    "PositionedImage",
    "GridSize",
    "Placement",
    "Region",
    "Template",
    "LayoutKind",
    "GridOption",
    "HardcodedOption",
    "FlexibleOption",
    "PageLayoutState",
]
