"""
Module: options

Purpose:
    Selectable layout options and the per-page cycling state.

Key Classes:
    - LayoutKind: Tag of a layout option
    - GridOption: Row-partition arrangement (or the scored-grid placeholder)
    - HardcodedOption: Reference to a catalog template
    - FlexibleOption: Generated template plus its generation index
    - StateSignature: What a state was built for (count, proportion, orientation)
    - PageLayoutState: Options list and current index for one page

Dependencies:
    - core.models.templates: Template

Used By:
    - engine.cycling: State store and cycle controller
    - engine.arranger: Option rendering
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional, Tuple, Union

from .templates import Template


class LayoutKind(str, Enum):
    """Tag of a layout option."""

    GRID = "grid"
    HARDCODED = "hardcoded"
    FLEXIBLE = "flexible"


@dataclass(frozen=True)
class GridOption:
    """
    Row-partition option.

    Attributes:
        rows: Images per row, e.g. (2, 2). None is the placeholder option
            that asks the arranger for its own scored row distribution.
    """

    rows: Optional[Tuple[int, ...]] = None
    kind: LayoutKind = LayoutKind.GRID

    @property
    def label(self) -> str:
        if self.rows is None:
            return "Auto grid"
        return " / ".join(str(n) for n in self.rows)

    @property
    def is_placeholder(self) -> bool:
        return self.rows is None


@dataclass(frozen=True)
class HardcodedOption:
    """Option referencing a catalog template."""

    template: Template
    kind: LayoutKind = LayoutKind.HARDCODED

    @property
    def label(self) -> str:
        return self.template.name


@dataclass(frozen=True)
class FlexibleOption:
    """
    Option holding a generated template and its generation index.

    Produced when a generated template is pinned; hosts can persist
    selection_index as the _forcedFlexibleLayout setting.
    """

    template: Template
    selection_index: int
    kind: LayoutKind = LayoutKind.FLEXIBLE

    @property
    def label(self) -> str:
        return self.template.name


LayoutOption = Union[GridOption, HardcodedOption, FlexibleOption]


@dataclass(frozen=True)
class StateSignature:
    """The (image count, proportion, orientation) combination a state serves."""

    image_count: int
    proportion: str
    orientation: str


@dataclass(frozen=True)
class PageLayoutState:
    """
    Cycling state for one page (immutable; the store swaps instances).

    Invariants:
        - options is non-empty
        - 0 <= current_index < len(options)

    Example:
        >>> state = PageLayoutState(options=(GridOption((2, 2)), GridOption((4,))))
        >>> state.moved(1).current_index
        1
        >>> state.moved(2).current_index
        0
    """

    options: Tuple[LayoutOption, ...]
    current_index: int = 0
    signature: Optional[StateSignature] = None

    def __post_init__(self) -> None:
        """Validate state on construction."""
        if not self.options:
            raise ValueError("PageLayoutState requires at least one option")
        if not 0 <= self.current_index < len(self.options):
            raise ValueError(
                f"current_index {self.current_index} out of range for "
                f"{len(self.options)} options"
            )

    @property
    def current(self) -> LayoutOption:
        return self.options[self.current_index]

    @property
    def total(self) -> int:
        return len(self.options)

    def moved(self, direction: int) -> PageLayoutState:
        """New state with the index advanced circularly by direction."""
        index = (self.current_index + direction) % len(self.options)
        return replace(self, current_index=index)
