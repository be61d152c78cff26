"""
Module: engine.config

Purpose:
    Configuration for the page layout engine.
    Defines page size/orientation, grid limits, layout mode, borders and the
    override hooks used for deterministic cycling and pinning.

Key Classes:
    - LayoutMode: hardcoded | grid | flexible
    - DesignStyle: full_cover | classic
    - LayoutSettings: Immutable layout settings
    - PageData: Per-page flags

Dependencies:
    - dataclasses (std)
    - common.page_sizes: Page size validation and proportions
    - core.schemas.validator: Host mapping validation

Used By:
    - engine.arranger, engine.classic, engine.cycling, engine.distributor
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Mapping, Optional, Tuple, Union

from album_layout.common.page_sizes import (
    SUPPORTED_PAGE_SIZES,
    PageProportion,
    page_proportion,
)
from album_layout.core.schemas.validator import error_list, settings_errors

logger = logging.getLogger(__name__)


class LayoutMode(str, Enum):
    """Full cover arrangement strategy."""

    HARDCODED = "hardcoded"
    GRID = "grid"
    FLEXIBLE = "flexible"


class DesignStyle(str, Enum):
    """Page design style."""

    FULL_COVER = "full_cover"  # Images tile the page with no gaps
    CLASSIC = "classic"  # Centered rows with margins and gaps


ORIENTATIONS = ("landscape", "portrait")

# Host mapping key -> LayoutSettings field
_HOST_KEYS = {
    "pageSize": "page_size",
    "orientation": "orientation",
    "maxImagesPerRow": "max_images_per_row",
    "maxNumberOfRows": "max_number_of_rows",
    "layoutMode": "layout_mode",
    "designStyle": "design_style",
    "pageBorderWidth": "page_border_width",
    "pictureBorderWidth": "picture_border_width",
    "pageMargin": "page_margin",
    "imageGap": "image_gap",
    "_forcedLayout": "forced_layout",
    "_forcedFlexibleLayout": "forced_flexible_layout",
    "_flexibleLayoutId": "flexible_layout_id",
    "_hardcodedLayoutId": "hardcoded_layout_id",
}


@dataclass(frozen=True)
class LayoutSettings:
    """
    Settings for page layout (immutable).

    Attributes:
        page_size: "a4", "letter" or "legal"
        orientation: "landscape" or "portrait"
        max_images_per_row: Upper bound on images in one row
        max_number_of_rows: Upper bound on rows per page
        layout_mode: Full cover strategy (HARDCODED by default)
        design_style: FULL_COVER or CLASSIC
        page_border_width: Symmetric inset around the usable area (px)
        picture_border_width: Divider width between adjacent images (px)
        page_margin: Classic mode page margin (px)
        image_gap: Classic mode gap between images (px)
        forced_layout: Explicit images-per-row array for GRID mode
        forced_flexible_layout: Generation index for FLEXIBLE mode
        flexible_layout_id: Durable generated template id for FLEXIBLE mode
        hardcoded_layout_id: Pinned catalog template id for HARDCODED mode

    Example:
        >>> settings = LayoutSettings(orientation="portrait")
        >>> settings.is_portrait
        True
        >>> settings.capacity
        8
    """

    # Page
    page_size: str = "a4"
    orientation: str = "landscape"

    # Grid limits
    max_images_per_row: int = 4
    max_number_of_rows: int = 2

    # Strategy
    layout_mode: LayoutMode = LayoutMode.HARDCODED
    design_style: DesignStyle = DesignStyle.FULL_COVER

    # Borders and spacing
    page_border_width: float = 0.0
    picture_border_width: float = 0.0
    page_margin: float = 20.0
    image_gap: float = 10.0

    # Override hooks
    forced_layout: Optional[Tuple[int, ...]] = None
    forced_flexible_layout: Optional[int] = None
    flexible_layout_id: Optional[str] = None
    hardcoded_layout_id: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate and normalise settings on construction."""
        size = (self.page_size or "").strip().lower()
        if size not in SUPPORTED_PAGE_SIZES:
            raise ValueError(f"page_size must be one of {SUPPORTED_PAGE_SIZES}: {self.page_size!r}")
        object.__setattr__(self, "page_size", size)
        if self.orientation not in ORIENTATIONS:
            raise ValueError(f"orientation must be one of {ORIENTATIONS}: {self.orientation!r}")
        # Counts are ints even when a host sends 4.0
        object.__setattr__(self, "max_images_per_row", int(self.max_images_per_row))
        object.__setattr__(self, "max_number_of_rows", int(self.max_number_of_rows))
        if self.max_images_per_row < 1:
            raise ValueError(f"max_images_per_row must be positive: {self.max_images_per_row}")
        if self.max_number_of_rows < 1:
            raise ValueError(f"max_number_of_rows must be positive: {self.max_number_of_rows}")
        object.__setattr__(self, "layout_mode", LayoutMode(self.layout_mode))
        object.__setattr__(self, "design_style", DesignStyle(self.design_style))
        for name in ("page_border_width", "picture_border_width", "page_margin", "image_gap"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be non-negative: {getattr(self, name)}")
        if self.forced_layout is not None:
            rows = tuple(int(n) for n in self.forced_layout)
            if not rows or any(n < 1 for n in rows):
                raise ValueError(f"forced_layout rows must be positive: {self.forced_layout}")
            object.__setattr__(self, "forced_layout", rows)
        if self.forced_flexible_layout is not None:
            object.__setattr__(self, "forced_flexible_layout", int(self.forced_flexible_layout))
        if self.forced_flexible_layout is not None and self.forced_flexible_layout < 0:
            raise ValueError(
                f"forced_flexible_layout must be non-negative: {self.forced_flexible_layout}"
            )

    # ─────────────────────────────────────────────────────────────────────────
    # Calculated Properties
    # ─────────────────────────────────────────────────────────────────────────

    @property
    def is_portrait(self) -> bool:
        return self.orientation == "portrait"

    @property
    def proportion(self) -> PageProportion:
        """Catalog proportion family for the page size."""
        return page_proportion(self.page_size)

    @property
    def capacity(self) -> int:
        """Maximum images per page (max_images_per_row × max_number_of_rows)."""
        return self.max_images_per_row * self.max_number_of_rows

    # ─────────────────────────────────────────────────────────────────────────
    # Construction Helpers
    # ─────────────────────────────────────────────────────────────────────────

    def with_overrides(self, **changes: Any) -> LayoutSettings:
        """Copy with some fields replaced (used to force a layout)."""
        return replace(self, **changes)

    def without_overrides(self) -> LayoutSettings:
        """Copy with every override hook cleared."""
        return replace(
            self,
            forced_layout=None,
            forced_flexible_layout=None,
            flexible_layout_id=None,
            hardcoded_layout_id=None,
        )

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> LayoutSettings:
        """
        Build settings from a host mapping (camelCase keys).

        Malformed keys are logged and replaced by their defaults; unknown
        keys are ignored. This never raises for mapping input.

        Example:
            >>> LayoutSettings.from_dict({"pageSize": "legal", "_forcedLayout": [2, 2]})
            LayoutSettings(page_size='legal', ..., forced_layout=(2, 2), ...)
        """
        if not data:
            return cls()

        # Tuples from Python hosts are arrays too
        data = {k: list(v) if isinstance(v, tuple) else v for k, v in data.items()}
        bad = settings_errors(data)
        if bad:
            logger.warning(f"Ignoring malformed settings: {error_list(bad)}")

        kwargs: dict[str, Any] = {}
        for host_key, field_name in _HOST_KEYS.items():
            if host_key not in data or host_key in bad:
                continue
            value = data[host_key]
            if field_name == "page_size" and isinstance(value, str):
                value = value.lower()
            if field_name == "forced_layout" and value is not None:
                value = tuple(value)
            kwargs[field_name] = value

        try:
            return cls(**kwargs)
        except ValueError as e:
            # Schema-valid but semantically inconsistent input
            logger.warning(f"Falling back to default settings: {e}")
            return cls()

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the host mapping format."""
        data: dict[str, Any] = {}
        for host_key, field_name in _HOST_KEYS.items():
            value = getattr(self, field_name)
            if isinstance(value, Enum):
                value = value.value
            elif isinstance(value, tuple):
                value = list(value)
            data[host_key] = value
        return data


SettingsLike = Union[LayoutSettings, Mapping[str, Any], None]


def as_settings(settings: SettingsLike) -> LayoutSettings:
    """Coerce host input to LayoutSettings."""
    if isinstance(settings, LayoutSettings):
        return settings
    return LayoutSettings.from_dict(settings)


@dataclass(frozen=True)
class PageData:
    """
    Per-page flags.

    Attributes:
        enable_page_border: When False the page border inset is 0 for this
            page regardless of settings.page_border_width
    """

    enable_page_border: bool = True

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> PageData:
        if not data:
            return cls()
        return cls(enable_page_border=data.get("enablePageBorder") is not False)


PageDataLike = Union[PageData, Mapping[str, Any], None]


def as_page_data(page_data: PageDataLike) -> PageData:
    """Coerce host input to PageData."""
    if isinstance(page_data, PageData):
        return page_data
    return PageData.from_dict(page_data)


def border_inset(settings: LayoutSettings, page_data: PageData) -> float:
    """Symmetric inset applied on every side of the canvas."""
    if not page_data.enable_page_border:
        return 0.0
    return float(settings.page_border_width)
