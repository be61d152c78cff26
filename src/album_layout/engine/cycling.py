"""
Module: engine.cycling

Purpose:
    Per-page layout cycling. Keeps the list of selectable layout options for
    each page, moves through it circularly, and re-renders the current option
    for a changed image set (layout preservation).

Key Classes:
    - LayoutStateStore: Explicit page id -> PageLayoutState registry
    - LayoutCycleController: ensure_state/next/previous/reapply/pin/reset
    - LayoutInfo: Snapshot of a page's current selection

State Machine:
    Uninitialized -> Ready(options, current_index)
    - next/previous initialize lazily, then move the index modulo the
      option count and render
    - a different (image count, proportion, orientation) resets the state
    - pin replaces the state with a single option
    - reset discards it

Concurrency:
    Every call reads and writes a page's state synchronously with no
    suspension point in between. Nothing is locked: callers must serialize
    calls for the same page id.

Dependencies:
    - engine.arranger: Rendering options
    - engine.catalog: Option lists for HARDCODED/FLEXIBLE settings
    - engine.row_search: Option lists for GRID settings

Used By:
    - engine.controller: arrange_preserving_layout()
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, Sequence, Tuple, Union

from album_layout.common.page_sizes import preview_dimensions
from album_layout.core.models.images import ImageLike, PositionedImage
from album_layout.core.models.options import (
    FlexibleOption,
    GridOption,
    HardcodedOption,
    LayoutOption,
    PageLayoutState,
    StateSignature,
)
from album_layout.core.models.templates import Template

from .arranger import FullCoverArranger
from .config import LayoutMode, LayoutSettings, PageDataLike, SettingsLike, as_settings
from .row_search import generate_row_layouts

logger = logging.getLogger(__name__)


class LayoutStateStore:
    """
    Registry of per-page cycling state.

    Owned by the caller (one per editing session); there is no module-level
    instance.

    Example:
        >>> store = LayoutStateStore()
        >>> "page-1" in store
        False
    """

    def __init__(self) -> None:
        self._states: Dict[str, PageLayoutState] = {}

    def get(self, page_id: str) -> Optional[PageLayoutState]:
        return self._states.get(page_id)

    def set(self, page_id: str, state: PageLayoutState) -> None:
        self._states[page_id] = state

    def delete(self, page_id: str) -> None:
        self._states.pop(page_id, None)

    def clear(self) -> None:
        self._states.clear()

    def __contains__(self, page_id: object) -> bool:
        return page_id in self._states

    def __len__(self) -> int:
        return len(self._states)

    def __iter__(self) -> Iterator[str]:
        return iter(self._states)


@dataclass(frozen=True)
class LayoutInfo:
    """Current selection of a page."""

    current_index: int
    option: LayoutOption
    total: int


def signature_for(image_count: int, settings: LayoutSettings) -> StateSignature:
    """What a state built for these settings and image count serves."""
    return StateSignature(
        image_count=image_count,
        proportion=settings.proportion.value,
        orientation=settings.orientation,
    )


class LayoutCycleController:
    """
    Cycles layout options per page.

    Args:
        store: State registry (a fresh one when omitted)
        arranger: Renderer for options (default catalog when omitted)

    Example:
        >>> cycler = LayoutCycleController()
        >>> images = [ImageRef(str(i)) for i in range(4)]
        >>> _ = cycler.next("p1", images, LayoutSettings())
        >>> cycler.current_info("p1").current_index
        1
    """

    def __init__(
        self,
        store: Optional[LayoutStateStore] = None,
        arranger: Optional[FullCoverArranger] = None,
    ):
        self.store = store if store is not None else LayoutStateStore()
        self.arranger = arranger if arranger is not None else FullCoverArranger()

    # ─────────────────────────────────────────────────────────────────────────
    # State
    # ─────────────────────────────────────────────────────────────────────────

    def build_options(self, image_count: int, settings: LayoutSettings) -> Tuple[LayoutOption, ...]:
        """
        Options offered for an image count.

        GRID settings get every bounded row combination. Other modes get the
        catalog templates; flexible templates are never added here. When
        nothing is available a single placeholder grid option is returned.
        """
        if settings.layout_mode == LayoutMode.GRID:
            rows = generate_row_layouts(
                image_count, settings.max_images_per_row, settings.max_number_of_rows
            )
            options: Tuple[LayoutOption, ...] = tuple(GridOption(r) for r in rows)
        else:
            templates = self.arranger.catalog.get_templates(
                settings.proportion, image_count, settings.is_portrait
            )
            options = tuple(HardcodedOption(t) for t in templates)

        if not options:
            logger.debug(f"No layout options for {image_count} images; using placeholder")
            options = (GridOption(None),)
        return options

    def ensure_state(
        self,
        page_id: str,
        images: Sequence[ImageLike],
        settings: SettingsLike,
    ) -> PageLayoutState:
        """
        Existing state for the page, or a freshly built one.

        A stored state built for a different image count, proportion or
        orientation is discarded and rebuilt.
        """
        settings = as_settings(settings)
        signature = signature_for(len(images), settings)
        state = self.store.get(page_id)
        if state is not None:
            if state.signature == signature:
                return state
            logger.debug(f"Layout state for {page_id} no longer matches; rebuilding")

        state = PageLayoutState(
            options=self.build_options(len(images), settings),
            current_index=0,
            signature=signature,
        )
        self.store.set(page_id, state)
        return state

    def reset(self, page_id: str) -> None:
        """Discard the page's state."""
        self.store.delete(page_id)

    def current_info(self, page_id: str) -> Optional[LayoutInfo]:
        """Current index, option and option count, or None without state."""
        state = self.store.get(page_id)
        if state is None:
            return None
        return LayoutInfo(state.current_index, state.current, state.total)

    # ─────────────────────────────────────────────────────────────────────────
    # Cycling
    # ─────────────────────────────────────────────────────────────────────────

    def next(
        self,
        page_id: str,
        images: Sequence[ImageLike],
        settings: SettingsLike,
        page_data: PageDataLike = None,
    ) -> List[PositionedImage]:
        """Advance to the next option (wrapping) and render it."""
        return self._cycle(page_id, images, settings, page_data, 1)

    def previous(
        self,
        page_id: str,
        images: Sequence[ImageLike],
        settings: SettingsLike,
        page_data: PageDataLike = None,
    ) -> List[PositionedImage]:
        """Step back to the previous option (wrapping) and render it."""
        return self._cycle(page_id, images, settings, page_data, -1)

    def _cycle(
        self,
        page_id: str,
        images: Sequence[ImageLike],
        settings: SettingsLike,
        page_data: PageDataLike,
        direction: int,
    ) -> List[PositionedImage]:
        if not images:
            return []
        settings = as_settings(settings)
        state = self.ensure_state(page_id, images, settings).moved(direction)
        self.store.set(page_id, state)
        logger.debug(
            f"Page {page_id}: layout {state.current_index + 1}/{state.total} "
            f"({state.current.label})"
        )
        return self._render(state.current, images, settings, page_data)

    def reapply(
        self,
        page_id: str,
        images: Sequence[ImageLike],
        settings: SettingsLike,
        page_data: PageDataLike = None,
    ) -> Union[Sequence[ImageLike], List[PositionedImage], None]:
        """
        Render the current option for a different image array.

        Args:
            page_id: Page identifier
            images: New image array (reordered, swapped, resized...)
            settings: Layout settings
            page_data: Per-page flags

        Returns:
            - the input ``images`` unchanged when the page has no state
            - None when rendering fails (the caller picks a fallback)
            - otherwise the rendered PositionedImage list
        """
        state = self.store.get(page_id)
        if state is None:
            return images

        try:
            return self._render(state.current, images, as_settings(settings), page_data)
        except Exception as e:
            logger.warning(f"Could not reapply layout {state.current.label} on {page_id}: {e}")
            return None

    def pin(
        self,
        page_id: str,
        template: Template,
        settings: SettingsLike,
        image_count: Optional[int] = None,
    ) -> PageLayoutState:
        """
        Anchor a page to exactly one template.

        Future cycle and reapply calls render this template regardless of
        catalog order. Generated templates are stored as a FlexibleOption
        carrying their generation index. The stored signature uses
        image_count (defaults to the template's slot count).
        """
        settings = as_settings(settings)
        count = image_count if image_count is not None else template.image_count
        state = PageLayoutState(
            options=(self._pinned_option(template, settings),),
            signature=signature_for(count, settings),
        )
        self.store.set(page_id, state)
        logger.debug(f"Page {page_id} pinned to {template.id}")
        return state

    def select(
        self,
        page_id: str,
        template_id: str,
        images: Sequence[ImageLike],
        settings: SettingsLike,
        page_data: PageDataLike = None,
    ) -> Optional[List[PositionedImage]]:
        """
        Pin a template by id (layout picker) and render it.

        Catalog templates are looked up first, then generated ones.

        Returns:
            Rendered images, or None if no template with this id exists for
            this image count
        """
        settings = as_settings(settings)
        template = self.arranger.catalog.find(
            settings.proportion, len(images), settings.is_portrait, template_id
        )
        if template is None:
            template = self.arranger.generator.find(len(images), settings.is_portrait, template_id)
        if template is None:
            logger.warning(f"Layout {template_id} not available for {len(images)} images")
            return None
        state = self.pin(page_id, template, settings, len(images))
        return self._render(state.current, images, settings, page_data)

    def _pinned_option(self, template: Template, settings: LayoutSettings) -> LayoutOption:
        generated = self.arranger.generator.generate(template.image_count, settings.is_portrait)
        for index, candidate in enumerate(generated):
            if candidate.id == template.id:
                return FlexibleOption(template, index)
        return HardcodedOption(template)

    def _render(
        self,
        option: LayoutOption,
        images: Sequence[ImageLike],
        settings: LayoutSettings,
        page_data: PageDataLike,
    ) -> List[PositionedImage]:
        width, height = preview_dimensions(settings)
        return self.arranger.render_option(option, images, width, height, settings, page_data)
