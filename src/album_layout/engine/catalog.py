"""
Module: engine.catalog

Purpose:
    Hand-authored template library indexed by page proportion and image
    count. Converts templates to pixel rectangles for a canvas.

Key Functions:
    - default_catalog(): Cached catalog loaded from the packaged data file
    - load_catalog(): Load a catalog from a JSON file
    - to_pixels(): Convert a template to positioned rectangles

Key Classes:
    - LayoutCatalog: Template lookup by (proportion, count)
    - LayoutChoice: Layout picker entry (id, name, description)
    - CatalogError: Catalog data could not be loaded

Dependencies:
    - core.schemas.validator: Catalog schema validation (jsonschema)
    - engine.validation: Structural checks (overlap/coverage)

Used By:
    - engine.arranger: HARDCODED mode
    - engine.cycling: Option lists
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

from album_layout.common.page_sizes import PageProportion
from album_layout.core.models.images import ImageRef, PositionedImage, Rect
from album_layout.core.models.templates import Template
from album_layout.core.schemas.validator import ValidationError, validate_catalog

from .validation import filter_valid

logger = logging.getLogger(__name__)

DEFAULT_CATALOG_PATH = Path(__file__).parent / "data" / "templates.json"


class CatalogError(Exception):
    """Raised when catalog data cannot be loaded."""


@dataclass(frozen=True)
class LayoutChoice:
    """Entry for a layout picker."""

    id: str
    name: str
    description: str


CountTable = Mapping[int, Sequence[Template]]


class LayoutCatalog:
    """
    Template library keyed by (PageProportion, image count).

    Base templates serve every proportion. Proportion-specific extras are
    appended after the base templates, so the first template for a count is
    the same on every page size.

    Example:
        >>> catalog = default_catalog()
        >>> catalog.get_templates(PageProportion.STANDARD, 4)[0].id
        '4-quad'
    """

    def __init__(
        self,
        base: CountTable,
        extras: Optional[Mapping[PageProportion, CountTable]] = None,
    ):
        self._index: Dict[Tuple[PageProportion, int], Tuple[Template, ...]] = {}
        extras = extras or {}
        counts = set(base)
        for table in extras.values():
            counts.update(table)

        for proportion in PageProportion:
            extra_table = extras.get(proportion, {})
            for count in sorted(counts):
                templates = tuple(base.get(count, ())) + tuple(extra_table.get(count, ()))
                if templates:
                    self._index[(proportion, count)] = templates

        logger.debug(f"Catalog indexed {len(self._index)} (proportion, count) entries")

    # ─────────────────────────────────────────────────────────────────────────
    # Construction
    # ─────────────────────────────────────────────────────────────────────────

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> LayoutCatalog:
        """
        Build a catalog from parsed catalog data.

        The structure is validated against the catalog schema first; entries
        that then fail to build or fail the structural check are dropped with
        a warning.

        Raises:
            CatalogError: If the data does not match the catalog schema
        """
        try:
            validate_catalog(data)
        except ValidationError as e:
            raise CatalogError(f"{e} ({len(e.errors)} error(s))") from e

        base = _parse_table(data["templates"])
        extras = {PageProportion.ELONGATED: _parse_table(data.get("elongated", {}))}
        return cls(base, extras)

    @classmethod
    def empty(cls) -> LayoutCatalog:
        return cls({})

    # ─────────────────────────────────────────────────────────────────────────
    # Lookup
    # ─────────────────────────────────────────────────────────────────────────

    def get_templates(
        self,
        proportion: PageProportion,
        count: int,
        is_portrait: bool = False,
    ) -> List[Template]:
        """
        Templates for an image count, in catalog order.

        Portrait pages get the transposed templates (same ids).
        """
        templates = self._index.get((PageProportion(proportion), count), ())
        if is_portrait:
            return [t.transpose() for t in templates]
        return list(templates)

    def has_templates(self, proportion: PageProportion, count: int) -> bool:
        return (PageProportion(proportion), count) in self._index

    def find(
        self,
        proportion: PageProportion,
        count: int,
        is_portrait: bool,
        template_id: str,
    ) -> Optional[Template]:
        """Template with the given id, or None."""
        for template in self.get_templates(proportion, count, is_portrait):
            if template.id == template_id:
                return template
        return None

    def selection_options(
        self,
        proportion: PageProportion,
        count: int,
        is_portrait: bool = False,
    ) -> List[LayoutChoice]:
        """Layout picker entries for an image count."""
        return [
            LayoutChoice(id=t.id, name=t.name, description=t.description)
            for t in self.get_templates(proportion, count, is_portrait)
        ]

    @property
    def counts(self) -> List[int]:
        """Image counts that have at least one template."""
        return sorted({count for _, count in self._index})

    def __len__(self) -> int:
        return sum(len(templates) for templates in self._index.values())


def _parse_table(table: Mapping[str, Iterable[Mapping[str, Any]]]) -> Dict[int, List[Template]]:
    """Parse one count table, dropping entries that fail validation."""
    parsed: Dict[int, List[Template]] = {}
    for key, entries in table.items():
        count = int(key)
        templates: List[Template] = []
        for entry in entries:
            try:
                template = Template.from_dict(entry)
            except (KeyError, ValueError) as e:
                logger.warning(f"Dropping catalog entry {entry.get('id', '?')}: {e}")
                continue
            if template.image_count != count:
                logger.warning(
                    f"Dropping catalog entry {template.id}: has {template.image_count} "
                    f"cells, listed under {count}"
                )
                continue
            templates.append(template)
        parsed[count] = filter_valid(templates)
    return parsed


def load_catalog(path: Union[str, Path] = DEFAULT_CATALOG_PATH) -> LayoutCatalog:
    """
    Load a catalog from a JSON file.

    Raises:
        CatalogError: If the file is missing, unreadable or malformed
    """
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise CatalogError(f"Cannot read catalog {path}: {e}") from e

    catalog = LayoutCatalog.from_dict(data)
    logger.debug(f"Loaded {len(catalog)} templates from {path.name}")
    return catalog


@lru_cache(maxsize=1)
def default_catalog() -> LayoutCatalog:
    """The packaged template library (loaded once)."""
    return load_catalog(DEFAULT_CATALOG_PATH)


def to_pixels(
    template: Template,
    images: Sequence[ImageRef],
    width: float,
    height: float,
    border_offset: float = 0.0,
) -> List[PositionedImage]:
    """
    Convert a template to pixel rectangles.

    Each region becomes
    (col*cell_w + offset, row*cell_h + offset, col_span*cell_w, row_span*cell_h)
    with cell_w = width / cols and cell_h = height / rows. Regions whose image
    index has no corresponding image are skipped.

    Args:
        template: Grid template (already transposed for portrait)
        images: Images in template index order
        width: Usable width in pixels
        height: Usable height in pixels
        border_offset: Offset added to x and y (page border inset)

    Returns:
        Positioned images ordered by image index
    """
    cell_w = width / template.grid.cols
    cell_h = height / template.grid.rows
    placed: List[PositionedImage] = []

    for placement in template.sorted_placements():
        if placement.image_index >= len(images):
            continue
        region = placement.region
        rect = Rect(
            x=region.col_start * cell_w + border_offset,
            y=region.row_start * cell_h + border_offset,
            width=region.col_span * cell_w,
            height=region.row_span * cell_h,
        )
        placed.append(
            PositionedImage(
                image=images[placement.image_index],
                rect=rect,
                row_index=region.row_start,
                col_index=region.col_start,
                grid_span=region,
                full_cover=True,
            )
        )
    return placed
