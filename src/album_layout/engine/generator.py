"""
Module: engine.generator

Purpose:
    Generate spanning templates on demand (flexible mode and counts the
    catalog does not cover).

Key Classes:
    - GridTemplateGenerator: Produces validated templates for an image count

Key Functions:
    - featured_template(): One large block plus unit cells
    - balanced_grid(): Rebalanced grid for larger counts

Algorithm:
    Counts 2..6: hand-modeled featured-cell compositions. The featured block
    always gets image index 0; the remaining unit cells are filled row-major.
    Counts > 6: cols = ceil(sqrt(N)), rows = ceil(N / cols). Row counts are
    rebalanced to differ by at most one, and every row is laid over a common
    column count (base * (base + 1)) so each cell spans an equal share. The
    trailing row is therefore never short and coverage always holds.

Dependencies:
    - engine.validation: Every generated template must tile its grid exactly

Used By:
    - engine.arranger: FLEXIBLE mode
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

from album_layout.common.thresholds import TEMPLATE_THRESHOLDS
from album_layout.core.models.images import GridSpan
from album_layout.core.models.templates import Template

from .validation import filter_valid

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Composition:
    """
    A featured-cell composition.

    Attributes:
        shape: Short shape name (used in the template id)
        name: Display name
        rows: Grid rows
        cols: Grid columns
        block: Featured block as (row, col, row_span, col_span), or None for a
            plain grid of unit cells
    """

    shape: str
    name: str
    rows: int
    cols: int
    block: Optional[Tuple[int, int, int, int]] = None

    @property
    def image_count(self) -> int:
        if self.block is None:
            return self.rows * self.cols
        _, _, row_span, col_span = self.block
        return self.rows * self.cols - row_span * col_span + 1


# Landscape compositions per image count, in generation order.
COMPOSITIONS: Dict[int, Tuple[Composition, ...]] = {
    2: (
        Composition("side-by-side", "Side by Side", 1, 2),
        Composition("featured-left", "Wide Left", 1, 3, (0, 0, 1, 2)),
        Composition("featured-right", "Wide Right", 1, 3, (0, 1, 1, 2)),
        Composition("stacked", "Stacked", 2, 1),
    ),
    3: (
        Composition("featured-left", "Large Left + 2", 2, 2, (0, 0, 2, 1)),
        Composition("featured-right", "Large Right + 2", 2, 2, (0, 1, 2, 1)),
        Composition("featured-top", "Large Top + 2", 2, 2, (0, 0, 1, 2)),
        Composition("featured-bottom", "Large Bottom + 2", 2, 2, (1, 0, 1, 2)),
        Composition("strip", "Strip of 3", 1, 3),
    ),
    4: (
        Composition("grid", "2x2 Grid", 2, 2),
        Composition("featured-left", "Tall Left + 3", 3, 2, (0, 0, 3, 1)),
        Composition("featured-right", "Tall Right + 3", 3, 2, (0, 1, 3, 1)),
        Composition("featured-top", "Wide Top + 3", 2, 3, (0, 0, 1, 3)),
        Composition("featured-bottom", "Wide Bottom + 3", 2, 3, (1, 0, 1, 3)),
        Composition("strip", "Strip of 4", 1, 4),
    ),
    5: (
        Composition("featured-left", "Large Left + 4", 2, 4, (0, 0, 2, 2)),
        Composition("featured-center", "Large Center + 4", 2, 4, (0, 1, 2, 2)),
        Composition("featured-right", "Large Right + 4", 2, 4, (0, 2, 2, 2)),
        Composition("featured-top", "Large Top + 4", 4, 2, (0, 0, 2, 2)),
        Composition("featured-bottom", "Large Bottom + 4", 4, 2, (2, 0, 2, 2)),
        Composition("strip", "Strip of 5", 1, 5),
    ),
    6: (
        Composition("featured-top-left", "Featured Top Left + 5", 3, 3, (0, 0, 2, 2)),
        Composition("featured-top-right", "Featured Top Right + 5", 3, 3, (0, 1, 2, 2)),
        Composition("featured-bottom-left", "Featured Bottom Left + 5", 3, 3, (1, 0, 2, 2)),
        Composition("featured-bottom-right", "Featured Bottom Right + 5", 3, 3, (1, 1, 2, 2)),
        Composition("grid", "2x3 Grid", 2, 3),
        Composition("grid-tall", "3x2 Grid", 3, 2),
    ),
}


def featured_template(count: int, composition: Composition) -> Template:
    """
    Build a template from a composition.

    Args:
        count: Image count (used in the template id)
        composition: Grid size and featured block

    Returns:
        Template with the featured block at image index 0

    Raises:
        ValueError: If the composition does not hold exactly count images
    """
    if composition.image_count != count:
        raise ValueError(
            f"Composition {composition.shape} holds {composition.image_count} images, not {count}"
        )

    spans: List[GridSpan] = []
    taken = set()
    if composition.block is not None:
        block = GridSpan.from_cell(*composition.block)
        spans.append(block)
        taken.update(block.cells())

    for row in range(composition.rows):
        for col in range(composition.cols):
            if (row, col) not in taken:
                spans.append(GridSpan.from_cell(row, col))

    return Template.from_spans(
        f"flex-{count}-{composition.shape}",
        composition.name,
        composition.rows,
        composition.cols,
        spans,
    )


def balanced_row_counts(count: int, rows: int) -> Tuple[int, ...]:
    """
    Split count into rows whose sizes differ by at most one.

    Larger rows come first.

    Example:
        >>> balanced_row_counts(7, 3)
        (3, 2, 2)
    """
    if rows <= 0 or count <= 0:
        return ()
    base, extra = divmod(count, rows)
    return tuple(base + 1 if i < extra else base for i in range(rows))


def balanced_grid(count: int) -> Template:
    """
    Rebalanced grid for an image count.

    Uses cols = ceil(sqrt(count)) and rows = ceil(count / cols), then
    spreads images evenly over the rows. Every row spans the same common
    column count, so no cell is left empty.
    """
    cols = math.ceil(math.sqrt(count))
    rows = math.ceil(count / cols)
    counts = balanced_row_counts(count, rows)
    common = math.lcm(*counts)

    spans: List[GridSpan] = []
    for row, in_row in enumerate(counts):
        width = common // in_row
        for i in range(in_row):
            spans.append(GridSpan(row, row + 1, i * width, (i + 1) * width))

    shape = "x".join(str(n) for n in counts)
    return Template.from_spans(
        f"flex-{count}-grid-{shape}",
        f"Balanced Grid {shape}",
        len(counts),
        common,
        spans,
    )


class GridTemplateGenerator:
    """
    Generates validated spanning templates.

    Templates are produced in a fixed order so a generation index is stable
    for a given count and orientation. Results are cached per
    (count, is_portrait).

    Example:
        >>> generator = GridTemplateGenerator()
        >>> [t.id for t in generator.generate(3)][:2]
        ['flex-3-featured-left', 'flex-3-featured-right']
    """

    def __init__(self, max_featured_count: int = TEMPLATE_THRESHOLDS.max_featured_count):
        self.max_featured_count = max_featured_count
        self._cache: Dict[Tuple[int, bool], Tuple[Template, ...]] = {}

    def generate(self, count: int, is_portrait: bool = False) -> List[Template]:
        """
        Generated templates for an image count.

        Args:
            count: Number of images
            is_portrait: Transpose every template for portrait pages

        Returns:
            Validated templates in generation order (empty for count < 1)
        """
        if count < 1:
            return []

        key = (count, is_portrait)
        if key not in self._cache:
            templates = self._build(count)
            if is_portrait:
                templates = [t.transpose() for t in templates]
            self._cache[key] = tuple(
                filter_valid(templates, require_full_cover=True, level=logging.DEBUG)
            )
            logger.debug(f"Generated {len(self._cache[key])} templates for {count} image(s)")
        return list(self._cache[key])

    def find(self, count: int, is_portrait: bool, template_id: str) -> Optional[Template]:
        """Generated template with the given id, or None."""
        for template in self.generate(count, is_portrait):
            if template.id == template_id:
                return template
        return None

    def _build(self, count: int) -> List[Template]:
        if count == 1:
            return [Template.from_spans("flex-1-full", "Full Page", 1, 1, [GridSpan(0, 1, 0, 1)])]

        if count <= self.max_featured_count:
            built: List[Template] = []
            for composition in compositions_for(count):
                try:
                    built.append(featured_template(count, composition))
                except ValueError as e:
                    logger.debug(f"Skipping composition: {e}")
            if built:
                return built

        return [balanced_grid(count)]


def compositions_for(count: int) -> Sequence[Composition]:
    """Compositions defined for an image count (may be empty)."""
    return COMPOSITIONS.get(count, ())
