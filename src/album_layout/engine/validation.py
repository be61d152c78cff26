"""
Module: engine.validation

Purpose:
    Structural validation of grid templates. Builds a cell occupancy matrix
    and reports overlaps, uncovered cells and cell efficiency.

Key Functions:
    - check_template(): Full report for one template
    - is_valid_template(): Authoring-time acceptance (no overlap, >= 70% cells)
    - is_full_cover(): Exact tiling (every cell covered exactly once)
    - filter_valid(): Drop invalid templates with a log entry

Dependencies:
    - numpy: Occupancy matrix
    - common.thresholds: Minimum cell efficiency

Used By:
    - engine.catalog: Library loading
    - engine.generator: Generated template filtering
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, List, Tuple

import numpy as np

from album_layout.common.thresholds import TEMPLATE_THRESHOLDS
from album_layout.core.models.templates import Template

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TemplateReport:
    """
    Result of validating one template.

    Attributes:
        template_id: Template checked
        overlapping_cells: Cells claimed by more than one region
        uncovered_cells: Cells claimed by no region
        efficiency: Covered cells / grid cells (overlaps counted once)
    """

    template_id: str
    overlapping_cells: Tuple[Tuple[int, int], ...]
    uncovered_cells: Tuple[Tuple[int, int], ...]
    efficiency: float

    @property
    def has_overlap(self) -> bool:
        return bool(self.overlapping_cells)

    @property
    def is_full_cover(self) -> bool:
        return not self.overlapping_cells and not self.uncovered_cells

    def summary(self) -> str:
        parts = [f"efficiency {self.efficiency:.0%}"]
        if self.overlapping_cells:
            parts.append(f"{len(self.overlapping_cells)} overlapping cell(s)")
        if self.uncovered_cells:
            parts.append(f"{len(self.uncovered_cells)} uncovered cell(s)")
        return ", ".join(parts)


def occupancy(template: Template) -> np.ndarray:
    """
    Count how many regions claim each grid cell.

    Returns:
        rows × cols integer matrix
    """
    grid = np.zeros((template.grid.rows, template.grid.cols), dtype=np.int32)
    for region in template.regions:
        grid[region.row_start:region.row_end, region.col_start:region.col_end] += 1
    return grid


def _cells(mask: np.ndarray) -> Tuple[Tuple[int, int], ...]:
    return tuple((int(r), int(c)) for r, c in np.argwhere(mask))


def check_template(template: Template) -> TemplateReport:
    """Build a full structural report for a template."""
    grid = occupancy(template)
    covered = int(np.count_nonzero(grid))
    return TemplateReport(
        template_id=template.id,
        overlapping_cells=_cells(grid > 1),
        uncovered_cells=_cells(grid == 0),
        efficiency=covered / grid.size,
    )


def is_valid_template(template: Template) -> bool:
    """
    Authoring-time acceptance check.

    A template is accepted when no two regions overlap and at least
    TEMPLATE_THRESHOLDS.min_cell_efficiency of the grid cells are used.
    """
    report = check_template(template)
    return (
        not report.has_overlap
        and report.efficiency >= TEMPLATE_THRESHOLDS.min_cell_efficiency
    )


def is_full_cover(template: Template) -> bool:
    """Check that every cell belongs to exactly one region."""
    return bool(np.all(occupancy(template) == 1))


def filter_valid(
    templates: Iterable[Template],
    *,
    require_full_cover: bool = False,
    level: int = logging.WARNING,
) -> List[Template]:
    """
    Keep only structurally valid templates.

    Args:
        templates: Candidates
        require_full_cover: Also reject templates with uncovered cells
        level: Log level for rejected templates

    Returns:
        Accepted templates in input order
    """
    accepted: List[Template] = []
    for template in templates:
        report = check_template(template)
        ok = not report.has_overlap and (
            report.is_full_cover
            if require_full_cover
            else report.efficiency >= TEMPLATE_THRESHOLDS.min_cell_efficiency
        )
        if ok:
            accepted.append(template)
        else:
            logger.log(level, f"Rejected template {template.id}: {report.summary()}")
    return accepted
