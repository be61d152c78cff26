"""
Module: templates

Purpose:
    Grid template models. A template is a rows×cols grid plus an ordered
    list of image-index → cell-range assignments.

Key Classes:
    - GridSize: rows × cols
    - Placement: One image index and the Region it occupies
    - Template: Named grid specification

Key Functions:
    - Template.transpose(): Structural 90° equivalent (portrait variant)
    - Template.from_dict(): Parse the compact catalog notation

Dependencies:
    - core.models.images: GridSpan (Region)

Used By:
    - engine.catalog: Template library
    - engine.generator: Generated spanning templates
    - engine.validation: Coverage/overlap checks

Catalog Notation:
    {"id": "3-large-left", "name": "Large Left + 2 Right",
     "grid": [2, 2], "cells": [[0, 0, 2, 1], [0, 1, 1, 1], [1, 1, 1, 1]]}

    Each cell entry is [row, col, row_span, col_span]; its position in the
    list is the image index.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Tuple

from .images import GridSpan

# A Region is a cell range inside a template grid.
Region = GridSpan


@dataclass(frozen=True, slots=True)
class GridSize:
    """Grid dimensions (rows × cols)."""

    rows: int
    cols: int

    def __post_init__(self) -> None:
        if self.rows <= 0 or self.cols <= 0:
            raise ValueError(f"grid must be at least 1x1: {self.rows}x{self.cols}")

    @property
    def cell_count(self) -> int:
        return self.rows * self.cols

    def transposed(self) -> GridSize:
        return GridSize(self.cols, self.rows)


@dataclass(frozen=True, slots=True)
class Placement:
    """An image index assigned to a region."""

    image_index: int
    region: Region

    def transposed(self) -> Placement:
        return Placement(self.image_index, self.region.transposed())


@dataclass(frozen=True)
class Template:
    """
    Named grid template (immutable).

    Attributes:
        id: Durable identifier (used for pinning)
        name: Display name
        grid: Grid dimensions
        placements: Ordered image-index → region assignments

    Invariants (checked by engine.validation, not here):
        - No two regions overlap
        - Every grid cell belongs to exactly one region (coverage)

    Example:
        >>> t = Template.from_dict({"id": "2-horizontal", "name": "Side by Side",
        ...                         "grid": [1, 2], "cells": [[0, 0, 1, 1], [0, 1, 1, 1]]})
        >>> t.image_count
        2
        >>> t.transpose().grid
        GridSize(rows=2, cols=1)
    """

    id: str
    name: str
    grid: GridSize
    placements: Tuple[Placement, ...]

    def __post_init__(self) -> None:
        """Validate that every region fits inside the grid."""
        for placement in self.placements:
            region = placement.region
            if region.row_end > self.grid.rows or region.col_end > self.grid.cols:
                raise ValueError(
                    f"Template {self.id}: region {region} exceeds grid "
                    f"{self.grid.rows}x{self.grid.cols}"
                )
            if placement.image_index < 0:
                raise ValueError(f"Template {self.id}: negative image index")

    # ─────────────────────────────────────────────────────────────────────────
    # Properties
    # ─────────────────────────────────────────────────────────────────────────

    @property
    def image_count(self) -> int:
        """Number of image slots in the template."""
        return len(self.placements)

    @property
    def description(self) -> str:
        """Short grid description for layout pickers."""
        return f"{self.grid.rows}×{self.grid.cols} grid"

    @property
    def regions(self) -> Tuple[Region, ...]:
        return tuple(p.region for p in self.placements)

    # ─────────────────────────────────────────────────────────────────────────
    # Transformations
    # ─────────────────────────────────────────────────────────────────────────

    def transpose(self) -> Template:
        """
        Structural 90° equivalent of the template.

        Swaps the grid's rows/cols and every region's row/col ranges. This is
        not a visual reflection: applying it twice restores the original.
        """
        return Template(
            id=self.id,
            name=self.name,
            grid=self.grid.transposed(),
            placements=tuple(p.transposed() for p in self.placements),
        )

    def sorted_placements(self) -> Tuple[Placement, ...]:
        """Placements ordered by image index."""
        return tuple(sorted(self.placements, key=lambda p: p.image_index))

    # ─────────────────────────────────────────────────────────────────────────
    # Serialization
    # ─────────────────────────────────────────────────────────────────────────

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the compact catalog notation."""
        cells = [
            [p.region.row_start, p.region.col_start, p.region.row_span, p.region.col_span]
            for p in self.sorted_placements()
        ]
        return {
            "id": self.id,
            "name": self.name,
            "grid": [self.grid.rows, self.grid.cols],
            "cells": cells,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Template:
        """
        Parse the compact catalog notation.

        Raises:
            ValueError: If the grid or a cell is malformed
            KeyError: If a required key is missing
        """
        rows, cols = data["grid"]
        placements = tuple(
            Placement(index, GridSpan.from_cell(row, col, row_span, col_span))
            for index, (row, col, row_span, col_span) in enumerate(data["cells"])
        )
        return cls(
            id=str(data["id"]),
            name=str(data.get("name", data["id"])),
            grid=GridSize(int(rows), int(cols)),
            placements=placements,
        )

    @classmethod
    def from_spans(
        cls,
        template_id: str,
        name: str,
        rows: int,
        cols: int,
        spans: Iterable[GridSpan],
    ) -> Template:
        """Build from spans listed in image-index order."""
        return cls(
            id=template_id,
            name=name,
            grid=GridSize(rows, cols),
            placements=tuple(Placement(i, span) for i, span in enumerate(spans)),
        )
