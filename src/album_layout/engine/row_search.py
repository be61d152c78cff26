"""Bounded enumeration of images-per-row combinations.

Used by GRID mode and by the cycling controller. The search is a depth-first
enumeration with per-row min/max pruning derived from the images and rows
remaining, plus a hard cap on the number of combinations produced.
"""

from __future__ import annotations

import logging
import math
from typing import List, Optional, Tuple

from album_layout.common.thresholds import SEARCH_THRESHOLDS

logger = logging.getLogger(__name__)

RowLayout = Tuple[int, ...]


def generate_row_layouts(
    total: int,
    max_per_row: int,
    max_rows: int,
    limit: Optional[int] = None,
) -> List[RowLayout]:
    """
    Enumerate every images-per-row layout for a total.

    Layouts are ordered by row count, then lexicographically, e.g. for
    4 images with at most 4 per row and 2 rows:
    (4,), (1, 3), (2, 2), (3, 1).

    Args:
        total: Number of images
        max_per_row: Upper bound on images in a row
        max_rows: Upper bound on rows
        limit: Stop after this many layouts (defaults to
            SEARCH_THRESHOLDS.max_row_combinations)

    Returns:
        Layouts whose rows are each in [1, max_per_row] and sum to total.
        Empty when total exceeds max_per_row * max_rows.
    """
    if total <= 0 or max_per_row <= 0 or max_rows <= 0:
        return []
    if limit is None:
        limit = SEARCH_THRESHOLDS.max_row_combinations

    layouts: List[RowLayout] = []
    current: List[int] = []

    def extend(remaining: int, rows_left: int) -> bool:
        # Returns False when another layout exists past the cap
        if rows_left == 0:
            if remaining == 0:
                if len(layouts) >= limit:
                    return False
                layouts.append(tuple(current))
            return True

        low = max(1, remaining - (rows_left - 1) * max_per_row)
        high = min(max_per_row, remaining - (rows_left - 1))
        for in_row in range(low, high + 1):
            current.append(in_row)
            keep_going = extend(remaining - in_row, rows_left - 1)
            current.pop()
            if not keep_going:
                return False
        return True

    for row_count in range(1, min(max_rows, total) + 1):
        if not extend(total, row_count):
            logger.warning(
                f"Row layout search stopped at {limit} combinations "
                f"({total} images, {max_per_row} per row, {max_rows} rows)"
            )
            break

    return layouts


def basic_grid_rows(total: int, max_per_row: int) -> RowLayout:
    """
    Balanced rows when no bounded layout exists.

    Uses as few rows as max_per_row allows and spreads the images so row
    sizes differ by at most one.

    Example:
        >>> basic_grid_rows(10, 4)
        (4, 3, 3)
    """
    if total <= 0:
        return ()
    per_row = max(1, max_per_row)
    rows = math.ceil(total / per_row)
    base, extra = divmod(total, rows)
    return tuple(base + 1 if i < extra else base for i in range(rows))
