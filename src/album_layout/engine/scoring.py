"""
Module: engine.scoring

Purpose:
    Score candidate arrangements against the real image set and page
    geometry. Higher is better; with the default weights a score lies in
    [0, 1.2].

Key Functions:
    - cell_size_score(): Penalize cells smaller than 1/6 or larger than 1/2
      of a page side
    - orientation_score(): Favor columns on landscape, rows on portrait
    - aspect_fit_score(): Symmetric ratio of image and cell aspect
    - balance_score(): Closeness of each row's count to the mean
    - cell_aspect_score(): Non-linear penalty beyond 2:1 cells
    - score_row_partition(): Strategy for images-per-row candidates
    - score_template(): Strategy for spanning templates
    - pick_best(): Max score, ties resolved by generation order

Dependencies:
    - numpy: Row statistics and score aggregation
    - common.thresholds: Fractions and neutral scores

Used By:
    - engine.arranger: GRID and FLEXIBLE selection
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional, Sequence, Tuple, TypeVar

import numpy as np

from album_layout.common.thresholds import SCORING_THRESHOLDS
from album_layout.core.models.images import ImageRef
from album_layout.core.models.templates import Template

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class ScoreWeights:
    """
    Weight vector combining the scoring dimensions.

    The default weights sum to 1.2, the maximum possible score.
    """

    cell_size: float = 0.2
    orientation: float = 0.15
    aspect_fit: float = 0.4
    balance: float = 0.15
    cell_aspect: float = 0.3

    @property
    def total(self) -> float:
        return self.cell_size + self.orientation + self.aspect_fit + self.balance + self.cell_aspect


DEFAULT_WEIGHTS = ScoreWeights()


# ─────────────────────────────────────────────────────────────────────────────
# Scoring dimensions
# ─────────────────────────────────────────────────────────────────────────────


def _fraction_score(fraction: float) -> float:
    low = SCORING_THRESHOLDS.min_cell_fraction
    high = SCORING_THRESHOLDS.max_cell_fraction
    if fraction <= 0:
        return 0.0
    if fraction < low:
        return fraction / low
    if fraction > high:
        return high / fraction
    return 1.0


def cell_size_score(cell_width: float, cell_height: float, page_width: float, page_height: float) -> float:
    """
    Cell size adequacy in [0, 1].

    Each side is compared with the matching page side. Fractions between
    1/6 and 1/2 score 1; outside that band the score falls off linearly.

    Example:
        >>> cell_size_score(160, 100, 480, 340)
        1.0
    """
    if page_width <= 0 or page_height <= 0:
        return 0.0
    return (_fraction_score(cell_width / page_width) + _fraction_score(cell_height / page_height)) / 2


def orientation_score(rows: int, cols: int, is_portrait: bool) -> float:
    """
    Page orientation compatibility.

    Landscape pages prefer more columns than rows, portrait pages the
    reverse. Square arrangements are neutral.
    """
    if rows == cols:
        return SCORING_THRESHOLDS.neutral_orientation_score
    favored = rows > cols if is_portrait else cols > rows
    if favored:
        return SCORING_THRESHOLDS.preferred_orientation_score
    return SCORING_THRESHOLDS.against_orientation_score


def aspect_fit_score(image_aspect: Optional[float], cell_aspect: float) -> float:
    """
    Symmetric fit between image and cell aspect ratios.

    Returns min(a/b, b/a) in (0, 1]. Images with unknown dimensions get
    the neutral score.

    Example:
        >>> aspect_fit_score(1.5, 1.5)
        1.0
        >>> aspect_fit_score(None, 2.0)
        0.7
    """
    if image_aspect is None or image_aspect <= 0 or cell_aspect <= 0:
        return SCORING_THRESHOLDS.neutral_aspect_score
    return min(image_aspect / cell_aspect, cell_aspect / image_aspect)


def balance_score(row_counts: Sequence[int]) -> float:
    """
    Distribution balance in [0, 1].

    One minus the mean absolute deviation from the mean row count,
    relative to the mean.

    Example:
        >>> balance_score([2, 2])
        1.0
        >>> balance_score([3, 1])
        0.5
    """
    counts = np.asarray(row_counts, dtype=float)
    if counts.size <= 1:
        return 1.0
    mean = counts.mean()
    if mean <= 0:
        return 0.0
    deviation = np.abs(counts - mean).mean() / mean
    return float(max(0.0, 1.0 - deviation))


def cell_aspect_score(cell_width: float, cell_height: float) -> float:
    """
    Cell aspect reasonableness in [0, 1].

    Cells up to 2:1 (either way) score 1; beyond that the score decays with
    the square of the excess ratio.
    """
    if cell_width <= 0 or cell_height <= 0:
        return 0.0
    ratio = max(cell_width / cell_height, cell_height / cell_width)
    limit = SCORING_THRESHOLDS.max_comfortable_cell_ratio
    if ratio <= limit:
        return 1.0
    return (limit / ratio) ** 2


# ─────────────────────────────────────────────────────────────────────────────
# Strategies
# ─────────────────────────────────────────────────────────────────────────────


def _combine(
    cells: List[Tuple[float, float, Optional[float]]],
    rows: int,
    cols: int,
    row_counts: Sequence[int],
    width: float,
    height: float,
    weights: ScoreWeights,
) -> float:
    """Weighted sum over per-cell (width, height, image aspect) triples."""
    if not cells:
        return 0.0
    size = np.mean([cell_size_score(w, h, width, height) for w, h, _ in cells])
    fit = np.mean([aspect_fit_score(ar, w / h if h > 0 else 0.0) for w, h, ar in cells])
    shape = np.mean([cell_aspect_score(w, h) for w, h, _ in cells])
    return float(
        weights.cell_size * size
        + weights.orientation * orientation_score(rows, cols, height > width)
        + weights.aspect_fit * fit
        + weights.balance * balance_score(row_counts)
        + weights.cell_aspect * shape
    )


def score_row_partition(
    rows: Sequence[int],
    images: Sequence[ImageRef],
    width: float,
    height: float,
    weights: ScoreWeights = DEFAULT_WEIGHTS,
) -> float:
    """
    Score an images-per-row partition.

    Rows share the height equally; cells share their row's width equally.

    Args:
        rows: Images per row, e.g. (2, 2)
        images: Images in placement order
        width: Usable width
        height: Usable height
        weights: Weight vector

    Returns:
        Weighted score (0 for an empty partition)
    """
    if not rows or height <= 0 or width <= 0:
        return 0.0

    row_height = height / len(rows)
    cells: List[Tuple[float, float, Optional[float]]] = []
    index = 0
    for in_row in rows:
        cell_width = width / in_row
        for _ in range(in_row):
            aspect = images[index].aspect_ratio if index < len(images) else None
            cells.append((cell_width, row_height, aspect))
            index += 1

    return _combine(cells, len(rows), max(rows), rows, width, height, weights)


def score_template(
    template: Template,
    images: Sequence[ImageRef],
    width: float,
    height: float,
    weights: ScoreWeights = DEFAULT_WEIGHTS,
) -> float:
    """
    Score a spanning template.

    Balance is measured on the number of regions starting in each grid row
    that starts at least one region.
    """
    if width <= 0 or height <= 0 or not template.placements:
        return 0.0

    cell_w = width / template.grid.cols
    cell_h = height / template.grid.rows
    cells: List[Tuple[float, float, Optional[float]]] = []
    for placement in template.sorted_placements():
        region = placement.region
        aspect = images[placement.image_index].aspect_ratio if placement.image_index < len(images) else None
        cells.append((region.col_span * cell_w, region.row_span * cell_h, aspect))

    starts = np.bincount([r.row_start for r in template.regions], minlength=template.grid.rows)
    row_counts = [int(n) for n in starts if n > 0]
    return _combine(
        cells, template.grid.rows, template.grid.cols, row_counts, width, height, weights
    )


def pick_best(candidates: Iterable[T], score_fn: Callable[[T], float]) -> Optional[Tuple[T, float]]:
    """
    Highest scoring candidate.

    Ties keep the earliest candidate (strict comparison), which makes
    selection deterministic for a stable candidate order.

    Returns:
        (candidate, score), or None when there are no candidates
    """
    best: Optional[Tuple[T, float]] = None
    for candidate in candidates:
        score = score_fn(candidate)
        if best is None or score > best[1]:
            best = (candidate, score)
    if best is not None:
        logger.debug(f"Best candidate {best[0]!r:.60} scored {best[1]:.3f}")
    return best
