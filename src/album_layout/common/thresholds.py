"""Centralized threshold and magic number configuration.

This module contains the hardcoded thresholds, ratios, and step sizes used
by the layout engine. Having these in one place makes tuning easier and
documents what each value controls.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class TemplateThresholds:
    """Thresholds for template validation and generation."""

    min_cell_efficiency: float = 0.7  # Covered cells / grid cells accepted at authoring time
    max_featured_count: int = 6  # Above this the generator emits a plain balanced grid


@dataclass
class ScoringThresholds:
    """Thresholds used by the layout scorer."""

    min_cell_fraction: float = 1 / 6  # Cells smaller than this share of a page side are penalized
    max_cell_fraction: float = 1 / 2  # Cells larger than this share of a page side are penalized
    neutral_aspect_score: float = 0.7  # Aspect fit for images with unknown dimensions
    max_comfortable_cell_ratio: float = 2.0  # Width:height beyond this is penalized non-linearly
    preferred_orientation_score: float = 1.0
    neutral_orientation_score: float = 0.8
    against_orientation_score: float = 0.5


@dataclass
class SearchThresholds:
    """Limits for bounded searches."""

    max_row_combinations: int = 5000  # Hard stop for row-combination enumeration


@dataclass
class ClassicThresholds:
    """Thresholds for the classic (margined) row planner."""

    start_height_ratio: float = 0.8  # Search starts at 80% of available height
    min_height_ratio: float = 0.3  # Search stops at 30% of the start height
    height_step_px: float = 10.0  # Downward search step


@dataclass
class DistributionThresholds:
    """Defaults for spreading an image pool across pages."""

    default_max_pages: int = 50


# Global instances for easy import
TEMPLATE_THRESHOLDS = TemplateThresholds()
SCORING_THRESHOLDS = ScoringThresholds()
SEARCH_THRESHOLDS = SearchThresholds()
CLASSIC_THRESHOLDS = ClassicThresholds()
DISTRIBUTION_THRESHOLDS = DistributionThresholds()
