"""
Module: engine

Purpose:
    Page layout engine. Assigns rectangles to images on a fixed-size preview
    canvas, either tiling it exactly (full cover) or in centered rows with
    margins (classic), and keeps per-page layout choices across edits.

Key Functions:
    - arrange(): Full cover arrangement with the packaged catalog
    - arrange_images(): Dispatch on design style
    - arrange_preserving_layout(): Keep a page's structure after edits
    - arrange_classic(): Classic row arrangement
    - shuffle_images_in_layout(): Permute images over fixed rectangles

Key Classes:
    - LayoutSettings, PageData: Configuration
    - LayoutCatalog: Template library
    - GridTemplateGenerator: Generated spanning templates
    - FullCoverArranger: Full cover strategies
    - LayoutCycleController, LayoutStateStore: Per-page cycling
    - PageAutoDistributor: Multi-page distribution

Dependencies:
    - numpy: Coverage matrix and scoring statistics
    - jsonschema: Catalog and settings validation (via core.schemas)
    - reportlab: Page sizes (via common.page_sizes)

Used By:
    - Host applications (album editors, exporters)
"""

from .config import LayoutSettings, PageData, LayoutMode, DesignStyle
from .catalog import LayoutCatalog, LayoutChoice, CatalogError, default_catalog, load_catalog, to_pixels
from .generator import GridTemplateGenerator
from .scoring import ScoreWeights, score_row_partition, score_template, pick_best
from .row_search import generate_row_layouts
from .classic import arrange_classic
from .arranger import FullCoverArranger, RenderError, arrange
from .cycling import LayoutCycleController, LayoutStateStore, LayoutInfo
from .controller import (
    arrange_images,
    arrange_preserving_layout,
    detect_row_structure,
    place_in_rows,
)
from .distributor import PageAutoDistributor, DistributionResult, ProgressUpdate
from .borders import BorderEdges, border_edges, divider_insets
from .shuffle import shuffle_images_in_layout

__all__ = [
    # Config
    "LayoutSettings",
    "PageData",
    "LayoutMode",
    "DesignStyle",
    # Catalog
    "LayoutCatalog",
    "LayoutChoice",
    "CatalogError",
    "default_catalog",
    "load_catalog",
    "to_pixels",
    # Generation and scoring
    "GridTemplateGenerator",
    "ScoreWeights",
    "score_row_partition",
    "score_template",
    "pick_best",
    "generate_row_layouts",
    # Arrangement
    "arrange_classic",
    "FullCoverArranger",
    "RenderError",
    "arrange",
    "arrange_images",
    "arrange_preserving_layout",
    "detect_row_structure",
    "place_in_rows",
    # Cycling
    "LayoutCycleController",
    "LayoutStateStore",
    "LayoutInfo",
    # Distribution
    "PageAutoDistributor",
    "DistributionResult",
    "ProgressUpdate",
    # Borders and shuffle
    "BorderEdges",
    "border_edges",
    "divider_insets",
    "shuffle_images_in_layout",
]
