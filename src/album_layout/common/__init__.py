"""Common utilities shared across the layout engine."""

from __future__ import annotations

from .page_sizes import (
    PageProportion,
    SUPPORTED_PAGE_SIZES,
    page_proportion,
    page_size_mm,
    preview_dimensions,
    preview_to_mm,
    to_page_units,
)
from .logging_utils import QueueLogHandler, attach_queue_handler, detach_queue_handler

__all__ = [
    # page sizes
    "PageProportion",
    "SUPPORTED_PAGE_SIZES",
    "page_proportion",
    "page_size_mm",
    "preview_dimensions",
    "preview_to_mm",
    "to_page_units",
    # logging
    "QueueLogHandler",
    "attach_queue_handler",
    "detach_queue_handler",
]
