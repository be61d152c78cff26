"""
Module: engine.distributor

Purpose:
    Spread a pool of images over new pages, arranging each page as it is
    filled.

Key Classes:
    - PageAutoDistributor: Chunks the pool and arranges each chunk
    - ProgressUpdate: Progress side-channel (percent, page index)
    - DistributedPage, DistributionResult: Output

Algorithm:
    capacity = max_images_per_row * max_number_of_rows
    per_page = min(capacity, ceil(len(pool) / (max_pages - existing_pages)))
    One chunk of per_page images per new page; whatever does not fit in the
    free pages is returned as unplaced.

Concurrency:
    iter_distribute() is a generator that yields a ProgressUpdate before
    every page, so a host can interleave UI work between pages. There is no
    cancellation beyond simply not resuming the generator.

Dependencies:
    - engine.controller: arrange_images()
    - common.page_sizes: Preview canvas size

Used By:
    - Host applications (bulk "auto arrange")
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Callable, Generator, List, Optional, Sequence, Tuple

from album_layout.common.page_sizes import preview_dimensions
from album_layout.common.thresholds import DISTRIBUTION_THRESHOLDS
from album_layout.core.models.images import ImageLike, ImageRef, PositionedImage, as_image_ref

from .arranger import FullCoverArranger
from .config import PageDataLike, SettingsLike, as_settings
from .controller import arrange_images

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProgressUpdate:
    """Progress of a distribution run."""

    percent: int
    page_index: int
    total_pages: int
    message: str = ""


@dataclass(frozen=True)
class DistributedPage:
    """One new page: its images and their arrangement."""

    images: Tuple[ImageRef, ...]
    positioned: Tuple[PositionedImage, ...]


@dataclass(frozen=True)
class DistributionResult:
    """
    Result of a distribution run.

    Attributes:
        new_pages: Pages created, in order
        unplaced: Images that did not fit in the free pages
    """

    new_pages: Tuple[DistributedPage, ...] = ()
    unplaced: Tuple[ImageRef, ...] = ()

    @property
    def placed_count(self) -> int:
        return sum(len(page.images) for page in self.new_pages)


ProgressCallback = Callable[[ProgressUpdate], None]


def images_per_page(pool_size: int, free_pages: int, capacity: int) -> int:
    """
    Images to put on each new page.

    Example:
        >>> images_per_page(20, 4, 8)
        5
        >>> images_per_page(100, 4, 8)
        8
    """
    if pool_size <= 0 or free_pages <= 0:
        return 0
    return min(capacity, math.ceil(pool_size / free_pages))


class PageAutoDistributor:
    """
    Distributes an image pool over new pages.

    Args:
        arranger: Full cover arranger shared by every page
    """

    def __init__(self, arranger: Optional[FullCoverArranger] = None):
        self.arranger = arranger if arranger is not None else FullCoverArranger()

    def iter_distribute(
        self,
        pool: Sequence[ImageLike],
        existing_page_count: int,
        max_pages: int = DISTRIBUTION_THRESHOLDS.default_max_pages,
        settings: SettingsLike = None,
        page_data: PageDataLike = None,
    ) -> Generator[ProgressUpdate, None, DistributionResult]:
        """
        Distribute step by step.

        Yields a ProgressUpdate before arranging each page and a final 100%
        update; the DistributionResult is the generator's return value.

        Args:
            pool: Images to place, in order
            existing_page_count: Pages the album already has
            max_pages: Page limit of the album
            settings: Layout settings (capacity and design style)
            page_data: Per-page flags applied to every new page
        """
        settings = as_settings(settings)
        refs = [as_image_ref(item) for item in pool]
        free_pages = max_pages - existing_page_count
        if not refs:
            return DistributionResult()
        if free_pages <= 0:
            logger.warning(f"No free pages ({existing_page_count}/{max_pages}); nothing placed")
            return DistributionResult(unplaced=tuple(refs))

        per_page = images_per_page(len(refs), free_pages, settings.capacity)
        page_count = min(free_pages, math.ceil(len(refs) / per_page))
        width, height = preview_dimensions(settings)

        pages: List[DistributedPage] = []
        for page_index in range(page_count):
            yield ProgressUpdate(
                percent=int(page_index * 100 / page_count),
                page_index=page_index,
                total_pages=page_count,
                message=f"Arranging page {page_index + 1} of {page_count}",
            )
            chunk = refs[page_index * per_page:(page_index + 1) * per_page]
            positioned = arrange_images(chunk, width, height, settings, page_data, self.arranger)
            pages.append(DistributedPage(tuple(chunk), tuple(positioned)))

        unplaced = tuple(refs[page_count * per_page:])
        if unplaced:
            logger.warning(f"{len(unplaced)} image(s) did not fit in {free_pages} free page(s)")
        logger.info(f"Distributed {len(refs) - len(unplaced)} images onto {len(pages)} pages")

        yield ProgressUpdate(100, page_count, page_count, "Done")
        return DistributionResult(new_pages=tuple(pages), unplaced=unplaced)

    def distribute(
        self,
        pool: Sequence[ImageLike],
        existing_page_count: int,
        max_pages: int = DISTRIBUTION_THRESHOLDS.default_max_pages,
        settings: SettingsLike = None,
        page_data: PageDataLike = None,
        progress: Optional[ProgressCallback] = None,
    ) -> DistributionResult:
        """
        Distribute in one call, forwarding progress to a callback.

        Example:
            >>> result = PageAutoDistributor().distribute(images, 0, 3, settings)
            >>> len(result.new_pages), len(result.unplaced)
            (3, 0)
        """
        steps = self.iter_distribute(pool, existing_page_count, max_pages, settings, page_data)
        while True:
            try:
                update = next(steps)
            except StopIteration as done:
                return done.value
            if progress is not None:
                progress(update)
