"""Shuffle images within an existing layout.

Rectangles and their row/column metadata stay where they are; only the
image assigned to each rectangle changes. This is the only source of
randomness in the package.
"""

from __future__ import annotations

import logging
import random
from typing import List, Optional, Sequence

from album_layout.core.models.images import PositionedImage

logger = logging.getLogger(__name__)


def shuffle_images_in_layout(
    positioned: Sequence[PositionedImage],
    seed: Optional[int] = None,
) -> List[PositionedImage]:
    """
    Permute image assignment over the same rectangles.

    Args:
        positioned: Arranged page
        seed: Seed for a reproducible permutation

    Returns:
        New list, same length and rectangles in the same order
    """
    if not positioned:
        return []
    images = [item.image for item in positioned]
    random.Random(seed).shuffle(images)
    logger.debug(f"Shuffled {len(images)} images in place")
    return [slot.with_image(image) for slot, image in zip(positioned, images)]
