"""
Region Growing Engine

Frontier-based flood fill. A neighbour joins the region when its intensity
differs from the pixel that reached it by at most ``tolerance``; the test is
local (against the current frontier pixel), not against the seed.

The admission test is symmetric and does not depend on which region pixel is
examined first, so the grown set is the connected component of the seed in
the graph whose edges join neighbours within tolerance. Visitation order
therefore never changes the result, and a larger tolerance can only add
pixels.
"""

from typing import List, Optional, Tuple
import numpy as np

from ..errors import NoSeedsError
from ..image import prepare_image
from ..logging import get_logger
from ..params import RegionGrowingParams, check_seeds_in_bounds

logger = get_logger(__name__)

# Row-major scan order, (dy, dx)
_OFFSETS_4: Tuple[Tuple[int, int], ...] = ((-1, 0), (0, -1), (0, 1), (1, 0))
_OFFSETS_8: Tuple[Tuple[int, int], ...] = (
    (-1, -1), (-1, 0), (-1, 1),
    (0, -1), (0, 1),
    (1, -1), (1, 0), (1, 1),
)


def neighbour_offsets(connectivity: int) -> Tuple[Tuple[int, int], ...]:
    """(dy, dx) offsets of the 4- or 8-neighbourhood in row-major order."""
    return _OFFSETS_4 if connectivity == 4 else _OFFSETS_8


def region_growing(image: np.ndarray, params: Optional[RegionGrowingParams] = None) -> np.ndarray:
    """
    Grow foreground regions from seed points.

    Seeds are processed in insertion order; a seed already claimed by an
    earlier region is skipped. The frontier is a stack of flat pixel indices
    (``y * width + x``) over a dense claimed bitmap.

    Args:
        image: Grayscale or colour image
        params: Seeds, tolerance and connectivity

    Returns:
        mask: (H, W) uint8 array with values {0, 255}

    Raises:
        EmptyInputError: If image is empty
        NoSeedsError: If params has no seeds
        InvalidParameterError: If a seed lies outside the image
    """
    params = params or RegionGrowingParams()
    if not params.seeds:
        raise NoSeedsError("No seeds provided for region growing")

    gray = prepare_image(image)
    h, w = gray.shape
    check_seeds_in_bounds(params.seeds, h, w)

    intensity = gray.ravel().astype(np.int16)
    claimed = np.zeros(h * w, dtype=bool)
    offsets = neighbour_offsets(params.connectivity)
    tolerance = params.tolerance

    for seed in params.seeds:
        start = seed.y * w + seed.x
        if claimed[start]:
            logger.debug("Seed (%d, %d) already inside a grown region", seed.x, seed.y)
            continue

        grown = 0
        stack: List[int] = [start]
        while stack:
            current = stack.pop()
            if claimed[current]:
                continue
            claimed[current] = True
            grown += 1

            cy, cx = divmod(current, w)
            value = intensity[current]
            for dy, dx in offsets:
                ny = cy + dy
                nx = cx + dx
                if ny < 0 or ny >= h or nx < 0 or nx >= w:
                    continue
                neighbour = ny * w + nx
                if claimed[neighbour]:
                    continue
                if abs(int(intensity[neighbour]) - int(value)) <= tolerance:
                    stack.append(neighbour)

        logger.debug("Region from seed (%d, %d): %d pixels", seed.x, seed.y, grown)

    return (claimed.reshape(h, w).astype(np.uint8)) * 255
