"""
Watershed marker construction.

Auto mode derives markers from the image itself (Otsu + distance transform);
manual mode paints small disks around user-supplied seed points.
"""

from typing import Optional
import numpy as np
import cv2

from ..errors import NoMarkersError
from ..logging import get_logger
from ..params import WatershedParams, check_seeds_in_bounds
from ..threshold import otsu_threshold
from .distance import DistanceTransform, create_distance_transform, normalize_distance
from .flooding import BACKGROUND_LABEL, FOREGROUND_LABEL

logger = get_logger(__name__)


def build_auto_markers(
    gray: np.ndarray,
    params: Optional[WatershedParams] = None,
    transform: Optional[DistanceTransform] = None
) -> np.ndarray:
    """
    Derive markers from the image.

    1. Binarize with Otsu
    2. Distance transform of the foreground, normalised to [0, 1]
    3. Normalised distance > distance_threshold -> foreground marker
    4. Otsu foreground dilated dilation_iterations times with a 3x3 square,
       then inverted -> background marker

    Args:
        gray: (H, W) uint8 image
        params: Supplies distance_threshold and dilation_iterations
        transform: Distance transform implementation. If None, uses the default.

    Returns:
        markers: (H, W) int32 LabelMap with values {0, 1, 2}
    """
    params = params or WatershedParams()
    transform = transform or create_distance_transform()

    binary = otsu_threshold(gray)
    distance = normalize_distance(transform(binary))
    foreground = distance > params.distance_threshold

    kernel = np.ones((3, 3), dtype=np.uint8)
    dilated = cv2.dilate(binary, kernel, iterations=params.dilation_iterations)
    background = dilated == 0

    markers = np.zeros(gray.shape, dtype=np.int32)
    markers[background] = BACKGROUND_LABEL
    markers[foreground] = FOREGROUND_LABEL

    n_fg = int(foreground.sum())
    n_bg = int(background.sum())
    if n_fg == 0:
        logger.warning("Automatic markers: no pixel passed the distance threshold %.2f",
                       params.distance_threshold)
    logger.debug("Automatic markers: %d foreground, %d background", n_fg, n_bg)
    return markers


def build_manual_markers(gray: np.ndarray, params: WatershedParams) -> np.ndarray:
    """
    Paint a filled disk of seed_radius around every seed.

    Background disks are painted first, so a foreground disk wins where the
    two overlap.

    Args:
        gray: (H, W) image, only its shape is used
        params: Seed lists and seed_radius

    Returns:
        markers: (H, W) int32 LabelMap with values {0, 1, 2}

    Raises:
        NoMarkersError: If both seed lists are empty
        InvalidParameterError: If a seed lies outside the image
    """
    if not params.foreground_seeds and not params.background_seeds:
        raise NoMarkersError("No valid markers or seeds provided for watershed")

    h, w = gray.shape[:2]
    check_seeds_in_bounds(params.seeds, h, w)

    markers = np.zeros((h, w), dtype=np.int32)
    for seed in params.background_seeds:
        cv2.circle(markers, (seed.x, seed.y), params.seed_radius, BACKGROUND_LABEL, thickness=-1)
    for seed in params.foreground_seeds:
        cv2.circle(markers, (seed.x, seed.y), params.seed_radius, FOREGROUND_LABEL, thickness=-1)

    logger.debug(
        "Manual markers: %d foreground seeds, %d background seeds",
        len(params.foreground_seeds), len(params.background_seeds)
    )
    return markers
