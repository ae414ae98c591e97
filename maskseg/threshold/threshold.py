"""
Threshold Engine

Binarizes a grayscale image against a global level (fixed or Otsu) or a
per-pixel level derived from the pixel's neighbourhood.

Tie-break: a pixel whose intensity equals the level is always background,
for both the normal and the inverted comparison.
"""

from typing import Optional
import numpy as np
import cv2

from ..errors import InvalidParameterError
from ..image import prepare_image
from ..logging import get_logger
from ..params import AdaptiveParams, AdaptiveStatistic, ThresholdParams

logger = get_logger(__name__)


# ============================================================================
# Global threshold
# ============================================================================

def threshold(image: np.ndarray, params: Optional[ThresholdParams] = None) -> np.ndarray:
    """
    Binarize against a fixed level.

    Foreground iff ``intensity > params.threshold`` (``<`` when invert is set).

    Args:
        image: Grayscale or colour image
        params: Threshold parameters. If None, uses defaults.

    Returns:
        mask: (H, W) uint8 array with values {0, params.max_value}

    Raises:
        EmptyInputError: If image is empty
    """
    params = params or ThresholdParams()
    gray = prepare_image(image)

    if params.invert:
        selected = gray < params.threshold
    else:
        selected = gray > params.threshold

    return np.where(selected, params.max_value, 0).astype(np.uint8)


# ============================================================================
# Otsu
# ============================================================================

def otsu_level(image: np.ndarray) -> int:
    """
    Compute the Otsu level of an image.

    Every split of the 256-bin histogram into a lower class ``{i < t}`` and
    an upper class ``{i >= t}`` (t in [1, 255]) is scored by its inter-class
    variance ``w0 * w1 * (mu0 - mu1)^2``; the lowest t with the maximal score
    wins. The returned level is therefore the lowest intensity of the upper
    class.

    Args:
        image: Grayscale or colour image

    Returns:
        level: Integer in [1, 255]

    Example:
        >>> img = np.array([[50, 50, 200, 200]], dtype=np.uint8)
        >>> otsu_level(img)
        51
    """
    gray = prepare_image(image)
    hist = np.bincount(gray.ravel(), minlength=256).astype(np.float64)
    prob = hist / hist.sum()
    levels = np.arange(256, dtype=np.float64)

    # w0[t-1] / m0[t-1]: weight and first moment of the class {i < t}
    w0 = np.cumsum(prob)[:-1]
    m0 = np.cumsum(prob * levels)[:-1]
    w1 = 1.0 - w0
    total_mean = m0[-1] + prob[255] * 255.0

    with np.errstate(divide='ignore', invalid='ignore'):
        mu0 = m0 / w0
        mu1 = (total_mean - m0) / w1
        between = w0 * w1 * (mu0 - mu1) ** 2
    between[(w0 <= 0) | (w1 <= 1e-12)] = 0.0
    between = np.nan_to_num(between, nan=0.0)

    # Scores closer than float noise count as ties so the lowest t wins
    best = between.max()
    candidates = np.flatnonzero(between >= best - 1e-12 * max(best, 1.0))
    level = int(candidates[0]) + 1

    logger.debug("Otsu level %d (inter-class variance %.3f)", level, best)
    return level


def otsu_threshold(image: np.ndarray, max_value: int = 255) -> np.ndarray:
    """
    Binarize with the Otsu level.

    Pixels at or above ``otsu_level(image)`` are foreground, which is
    ``threshold`` applied at ``level - 1``.

    Args:
        image: Grayscale or colour image
        max_value: Label written to foreground pixels

    Returns:
        mask: (H, W) uint8 array with values {0, max_value}
    """
    level = otsu_level(image)
    return threshold(image, ThresholdParams(threshold=level - 1, max_value=max_value))


# ============================================================================
# Adaptive threshold
# ============================================================================

def local_statistic(gray: np.ndarray, block_size: int, statistic: AdaptiveStatistic) -> np.ndarray:
    """
    Per-pixel mean (or Gaussian-weighted mean) over a block_size x block_size
    window, with replicated borders.

    Returns:
        local: (H, W) float32 array
    """
    if block_size < 3 or block_size % 2 == 0:
        raise InvalidParameterError(f"block_size must be an odd integer >= 3, got {block_size}")

    src = gray.astype(np.float32)
    ksize = (block_size, block_size)
    if statistic is AdaptiveStatistic.GAUSSIAN:
        return cv2.GaussianBlur(src, ksize, 0, borderType=cv2.BORDER_REPLICATE)
    return cv2.blur(src, ksize, borderType=cv2.BORDER_REPLICATE)


def adaptive_threshold(image: np.ndarray, params: Optional[AdaptiveParams] = None) -> np.ndarray:
    """
    Binarize each pixel against its own neighbourhood.

    Foreground iff ``intensity > local - C`` (``<`` when invert is set), where
    ``local`` is the mean or Gaussian mean of the surrounding
    ``block_size x block_size`` window.

    Args:
        image: Grayscale or colour image
        params: Adaptive parameters. If None, uses defaults.

    Returns:
        mask: (H, W) uint8 array with values {0, params.max_value}

    Raises:
        EmptyInputError: If image is empty
        InvalidParameterError: If block_size is even or < 3
    """
    params = params or AdaptiveParams()
    gray = prepare_image(image)

    level = local_statistic(gray, params.block_size, params.statistic) - np.float32(params.c)
    pixels = gray.astype(np.float32)

    if params.invert:
        selected = pixels < level
    else:
        selected = pixels > level

    logger.debug(
        "Adaptive threshold (%s, block=%d, C=%s): %d foreground pixels",
        params.statistic.value, params.block_size, params.c, int(selected.sum())
    )
    return np.where(selected, params.max_value, 0).astype(np.uint8)
