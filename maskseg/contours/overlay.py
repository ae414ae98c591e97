"""
Overlay Renderer

Alpha-blends a highlight colour over the foreground of a mask and outlines
every component on top of the blend.
"""

from dataclasses import dataclass
from typing import Optional, Tuple
import numpy as np
import cv2

from ..errors import InvalidParameterError
from ..image import as_binary, to_bgr
from .contour_extractor import get_contours


@dataclass
class OverlayStyle:
    """
    Appearance of the segmentation overlay.

    Attributes:
        color: Highlight colour, BGR
        contour_color: Outline colour, BGR. None uses the highlight colour.
        contour_thickness: Outline width in pixels; 0 disables outlines
        contour_gain: Outline opacity relative to alpha, capped at 1
    """
    color: Tuple[int, int, int] = (0, 0, 255)
    contour_color: Optional[Tuple[int, int, int]] = None
    contour_thickness: int = 1
    contour_gain: float = 2.0

    def __post_init__(self):
        """Validate configuration parameters."""
        if self.contour_thickness < 0:
            raise InvalidParameterError(
                f"contour_thickness must be >= 0, got {self.contour_thickness}"
            )
        if self.contour_gain < 0:
            raise InvalidParameterError(f"contour_gain must be >= 0, got {self.contour_gain}")


def draw_segmentation(
    image: np.ndarray,
    mask: np.ndarray,
    alpha: float = 0.5,
    style: Optional[OverlayStyle] = None
) -> np.ndarray:
    """
    Render a mask over its source image.

    Foreground pixels become ``alpha * color + (1 - alpha) * pixel``.
    Outlines are then blended in with weight ``min(1, alpha * contour_gain)``,
    so alpha = 0 returns the (BGR) input unchanged and alpha = 1 paints the
    foreground entirely in the highlight colour when the outline colour is the
    highlight colour.

    Args:
        image: Grayscale or BGR source image
        mask: (H, W) mask of the same size, any non-zero value is foreground
        alpha: Blend weight of the highlight colour, in [0, 1]
        style: Colours and outline settings. If None, uses defaults.

    Returns:
        overlay: New (H, W, 3) uint8 BGR image

    Raises:
        InvalidParameterError: If alpha is outside [0, 1] or the mask size
                               differs from the image size
    """
    if not 0.0 <= alpha <= 1.0:
        raise InvalidParameterError(f"alpha must be in [0, 1], got {alpha}")
    style = style or OverlayStyle()

    result = to_bgr(image)
    binary = as_binary(mask)
    if binary.shape != result.shape[:2]:
        raise InvalidParameterError(
            f"Mask shape {binary.shape} doesn't match image shape {result.shape[:2]}"
        )

    foreground = binary > 0
    overlay = result.copy()
    overlay[foreground] = style.color
    result = cv2.addWeighted(overlay, alpha, result, 1.0 - alpha, 0)

    contour_alpha = min(1.0, alpha * style.contour_gain)
    if style.contour_thickness > 0 and contour_alpha > 0:
        contours = [c.as_cv() for c in get_contours(binary)]
        if contours:
            outlined = result.copy()
            color = style.contour_color or style.color
            cv2.drawContours(outlined, contours, -1, color, style.contour_thickness)
            result = cv2.addWeighted(outlined, contour_alpha, result, 1.0 - contour_alpha, 0)

    return result
