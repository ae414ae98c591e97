"""
Contour Extraction

Traces the outer boundary of every 8-connected foreground component of a
mask using OpenCV's border following. Holes inside a component produce no
contour of their own.
"""

from dataclasses import dataclass
from enum import Enum
from typing import List, Tuple
import numpy as np
import cv2

from ..image import as_binary


class ContourApproximation(Enum):
    """How many boundary points are kept per contour."""
    NONE = "none"      # every boundary pixel
    SIMPLE = "simple"  # end points of horizontal, vertical and diagonal runs


_CV_APPROXIMATION = {
    ContourApproximation.NONE: cv2.CHAIN_APPROX_NONE,
    ContourApproximation.SIMPLE: cv2.CHAIN_APPROX_SIMPLE,
}


@dataclass
class Contour:
    """
    Ordered outer boundary of one foreground component.

    Attributes:
        points: (N, 2) int32 array of (x, y) pixel coordinates
    """
    points: np.ndarray

    def __len__(self) -> int:
        return int(self.points.shape[0])

    @property
    def bounding_box(self) -> Tuple[int, int, int, int]:
        """(x, y, width, height) of the smallest axis-aligned box holding the contour."""
        x, y, w, h = cv2.boundingRect(self.points.reshape(-1, 1, 2))
        return int(x), int(y), int(w), int(h)

    @property
    def area(self) -> float:
        """Area enclosed by the polygon through the points (Green's formula)."""
        return float(cv2.contourArea(self.points.reshape(-1, 1, 2)))

    def as_cv(self) -> np.ndarray:
        """Points in OpenCV's (N, 1, 2) layout."""
        return self.points.reshape(-1, 1, 2)

    def __str__(self) -> str:
        x, y, w, h = self.bounding_box
        return f"Contour(points={len(self)}, box=({x}, {y}, {w}, {h}))"


def get_contours(
    mask: np.ndarray,
    approximation: ContourApproximation = ContourApproximation.SIMPLE
) -> List[Contour]:
    """
    Extract the outer contour of every foreground component.

    Contours are sorted by the top-left corner of their bounding box
    (top to bottom, then left to right).

    Args:
        mask: (H, W) mask, any non-zero value is foreground
        approximation: Point compression of each contour

    Returns:
        contours: One Contour per component; empty list for an empty mask

    Raises:
        EmptyInputError: If mask is zero-sized
        InvalidParameterError: If mask is not 2D
    """
    binary = as_binary(mask)
    if not binary.any():
        return []

    found, _ = cv2.findContours(binary, cv2.RETR_EXTERNAL, _CV_APPROXIMATION[approximation])
    contours = [Contour(points=c.reshape(-1, 2).astype(np.int32)) for c in found]
    contours.sort(key=lambda c: (c.bounding_box[1], c.bounding_box[0]))
    return contours
