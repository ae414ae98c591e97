"""
Contour extraction and overlay rendering for segmentation masks.
"""

from .contour_extractor import ContourApproximation, Contour, get_contours
from .overlay import OverlayStyle, draw_segmentation

__all__ = [
    'ContourApproximation',
    'Contour',
    'get_contours',
    'OverlayStyle',
    'draw_segmentation'
]
