"""
maskseg - Binary mask segmentation for grayscale images.

Converts a grayscale image into a foreground/background mask with global,
Otsu or adaptive thresholding, seeded region growing, or marker-controlled
watershed, cleans the mask morphologically, and extracts/visualises its
contours.

Example:
    >>> from maskseg import segment, Method, WatershedParams, draw_segmentation
    >>> mask = segment(image, Method.WATERSHED, WatershedParams())
    >>> overlay = draw_segmentation(image, mask, alpha=0.4)
"""

from .errors import (
    SegmentationError,
    EmptyInputError,
    InvalidParameterError,
    NoSeedsError,
    NoMarkersError
)
from .params import (
    Method,
    AdaptiveStatistic,
    Relief,
    SeedLabel,
    Seed,
    ThresholdParams,
    AdaptiveParams,
    RegionGrowingParams,
    WatershedParams
)
from .image import prepare_image
from .threshold import threshold, otsu_level, otsu_threshold, adaptive_threshold
from .region_growing import region_growing
from .watershed import watershed, watershed_labels
from .postprocess import post_process
from .contours import Contour, ContourApproximation, OverlayStyle, get_contours, draw_segmentation
from .segmentation import SegmentationResult, create_segmenter, segment

__version__ = "0.1.0"

__all__ = [
    # Errors
    'SegmentationError',
    'EmptyInputError',
    'InvalidParameterError',
    'NoSeedsError',
    'NoMarkersError',
    # Parameters
    'Method',
    'AdaptiveStatistic',
    'Relief',
    'SeedLabel',
    'Seed',
    'ThresholdParams',
    'AdaptiveParams',
    'RegionGrowingParams',
    'WatershedParams',
    # Engines
    'prepare_image',
    'threshold',
    'otsu_level',
    'otsu_threshold',
    'adaptive_threshold',
    'region_growing',
    'watershed',
    'watershed_labels',
    'post_process',
    # Contours and overlay
    'Contour',
    'ContourApproximation',
    'OverlayStyle',
    'get_contours',
    'draw_segmentation',
    # Dispatch
    'SegmentationResult',
    'create_segmenter',
    'segment',
]
