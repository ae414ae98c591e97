"""
Segmentation dispatch.

Routes a method and its parameters to the matching engine and runs the raw
mask through the morphological post-processor. Each method has a segmenter
class; ``create_segmenter`` picks one and ``segment`` is the one-call form.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field, replace
from typing import Dict, Optional, Type
import time
import numpy as np

from .errors import InvalidParameterError
from .image import prepare_image
from .logging import get_logger
from .params import (
    AdaptiveParams,
    AdaptiveStatistic,
    Method,
    RegionGrowingParams,
    SegmentationParams,
    ThresholdParams,
    WatershedParams,
)
from .postprocess import post_process
from .region_growing import region_growing
from .threshold import adaptive_threshold, otsu_threshold, threshold
from .watershed import DistanceTransform, Watershed, watershed

logger = get_logger(__name__)


# ============================================================================
# Results
# ============================================================================

@dataclass
class SegmentationResult:
    """
    Output of one segmentation call.

    Attributes:
        mask: Post-processed binary mask (H, W), uint8
        method: Method that produced it
        params: Parameters used (None for Otsu)
        elapsed_time: Wall-clock seconds, engine plus post-processing
        metadata: Optional details about the run
    """
    mask: np.ndarray
    method: Method
    params: Optional[SegmentationParams] = None
    elapsed_time: float = 0.0
    metadata: Dict[str, object] = field(default_factory=dict)

    def foreground_pixels(self) -> int:
        """Number of foreground pixels in the mask."""
        return int(np.count_nonzero(self.mask))

    def foreground_ratio(self) -> float:
        """Ratio of foreground to total pixels."""
        total = self.mask.size
        return self.foreground_pixels() / total if total > 0 else 0.0

    def __str__(self) -> str:
        return (
            f"SegmentationResult(method={self.method.value}, "
            f"foreground={self.foreground_ratio() * 100:.1f}%, "
            f"time={self.elapsed_time * 1000:.1f}ms)"
        )


# ============================================================================
# Segmenters
# ============================================================================

class BaseSegmenter(ABC):
    """
    One segmentation method bound to its parameters.

    Subclasses implement ``segment_raw``; ``segment`` adds post-processing
    and timing.
    """

    method: Method
    params_type: Optional[Type] = None

    def __init__(self, params: Optional[SegmentationParams] = None):
        if params is None and self.params_type is not None:
            params = self.params_type()
        if self.params_type is not None and not isinstance(params, self.params_type):
            raise InvalidParameterError(
                f"{self.method.value} expects {self.params_type.__name__}, "
                f"got {type(params).__name__}"
            )
        self.params = params

    @abstractmethod
    def segment_raw(self, image: np.ndarray) -> np.ndarray:
        """
        Run the engine without post-processing.

        Args:
            image: Grayscale or colour image

        Returns:
            mask: Raw (H, W) uint8 mask
        """

    def segment(self, image: np.ndarray) -> SegmentationResult:
        """
        Run the engine and clean its mask.

        Args:
            image: Grayscale or colour image

        Returns:
            result: SegmentationResult with the post-processed mask
        """
        start_time = time.time()
        gray = prepare_image(image)
        raw = self.segment_raw(gray)
        mask = post_process(raw)
        elapsed_time = time.time() - start_time

        result = SegmentationResult(
            mask=mask,
            method=self.method,
            params=self.params,
            elapsed_time=elapsed_time,
            metadata={'raw_foreground_pixels': int(np.count_nonzero(raw))}
        )
        logger.debug("%s", result)
        return result


class ThresholdSegmenter(BaseSegmenter):
    """Fixed global threshold."""
    method = Method.THRESHOLD
    params_type = ThresholdParams

    def segment_raw(self, image: np.ndarray) -> np.ndarray:
        return threshold(image, self.params)


class OtsuSegmenter(BaseSegmenter):
    """Otsu global threshold; takes no parameters."""
    method = Method.OTSU

    def __init__(self, params: Optional[SegmentationParams] = None):
        if params is not None:
            raise InvalidParameterError(
                f"otsu takes no parameters, got {type(params).__name__}"
            )
        super().__init__(None)

    def segment_raw(self, image: np.ndarray) -> np.ndarray:
        return otsu_threshold(image)


class AdaptiveSegmenter(BaseSegmenter):
    """
    Adaptive threshold; the method decides the local statistic.
    """
    params_type = AdaptiveParams

    def __init__(self, params: Optional[AdaptiveParams] = None, method: Method = Method.ADAPTIVE_MEAN):
        if method not in (Method.ADAPTIVE_MEAN, Method.ADAPTIVE_GAUSSIAN):
            raise InvalidParameterError(f"Not an adaptive method: {method}")
        self.method = method
        super().__init__(params)
        statistic = (
            AdaptiveStatistic.GAUSSIAN if method == Method.ADAPTIVE_GAUSSIAN
            else AdaptiveStatistic.MEAN
        )
        if self.params.statistic is not statistic:
            self.params = replace(self.params, statistic=statistic)

    def segment_raw(self, image: np.ndarray) -> np.ndarray:
        return adaptive_threshold(image, self.params)


class RegionGrowingSegmenter(BaseSegmenter):
    """Seeded region growing."""
    method = Method.REGION_GROWING
    params_type = RegionGrowingParams

    def segment_raw(self, image: np.ndarray) -> np.ndarray:
        return region_growing(image, self.params)


class WatershedSegmenter(BaseSegmenter):
    """
    Marker-controlled watershed with swappable distance transform and
    flooding implementations.
    """
    method = Method.WATERSHED
    params_type = WatershedParams

    def __init__(
        self,
        params: Optional[WatershedParams] = None,
        transform: Optional[DistanceTransform] = None,
        flooding: Optional[Watershed] = None
    ):
        super().__init__(params)
        self.transform = transform
        self.flooding = flooding

    def segment_raw(self, image: np.ndarray) -> np.ndarray:
        return watershed(image, self.params, self.transform, self.flooding)


# ============================================================================
# Factory
# ============================================================================

_SEGMENTERS: Dict[Method, Type[BaseSegmenter]] = {
    Method.THRESHOLD: ThresholdSegmenter,
    Method.OTSU: OtsuSegmenter,
    Method.REGION_GROWING: RegionGrowingSegmenter,
    Method.WATERSHED: WatershedSegmenter,
}


def create_segmenter(method: Method, params: Optional[SegmentationParams] = None) -> BaseSegmenter:
    """
    Factory function to create a segmenter.

    Args:
        method: Segmentation method (a Method or its string value)
        params: Parameters matching the method. If None, uses the method's defaults.

    Returns:
        segmenter: BaseSegmenter subclass instance

    Raises:
        InvalidParameterError: If method is unknown or params has the wrong type

    Example:
        >>> segmenter = create_segmenter(Method.REGION_GROWING,
        ...                              RegionGrowingParams(seeds=[(10, 10)]))
        >>> result = segmenter.segment(image)
        >>> mask = result.mask
    """
    if isinstance(method, str):
        try:
            method = Method(method)
        except ValueError:
            raise InvalidParameterError(f"Unknown segmentation method: {method!r}")

    if method in (Method.ADAPTIVE_MEAN, Method.ADAPTIVE_GAUSSIAN):
        return AdaptiveSegmenter(params, method)
    if method not in _SEGMENTERS:
        raise InvalidParameterError(f"Unknown segmentation method: {method!r}")
    return _SEGMENTERS[method](params)


def segment(image: np.ndarray, method: Method, params: Optional[SegmentationParams] = None) -> np.ndarray:
    """
    Segment an image and return the post-processed mask.

    Args:
        image: Grayscale or colour image
        method: Segmentation method
        params: Parameters matching the method. If None, uses defaults.

    Returns:
        mask: (H, W) uint8 binary mask

    Raises:
        EmptyInputError: If image is empty
        InvalidParameterError: If params are malformed or don't match method
        NoSeedsError: If region growing has no seeds
        NoMarkersError: If manual watershed has no seeds
    """
    return create_segmenter(method, params).segment(image).mask


__all__ = [
    'SegmentationResult',
    'BaseSegmenter',
    'ThresholdSegmenter',
    'OtsuSegmenter',
    'AdaptiveSegmenter',
    'RegionGrowingSegmenter',
    'WatershedSegmenter',
    'create_segmenter',
    'segment',
]
