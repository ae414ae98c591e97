"""
Watershed Flooding

Assigns every unlabelled pixel of a marker image to one of the marker
classes by flooding the relief from the markers outward.

Label convention (LabelMap):
    0  unvisited
    1  background class
    2  foreground class
    -1 ridge between two classes

1. PriorityFlood: explicit priority-queue flooding (default)
2. OpenCV: ``cv2.watershed``, kept for comparison
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import List, Optional, Tuple
import heapq
import numpy as np
import cv2

from ..errors import InvalidParameterError
from ..logging import get_logger

logger = get_logger(__name__)

UNVISITED = 0
BACKGROUND_LABEL = 1
FOREGROUND_LABEL = 2
BOUNDARY_LABEL = -1


class WatershedMethod(Enum):
    """Available flooding implementations."""
    PRIORITY_FLOOD = "priority_flood"
    OPENCV = "opencv"


# ============================================================================
# Interface
# ============================================================================

class Watershed(ABC):
    """
    Floods a relief image from a marker LabelMap.

    Implementations return a new LabelMap in which no pixel is left
    unvisited: every pixel carries a marker label or BOUNDARY_LABEL.
    """

    @abstractmethod
    def flood(self, relief: np.ndarray, markers: np.ndarray) -> np.ndarray:
        """
        Args:
            relief: (H, W) uint8 image; lower values flood first
            markers: (H, W) int32 LabelMap, 0 = unvisited, > 0 = marker class

        Returns:
            labels: (H, W) int32 LabelMap
        """

    def __call__(self, relief: np.ndarray, markers: np.ndarray) -> np.ndarray:
        if relief.ndim != 2:
            raise InvalidParameterError(f"Relief must be 2D (H, W), got shape {relief.shape}")
        if markers.shape != relief.shape:
            raise InvalidParameterError(
                f"Markers shape {markers.shape} doesn't match relief shape {relief.shape}"
            )
        return self.flood(relief, markers)


# ============================================================================
# Priority flood
# ============================================================================

def _neighbours(index: int, h: int, w: int) -> List[int]:
    """Flat indices of the 4-neighbours of a flat index, row-major order."""
    y, x = divmod(index, w)
    result = []
    if y > 0:
        result.append(index - w)
    if x > 0:
        result.append(index - 1)
    if x < w - 1:
        result.append(index + 1)
    if y < h - 1:
        result.append(index + w)
    return result


def _marker_frontier(markers: np.ndarray) -> np.ndarray:
    """Unvisited pixels 4-adjacent to a marker, as flat indices in row-major order."""
    labelled = markers > 0
    adjacent = np.zeros_like(labelled)
    adjacent[1:, :] |= labelled[:-1, :]
    adjacent[:-1, :] |= labelled[1:, :]
    adjacent[:, 1:] |= labelled[:, :-1]
    adjacent[:, :-1] |= labelled[:, 1:]
    return np.flatnonzero(adjacent & (markers == UNVISITED))


class PriorityFloodWatershed(Watershed):
    """
    Marker-controlled watershed by priority flooding.

    The queue holds unvisited pixels bordering a labelled region, ordered by
    (relief value, insertion order). A popped pixel takes the label of its
    labelled 4-neighbours; if those neighbours carry two different labels it
    becomes a ridge (BOUNDARY_LABEL) and does not spread. Newly labelled pixels
    push their unvisited, not yet queued neighbours. Pixels the flood never
    reaches (cut off by ridges, or no markers at all) end up as ridges too.
    """

    def flood(self, relief: np.ndarray, markers: np.ndarray) -> np.ndarray:
        h, w = relief.shape
        values = relief.ravel().tolist()
        labels = markers.astype(np.int32).ravel().tolist()
        queued = [False] * (h * w)

        heap: List[Tuple[int, int, int]] = []
        order = 0
        for index in _marker_frontier(markers).tolist():
            heap.append((values[index], order, index))
            queued[index] = True
            order += 1
        heapq.heapify(heap)

        ridges = 0
        while heap:
            _, _, index = heapq.heappop(heap)
            neighbours = _neighbours(index, h, w)

            label = UNVISITED
            conflict = False
            for n in neighbours:
                other = labels[n]
                if other <= 0:
                    continue
                if label == UNVISITED:
                    label = other
                elif other != label:
                    conflict = True
                    break

            if conflict:
                labels[index] = BOUNDARY_LABEL
                ridges += 1
                continue
            if label == UNVISITED:
                continue

            labels[index] = label
            for n in neighbours:
                if labels[n] == UNVISITED and not queued[n]:
                    queued[n] = True
                    heapq.heappush(heap, (values[n], order, n))
                    order += 1

        result = np.asarray(labels, dtype=np.int32).reshape(h, w)
        unreached = result == UNVISITED
        if unreached.any():
            logger.debug("%d pixels unreachable from any marker", int(unreached.sum()))
            result[unreached] = BOUNDARY_LABEL

        logger.debug("Priority flood finished: %d ridge pixels", ridges)
        return result


# ============================================================================
# OpenCV
# ============================================================================

class OpenCVWatershed(Watershed):
    """
    ``cv2.watershed`` on the relief replicated to three channels.

    OpenCV additionally marks the one-pixel image frame as ridge.
    """

    def flood(self, relief: np.ndarray, markers: np.ndarray) -> np.ndarray:
        bgr = cv2.cvtColor(np.ascontiguousarray(relief, dtype=np.uint8), cv2.COLOR_GRAY2BGR)
        labels = np.ascontiguousarray(markers, dtype=np.int32).copy()
        cv2.watershed(bgr, labels)
        labels[labels == UNVISITED] = BOUNDARY_LABEL
        return labels


def create_watershed(method: Optional[WatershedMethod] = None) -> Watershed:
    """
    Factory function to create a flooding implementation.

    Args:
        method: Implementation to use. If None, uses PRIORITY_FLOOD.

    Raises:
        ValueError: If method is unknown
    """
    method = method or WatershedMethod.PRIORITY_FLOOD
    if method == WatershedMethod.PRIORITY_FLOOD:
        return PriorityFloodWatershed()
    elif method == WatershedMethod.OPENCV:
        return OpenCVWatershed()
    else:
        raise ValueError(f"Unknown watershed method: {method}")
