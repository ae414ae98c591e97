"""
Marker-controlled watershed.

Provides:
1. Distance transforms (Felzenszwalb, SciPy) behind a common interface
2. Marker construction (automatic or from seed points)
3. Flooding (priority flood, OpenCV) behind a common interface
4. The watershed operation itself
"""

from .distance import (
    DistanceMethod,
    DistanceTransform,
    FelzenszwalbDistanceTransform,
    ScipyDistanceTransform,
    normalize_distance,
    create_distance_transform
)

from .flooding import (
    UNVISITED,
    BACKGROUND_LABEL,
    FOREGROUND_LABEL,
    BOUNDARY_LABEL,
    WatershedMethod,
    Watershed,
    PriorityFloodWatershed,
    OpenCVWatershed,
    create_watershed
)

from .markers import build_auto_markers, build_manual_markers
from .watershed import flood_relief, watershed, watershed_labels

__all__ = [
    # Distance transforms
    'DistanceMethod',
    'DistanceTransform',
    'FelzenszwalbDistanceTransform',
    'ScipyDistanceTransform',
    'normalize_distance',
    'create_distance_transform',
    # Flooding
    'UNVISITED',
    'BACKGROUND_LABEL',
    'FOREGROUND_LABEL',
    'BOUNDARY_LABEL',
    'WatershedMethod',
    'Watershed',
    'PriorityFloodWatershed',
    'OpenCVWatershed',
    'create_watershed',
    # Markers
    'build_auto_markers',
    'build_manual_markers',
    # Operation
    'flood_relief',
    'watershed',
    'watershed_labels'
]
