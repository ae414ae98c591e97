"""
Global and adaptive binarization.

- threshold: fixed global level
- otsu_threshold / otsu_level: level chosen by maximising inter-class variance
- adaptive_threshold: level taken from a local mean or Gaussian mean
"""

from .threshold import (
    threshold,
    otsu_level,
    otsu_threshold,
    adaptive_threshold,
    local_statistic,
)

__all__ = [
    'threshold',
    'otsu_level',
    'otsu_threshold',
    'adaptive_threshold',
    'local_statistic',
]
