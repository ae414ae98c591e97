"""
Error kinds raised by the segmentation engines.

All of them derive from ValueError so callers that already guard
segmentation calls with ``except ValueError`` keep working.
"""


class SegmentationError(ValueError):
    """Base class for every failure raised by maskseg."""


class EmptyInputError(SegmentationError):
    """Image is None or has a zero-sized dimension."""


class InvalidParameterError(SegmentationError):
    """Method parameters are out of range or malformed."""


class NoSeedsError(SegmentationError):
    """Region growing was called without any seed point."""


class NoMarkersError(SegmentationError):
    """Manual watershed was called without foreground or background seeds."""


__all__ = [
    'SegmentationError',
    'EmptyInputError',
    'InvalidParameterError',
    'NoSeedsError',
    'NoMarkersError',
]
