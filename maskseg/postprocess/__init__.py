"""Morphological cleanup applied to every raw segmentation mask."""

from .morphology import post_process, structuring_element

__all__ = ['post_process', 'structuring_element']
