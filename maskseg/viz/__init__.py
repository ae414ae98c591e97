"""
Visualisation helpers for segmentation results.
"""

from .image_grid import plot_image_grid, plot_segmentation_results

__all__ = ['plot_image_grid', 'plot_segmentation_results']
