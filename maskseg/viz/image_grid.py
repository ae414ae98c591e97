"""
Comparison grids for segmentation results.

Matplotlib figures placing a source image next to the overlays produced by
one or more segmentation methods.
"""

from typing import Dict, List, Optional, Tuple
import numpy as np
import matplotlib.pyplot as plt
import cv2

from ..contours import OverlayStyle, draw_segmentation, get_contours
from ..image import prepare_image
from ..segmentation import SegmentationResult


def plot_image_grid(
    images: List[np.ndarray],
    titles: List[str],
    figsize: Tuple[int, int] = (18, 6),
    cmap: str = 'gray'
) -> plt.Figure:
    """
    Show images side by side in one row.

    2D arrays are drawn with ``cmap``; 3-channel arrays are taken as BGR and
    shown in true colour.

    Args:
        images: List of (H, W) or (H, W, 3) arrays
        titles: One title per image
        figsize: Figure size (width, height) in inches
        cmap: Colormap for 2D images

    Returns:
        fig: Matplotlib figure

    Raises:
        ValueError: If images and titles differ in length
    """
    if len(images) != len(titles):
        raise ValueError(
            f"Number of images ({len(images)}) must match "
            f"number of titles ({len(titles)})"
        )

    n_images = len(images)
    fig, axes = plt.subplots(1, n_images, figsize=figsize)

    # A single subplot is not returned as an array
    if n_images == 1:
        axes = [axes]

    for ax, img, title in zip(axes, images, titles):
        if img.ndim == 3:
            ax.imshow(cv2.cvtColor(img, cv2.COLOR_BGR2RGB))
        else:
            ax.imshow(img, cmap=cmap, vmin=0, vmax=255)
        ax.axis('off')
        ax.set_title(title, fontsize=14, pad=10)

    plt.tight_layout()
    return fig


def plot_segmentation_results(
    image: np.ndarray,
    results: Dict[str, SegmentationResult],
    alpha: float = 0.4,
    style: Optional[OverlayStyle] = None,
    figsize: Optional[Tuple[int, int]] = None
) -> plt.Figure:
    """
    Two-row comparison of several segmentation results.

    Top row: the source image followed by one overlay per result.
    Bottom row: the corresponding binary masks, titled with their contour
    count and foreground share.

    Args:
        image: Source image (grayscale or BGR)
        results: Label -> SegmentationResult, shown in insertion order
        alpha: Overlay blend weight
        style: Overlay style. If None, uses defaults.
        figsize: Figure size. If None, scales with the number of results.

    Returns:
        fig: Matplotlib figure
    """
    n_cols = len(results) + 1
    figsize = figsize or (4 * n_cols, 8)
    fig, axes = plt.subplots(2, n_cols, figsize=figsize, squeeze=False)

    gray = prepare_image(image)
    axes[0, 0].imshow(gray, cmap='gray', vmin=0, vmax=255)
    axes[0, 0].set_title('Input', fontsize=12, pad=10)
    axes[1, 0].hist(gray.ravel(), bins=64, range=(0, 255), color='gray')
    axes[1, 0].set_title('Histogram', fontsize=12, pad=10)
    axes[0, 0].axis('off')

    for col, (label, result) in enumerate(results.items(), start=1):
        overlay = draw_segmentation(image, result.mask, alpha=alpha, style=style)
        axes[0, col].imshow(cv2.cvtColor(overlay, cv2.COLOR_BGR2RGB))
        axes[0, col].set_title(label, fontsize=12, pad=10)
        axes[0, col].axis('off')

        n_contours = len(get_contours(result.mask))
        axes[1, col].imshow(result.mask, cmap='gray', vmin=0, vmax=255)
        axes[1, col].set_title(
            f"{n_contours} regions, {result.foreground_ratio() * 100:.1f}% fg",
            fontsize=10
        )
        axes[1, col].axis('off')

    plt.tight_layout()
    return fig
