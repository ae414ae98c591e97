"""
Mask Post-Processing

Opening (erosion then dilation) removes isolated foreground specks, closing
(dilation then erosion) fills pinholes. Both use the same small elliptical
structuring element, so region boundaries move by at most a pixel.

Opening followed by closing with one structuring element is idempotent:
post_process(post_process(m)) == post_process(m).
"""

import numpy as np
import cv2

from ..errors import InvalidParameterError
from ..image import as_binary, validate_input


def structuring_element(kernel_size: int = 3) -> np.ndarray:
    """Elliptical kernel_size x kernel_size structuring element (uint8 0/1)."""
    if kernel_size < 1 or kernel_size % 2 == 0:
        raise InvalidParameterError(f"kernel_size must be a positive odd integer, got {kernel_size}")
    return cv2.getStructuringElement(cv2.MORPH_ELLIPSE, (kernel_size, kernel_size))


def post_process(mask: np.ndarray, kernel_size: int = 3) -> np.ndarray:
    """
    Clean a binary mask with an opening followed by a closing.

    Args:
        mask: (H, W) mask, any non-zero value is foreground
        kernel_size: Side of the elliptical structuring element (odd)

    Returns:
        cleaned: New (H, W) uint8 mask; foreground keeps the input's maximum
                 value (255 for an all-zero input)

    Raises:
        EmptyInputError: If mask is empty
        InvalidParameterError: If mask is not 2D or kernel_size is even
    """
    mask = validate_input(mask)
    value = 255 if mask.dtype == np.bool_ else int(mask.max())
    if not 0 < value <= 255:
        value = 255
    processed = as_binary(mask, value)

    kernel = structuring_element(kernel_size)
    processed = cv2.morphologyEx(processed, cv2.MORPH_OPEN, kernel)
    processed = cv2.morphologyEx(processed, cv2.MORPH_CLOSE, kernel)
    return processed
