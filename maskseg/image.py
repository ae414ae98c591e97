"""
Pixel buffer helpers.

Every engine works on a GrayscaleImage: a 2-D ``uint8`` numpy array in
row-major order, shape ``(height, width)``. Masks are 2-D ``uint8`` arrays of
the same shape holding two values, 0 for background and a non-zero label
(255 by default) for foreground.
"""

from typing import Optional, Tuple
import numpy as np
import cv2

from .errors import EmptyInputError, InvalidParameterError

FOREGROUND = 255
BACKGROUND = 0


def validate_input(image: Optional[np.ndarray]) -> np.ndarray:
    """
    Check that ``image`` holds at least one pixel.

    Args:
        image: Candidate image array (or None)

    Returns:
        image: The same object as a numpy array

    Raises:
        EmptyInputError: If image is None or has a zero-sized dimension
    """
    if image is None:
        raise EmptyInputError("Input image is empty (None)")
    image = np.asarray(image)
    if image.size == 0 or image.ndim == 0:
        raise EmptyInputError(f"Input image is empty, got shape {image.shape}")
    return image


def prepare_image(image: Optional[np.ndarray]) -> np.ndarray:
    """
    Convert any supported input into a GrayscaleImage.

    Accepts 2-D gray, (H, W, 1), (H, W, 3) BGR and (H, W, 4) BGRA arrays of any
    numeric dtype. Colour input is converted with OpenCV's BGR->GRAY weights;
    non-uint8 input is clipped to [0, 255] and cast.

    Args:
        image: Input image

    Returns:
        gray: New (H, W) uint8 array; the caller's buffer is never shared

    Raises:
        EmptyInputError: If image is None or zero-sized
        InvalidParameterError: If image has an unsupported shape
    """
    image = validate_input(image)

    if image.ndim == 3 and image.shape[2] == 1:
        image = image[:, :, 0]

    if image.ndim == 3 and image.shape[2] in (3, 4):
        if image.dtype != np.uint8:
            image = np.clip(np.rint(image), 0, 255).astype(np.uint8)
        code = cv2.COLOR_BGR2GRAY if image.shape[2] == 3 else cv2.COLOR_BGRA2GRAY
        return cv2.cvtColor(np.ascontiguousarray(image), code)

    if image.ndim != 2:
        raise InvalidParameterError(
            f"Image must be (H, W), (H, W, 3) or (H, W, 4), got shape {image.shape}"
        )

    if image.dtype == np.uint8:
        return image.copy()
    if image.dtype == np.bool_:
        return image.astype(np.uint8) * FOREGROUND
    return np.clip(np.rint(image), 0, 255).astype(np.uint8)


def to_bgr(image: Optional[np.ndarray]) -> np.ndarray:
    """Return a 3-channel uint8 copy of ``image`` (gray input is replicated)."""
    image = validate_input(image)
    if image.ndim == 2 or (image.ndim == 3 and image.shape[2] == 1):
        return cv2.cvtColor(prepare_image(image), cv2.COLOR_GRAY2BGR)
    if image.ndim == 3 and image.shape[2] in (3, 4):
        if image.dtype != np.uint8:
            image = np.clip(np.rint(image), 0, 255).astype(np.uint8)
        if image.shape[2] == 4:
            return cv2.cvtColor(np.ascontiguousarray(image), cv2.COLOR_BGRA2BGR)
        return image.copy()
    raise InvalidParameterError(f"Cannot convert image of shape {image.shape} to BGR")


def as_binary(mask: Optional[np.ndarray], value: int = FOREGROUND) -> np.ndarray:
    """
    Normalise a mask so that every non-zero pixel holds ``value``.

    Args:
        mask: 2-D array, any dtype (bool masks are accepted)
        value: Foreground label of the result

    Returns:
        binary: (H, W) uint8 array with values {0, value}
    """
    mask = validate_input(mask)
    if mask.ndim != 2:
        raise InvalidParameterError(f"Mask must be 2D (H, W), got shape {mask.shape}")
    return np.where(mask != 0, value, BACKGROUND).astype(np.uint8)


def image_shape(image: np.ndarray) -> Tuple[int, int]:
    """(height, width) of an image or mask."""
    return int(image.shape[0]), int(image.shape[1])


__all__ = [
    'FOREGROUND',
    'BACKGROUND',
    'validate_input',
    'prepare_image',
    'to_bgr',
    'as_binary',
    'image_shape',
]
