"""
Image file helpers for callers that start from disk.
"""

from pathlib import Path
from typing import Union
import numpy as np
from PIL import Image

from ..image import as_binary, prepare_image


def load_grayscale(path: Union[str, Path]) -> np.ndarray:
    """
    Decode an image file into a GrayscaleImage.

    Args:
        path: Any format Pillow can read

    Returns:
        gray: (H, W) uint8 array

    Raises:
        FileNotFoundError: If path does not exist
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Image not found: {path}")
    with Image.open(path) as img:
        gray = np.asarray(img.convert('L'))
    return prepare_image(gray)


def save_mask(mask: np.ndarray, path: Union[str, Path]) -> Path:
    """Write a binary mask as an 8-bit image with values {0, 255}."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    Image.fromarray(as_binary(mask)).save(path)
    return path
