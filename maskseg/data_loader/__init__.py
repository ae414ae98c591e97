"""
Loading helpers for the layers around the segmentation engines.

- ParamsLoader: named JSON parameter files
- load_grayscale / save_mask: image files via Pillow
"""

from .params_loader import ParamsLoader, params_from_dict, params_to_dict
from .image_loader import load_grayscale, save_mask

__all__ = [
    'ParamsLoader',
    'params_from_dict',
    'params_to_dict',
    'load_grayscale',
    'save_mask'
]
