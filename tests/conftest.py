import matplotlib

matplotlib.use("Agg")

import numpy as np
import pytest


def disk_mask(shape, center, radius):
    rr, cc = np.ogrid[:shape[0], :shape[1]]
    cy, cx = center
    return (rr - cy) ** 2 + (cc - cx) ** 2 <= radius ** 2


@pytest.fixture
def bimodal_image() -> np.ndarray:
    image = np.full((20, 20), 50, dtype=np.uint8)
    image[:, 10:] = 200
    return image


@pytest.fixture
def bright_disk_image() -> np.ndarray:
    image = np.full((80, 80), 30, dtype=np.uint8)
    image[disk_mask(image.shape, (40, 40), 20)] = 200
    return image


@pytest.fixture
def dark_disk_image() -> np.ndarray:
    image = np.full((80, 80), 200, dtype=np.uint8)
    image[disk_mask(image.shape, (40, 40), 20)] = 40
    return image


@pytest.fixture
def square_mask() -> np.ndarray:
    mask = np.zeros((120, 120), dtype=np.uint8)
    mask[30:80, 20:70] = 255
    return mask
