import numpy as np
import cv2
import pytest

from conftest import disk_mask
from maskseg import InvalidParameterError, NoMarkersError
from maskseg.params import Relief, WatershedParams
from maskseg.watershed import (
    BACKGROUND_LABEL,
    BOUNDARY_LABEL,
    FOREGROUND_LABEL,
    FelzenszwalbDistanceTransform,
    OpenCVWatershed,
    PriorityFloodWatershed,
    ScipyDistanceTransform,
    WatershedMethod,
    DistanceMethod,
    build_auto_markers,
    build_manual_markers,
    create_distance_transform,
    create_watershed,
    flood_relief,
    normalize_distance,
    watershed,
    watershed_labels,
)

SQUARE_3X3 = np.ones((3, 3), dtype=np.uint8)


# ============================================================================
# Distance transforms
# ============================================================================

def test_felzenszwalb_matches_scipy():
    rng = np.random.default_rng(0)
    binary = (rng.random((40, 33)) > 0.3).astype(np.uint8)
    expected = ScipyDistanceTransform()(binary)
    actual = FelzenszwalbDistanceTransform()(binary)
    assert np.allclose(actual, expected)


@pytest.mark.parametrize("transform", [FelzenszwalbDistanceTransform(), ScipyDistanceTransform()])
def test_distance_to_single_background_pixel(transform):
    binary = np.ones((9, 12), dtype=np.uint8)
    binary[4, 3] = 0
    field = transform(binary)

    rr, cc = np.mgrid[:9, :12]
    assert np.allclose(field, np.sqrt((rr - 4) ** 2 + (cc - 3) ** 2))
    assert field[4, 3] == 0


@pytest.mark.parametrize("transform", [FelzenszwalbDistanceTransform(), ScipyDistanceTransform()])
def test_all_foreground_gives_zero_field(transform):
    field = transform(np.full((5, 5), 255, dtype=np.uint8))
    assert field.dtype == np.float64
    assert not field.any()


def test_distance_rejects_non_2d():
    with pytest.raises(InvalidParameterError):
        FelzenszwalbDistanceTransform()(np.ones((4, 4, 3), dtype=np.uint8))


def test_normalize_distance():
    field = np.array([[0.0, 2.0], [4.0, 1.0]])
    assert np.allclose(normalize_distance(field), [[0.0, 0.5], [1.0, 0.25]])
    assert not normalize_distance(np.full((3, 3), 7.0)).any()


def test_factories_default():
    assert isinstance(create_distance_transform(), FelzenszwalbDistanceTransform)
    assert isinstance(create_distance_transform(DistanceMethod.SCIPY), ScipyDistanceTransform)
    assert isinstance(create_watershed(), PriorityFloodWatershed)
    assert isinstance(create_watershed(WatershedMethod.OPENCV), OpenCVWatershed)


# ============================================================================
# Flooding
# ============================================================================

def test_priority_flood_meets_at_ridge():
    relief = np.array([[0, 5, 9, 5, 0]], dtype=np.uint8)
    markers = np.array([[1, 0, 0, 0, 2]], dtype=np.int32)
    labels = PriorityFloodWatershed()(relief, markers)
    assert labels.tolist() == [[1, 1, -1, 2, 2]]


def test_priority_flood_does_not_modify_markers():
    relief = np.zeros((4, 4), dtype=np.uint8)
    markers = np.zeros((4, 4), dtype=np.int32)
    markers[0, 0] = 1
    before = markers.copy()
    labels = PriorityFloodWatershed()(relief, markers)
    assert np.array_equal(markers, before)
    assert (labels == 1).all()


def test_priority_flood_without_markers_is_all_ridge():
    relief = np.zeros((3, 4), dtype=np.uint8)
    labels = PriorityFloodWatershed()(relief, np.zeros((3, 4), dtype=np.int32))
    assert (labels == BOUNDARY_LABEL).all()


def test_flood_shape_mismatch():
    with pytest.raises(InvalidParameterError):
        PriorityFloodWatershed()(np.zeros((3, 3), dtype=np.uint8), np.zeros((3, 4), dtype=np.int32))


@pytest.mark.parametrize("flooding", [PriorityFloodWatershed(), OpenCVWatershed()])
def test_flooding_leaves_no_pixel_unvisited(flooding, bright_disk_image):
    markers = np.zeros(bright_disk_image.shape, dtype=np.int32)
    markers[40, 40] = FOREGROUND_LABEL
    markers[2, 2] = BACKGROUND_LABEL

    labels = flooding(bright_disk_image, markers)
    assert labels.dtype == np.int32
    assert set(np.unique(labels)) <= {BOUNDARY_LABEL, BACKGROUND_LABEL, FOREGROUND_LABEL}
    assert labels[40, 40] == FOREGROUND_LABEL
    assert labels[2, 2] == BACKGROUND_LABEL


# ============================================================================
# Markers
# ============================================================================

def test_manual_markers_need_seeds():
    gray = np.zeros((10, 10), dtype=np.uint8)
    with pytest.raises(NoMarkersError):
        build_manual_markers(gray, WatershedParams(use_distance_transform=False))


def test_manual_markers_reject_out_of_bounds_seed():
    gray = np.zeros((10, 10), dtype=np.uint8)
    params = WatershedParams(use_distance_transform=False, foreground_seeds=[(10, 2)])
    with pytest.raises(InvalidParameterError):
        build_manual_markers(gray, params)


def test_manual_markers_foreground_painted_last():
    gray = np.zeros((15, 15), dtype=np.uint8)
    params = WatershedParams(
        use_distance_transform=False,
        foreground_seeds=[(7, 7)],
        background_seeds=[(7, 7), (0, 0)],
        seed_radius=2
    )
    markers = build_manual_markers(gray, params)

    assert markers[7, 7] == FOREGROUND_LABEL
    assert markers[0, 0] == BACKGROUND_LABEL
    assert markers[7, 9] == FOREGROUND_LABEL
    assert markers[7, 10] == 0


def test_manual_markers_radius_zero_is_single_pixel():
    gray = np.zeros((6, 6), dtype=np.uint8)
    params = WatershedParams(use_distance_transform=False, foreground_seeds=[(2, 3)], seed_radius=0)
    markers = build_manual_markers(gray, params)
    assert np.count_nonzero(markers) == 1
    assert markers[3, 2] == FOREGROUND_LABEL


def test_auto_markers_on_bright_disk(bright_disk_image):
    markers = build_auto_markers(bright_disk_image, WatershedParams())
    disk = disk_mask(bright_disk_image.shape, (40, 40), 20)

    assert markers[40, 40] == FOREGROUND_LABEL
    assert markers[0, 0] == BACKGROUND_LABEL
    assert np.all(disk[markers == FOREGROUND_LABEL])
    # the dilated ring around the disk carries no marker
    assert markers[40, 61] == 0
    assert not np.any(markers[disk] == BACKGROUND_LABEL)


# ============================================================================
# Engine
# ============================================================================

def test_flood_relief_gradient_is_zero_on_flat_regions(bright_disk_image):
    gradient = flood_relief(bright_disk_image, Relief.GRADIENT)
    assert gradient[40, 40] == 0 and gradient[0, 0] == 0
    assert gradient[40, 60] == 170
    assert flood_relief(bright_disk_image, Relief.INTENSITY) is bright_disk_image


def test_manual_intensity_keeps_dark_disk(dark_disk_image):
    params = WatershedParams(
        use_distance_transform=False,
        foreground_seeds=[(40, 40)],
        background_seeds=[(0, 0)]
    )
    mask = watershed(dark_disk_image, params)
    disk = disk_mask(dark_disk_image.shape, (40, 40), 20)
    assert np.all(mask[disk] == 255)


@pytest.mark.parametrize("use_distance_transform", [True, False])
def test_gradient_relief_follows_disk_edge(bright_disk_image, use_distance_transform):
    params = WatershedParams(
        use_distance_transform=use_distance_transform,
        foreground_seeds=[(40, 40)],
        background_seeds=[(2, 2)],
        relief=Relief.GRADIENT
    )
    mask = watershed(bright_disk_image, params) > 0

    disk = disk_mask(bright_disk_image.shape, (40, 40), 20).astype(np.uint8)
    inner = cv2.erode(disk, SQUARE_3X3) > 0
    outer = cv2.dilate(disk, SQUARE_3X3) > 0
    assert np.all(mask[inner])
    assert not np.any(mask[~outer])


def test_auto_intensity_stays_inside_disk(bright_disk_image):
    params = WatershedParams()
    markers = build_auto_markers(bright_disk_image, params)
    mask = watershed(bright_disk_image, params) > 0

    disk = disk_mask(bright_disk_image.shape, (40, 40), 20)
    assert np.all(mask[markers == FOREGROUND_LABEL])
    assert not np.any(mask[~disk])


@pytest.mark.parametrize("flooding", [PriorityFloodWatershed(), OpenCVWatershed()])
def test_watershed_labels_are_complete(bright_disk_image, flooding):
    labels = watershed_labels(bright_disk_image, WatershedParams(), flooding=flooding)
    assert labels.shape == bright_disk_image.shape
    assert set(np.unique(labels)) <= {BOUNDARY_LABEL, BACKGROUND_LABEL, FOREGROUND_LABEL}


def test_watershed_with_scipy_transform_matches_default(bright_disk_image):
    default = watershed(bright_disk_image, WatershedParams())
    scipy_based = watershed(bright_disk_image, WatershedParams(), transform=ScipyDistanceTransform())
    assert np.array_equal(default, scipy_based)


def test_watershed_mask_values(bright_disk_image):
    mask = watershed(bright_disk_image)
    assert mask.dtype == np.uint8
    assert set(np.unique(mask)) <= {0, 255}


def test_watershed_params_validation():
    with pytest.raises(InvalidParameterError):
        WatershedParams(distance_threshold=1.0)
    with pytest.raises(InvalidParameterError):
        WatershedParams(seed_radius=-1)
    with pytest.raises(InvalidParameterError):
        WatershedParams(relief="slope")
