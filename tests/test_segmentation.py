import numpy as np
import pytest

from maskseg import (
    AdaptiveParams,
    AdaptiveStatistic,
    EmptyInputError,
    InvalidParameterError,
    Method,
    NoMarkersError,
    NoSeedsError,
    RegionGrowingParams,
    SegmentationError,
    ThresholdParams,
    WatershedParams,
    create_segmenter,
    post_process,
    segment,
)
from maskseg.segmentation import (
    AdaptiveSegmenter,
    OtsuSegmenter,
    RegionGrowingSegmenter,
    SegmentationResult,
    ThresholdSegmenter,
    WatershedSegmenter,
)
from maskseg.threshold import otsu_threshold, threshold


METHOD_SETTINGS = [
    (Method.THRESHOLD, ThresholdParams(threshold=100)),
    (Method.OTSU, None),
    (Method.ADAPTIVE_MEAN, AdaptiveParams(block_size=31, c=-5)),
    (Method.ADAPTIVE_GAUSSIAN, AdaptiveParams(block_size=31, c=-5)),
    (Method.REGION_GROWING, RegionGrowingParams(seeds=[(40, 40)], tolerance=10)),
    (Method.WATERSHED, WatershedParams()),
]


@pytest.mark.parametrize("method, params", METHOD_SETTINGS)
def test_every_method_produces_binary_mask(bright_disk_image, method, params):
    mask = segment(bright_disk_image, method, params)
    assert mask.shape == bright_disk_image.shape
    assert mask.dtype == np.uint8
    assert set(np.unique(mask)) <= {0, 255}
    if method not in (Method.ADAPTIVE_MEAN, Method.ADAPTIVE_GAUSSIAN):
        assert mask[40, 40] == 255
        assert mask[0, 0] == 0


def test_adaptive_marks_bright_side_of_edges(bright_disk_image):
    mask = segment(bright_disk_image, Method.ADAPTIVE_MEAN, AdaptiveParams(block_size=11, c=-5))
    # flat regions are below their own mean plus the offset
    assert mask[40, 40] == 0 and mask[0, 0] == 0
    assert mask[40, 58] == 255


def test_segment_post_processes_engine_output(bright_disk_image):
    image = bright_disk_image.copy()
    image[5, 5] = 250  # isolated speck
    params = ThresholdParams(threshold=100)

    raw = threshold(image, params)
    mask = segment(image, Method.THRESHOLD, params)
    assert raw[5, 5] == 255
    assert mask[5, 5] == 0
    assert np.array_equal(mask, post_process(raw))


def test_otsu_dispatch_matches_engine(bright_disk_image):
    expected = post_process(otsu_threshold(bright_disk_image))
    assert np.array_equal(segment(bright_disk_image, Method.OTSU), expected)


def test_string_method(bright_disk_image):
    mask = segment(bright_disk_image, "threshold", ThresholdParams(threshold=100))
    assert mask[40, 40] == 255


def test_unknown_method():
    with pytest.raises(InvalidParameterError):
        create_segmenter("graph_cut")


def test_wrong_params_type():
    with pytest.raises(InvalidParameterError):
        create_segmenter(Method.THRESHOLD, AdaptiveParams())
    with pytest.raises(InvalidParameterError):
        create_segmenter(Method.OTSU, ThresholdParams())


@pytest.mark.parametrize("method, cls", [
    (Method.THRESHOLD, ThresholdSegmenter),
    (Method.OTSU, OtsuSegmenter),
    (Method.ADAPTIVE_MEAN, AdaptiveSegmenter),
    (Method.ADAPTIVE_GAUSSIAN, AdaptiveSegmenter),
    (Method.REGION_GROWING, RegionGrowingSegmenter),
    (Method.WATERSHED, WatershedSegmenter),
])
def test_factory_classes(method, cls):
    segmenter = create_segmenter(method)
    assert isinstance(segmenter, cls)
    assert segmenter.method == method


def test_adaptive_method_decides_statistic():
    params = AdaptiveParams(statistic=AdaptiveStatistic.MEAN)
    segmenter = create_segmenter(Method.ADAPTIVE_GAUSSIAN, params)
    assert segmenter.params.statistic is AdaptiveStatistic.GAUSSIAN
    # the caller's params object is left alone
    assert params.statistic is AdaptiveStatistic.MEAN


def test_region_growing_defaults_have_no_seeds(bright_disk_image):
    with pytest.raises(NoSeedsError):
        segment(bright_disk_image, Method.REGION_GROWING)


def test_manual_watershed_without_seeds(bright_disk_image):
    with pytest.raises(NoMarkersError):
        segment(bright_disk_image, Method.WATERSHED, WatershedParams(use_distance_transform=False))


def test_empty_image():
    with pytest.raises(EmptyInputError):
        segment(np.zeros((0, 4), dtype=np.uint8), Method.OTSU)


def test_errors_are_value_errors():
    for error in (EmptyInputError, InvalidParameterError, NoSeedsError, NoMarkersError):
        assert issubclass(error, SegmentationError)
        assert issubclass(error, ValueError)


def test_segment_accepts_colour_input(bright_disk_image):
    bgr = np.dstack([bright_disk_image] * 3)
    gray_mask = segment(bright_disk_image, Method.OTSU)
    assert np.array_equal(segment(bgr, Method.OTSU), gray_mask)


def test_result_summary(bright_disk_image):
    result = create_segmenter(Method.OTSU).segment(bright_disk_image)

    assert isinstance(result, SegmentationResult)
    assert result.method is Method.OTSU
    assert result.params is None
    assert result.elapsed_time >= 0
    assert result.foreground_pixels() == np.count_nonzero(result.mask)
    assert 0 < result.foreground_ratio() < 1
    assert result.metadata['raw_foreground_pixels'] > 0
    assert str(result).startswith("SegmentationResult(method=otsu, foreground=")


def test_segment_does_not_modify_input(bright_disk_image):
    before = bright_disk_image.copy()
    segment(bright_disk_image, Method.WATERSHED)
    assert np.array_equal(bright_disk_image, before)
