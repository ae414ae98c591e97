"""
Segmentation method parameters.

One dataclass per method family. Each validates its own ranges in
``__post_init__``; checks that need the image (seed bounds, empty seed lists)
happen when the engine runs.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, List, Sequence, Tuple, Union

from .errors import InvalidParameterError


# ============================================================================
# Enums
# ============================================================================

class Method(Enum):
    """Available segmentation methods."""
    THRESHOLD = "threshold"
    OTSU = "otsu"
    ADAPTIVE_MEAN = "adaptive_mean"
    ADAPTIVE_GAUSSIAN = "adaptive_gaussian"
    REGION_GROWING = "region_growing"
    WATERSHED = "watershed"


class AdaptiveStatistic(Enum):
    """Local statistic used by adaptive thresholding."""
    MEAN = "mean"
    GAUSSIAN = "gaussian"


class Relief(Enum):
    """Surface the watershed floods."""
    INTENSITY = "intensity"  # grayscale values
    GRADIENT = "gradient"    # 3x3 morphological gradient of the grayscale


class SeedLabel(Enum):
    """Class a seed anchors."""
    FOREGROUND = "foreground"
    BACKGROUND = "background"
    UNTAGGED = "untagged"


# ============================================================================
# Seeds
# ============================================================================

@dataclass(frozen=True)
class Seed:
    """
    Integer pixel coordinate, optionally tagged with the class it anchors.

    Attributes:
        x: Column index
        y: Row index
        label: Foreground/background tag (watershed) or untagged (region growing)
    """
    x: int
    y: int
    label: SeedLabel = SeedLabel.UNTAGGED

    def in_bounds(self, height: int, width: int) -> bool:
        return 0 <= self.x < width and 0 <= self.y < height


SeedLike = Union[Seed, Tuple[int, int], Sequence[int]]


def coerce_seed(value: SeedLike, label: SeedLabel = SeedLabel.UNTAGGED) -> Seed:
    """
    Build a Seed from a Seed or an ``(x, y)`` pair.

    A Seed that is still UNTAGGED takes ``label``; an explicitly tagged Seed
    keeps its own tag.
    """
    if isinstance(value, Seed):
        if value.label is SeedLabel.UNTAGGED and label is not SeedLabel.UNTAGGED:
            return Seed(value.x, value.y, label)
        return value
    try:
        x, y = value
        ix, iy = int(x), int(y)
    except (TypeError, ValueError):
        raise InvalidParameterError(f"Seed must be an (x, y) pair, got {value!r}")
    if ix != x or iy != y:
        raise InvalidParameterError(f"Seed coordinates must be integers, got {value!r}")
    return Seed(ix, iy, label)


def coerce_seeds(values: Iterable[SeedLike], label: SeedLabel = SeedLabel.UNTAGGED) -> List[Seed]:
    return [coerce_seed(v, label) for v in values]


def check_seeds_in_bounds(seeds: Iterable[Seed], height: int, width: int) -> None:
    """
    Raises:
        InvalidParameterError: If any seed lies outside a (height, width) image
    """
    for seed in seeds:
        if not seed.in_bounds(height, width):
            raise InvalidParameterError(
                f"Seed ({seed.x}, {seed.y}) is outside the {width}x{height} image"
            )


def _coerce_enum(enum_cls, value, name: str):
    try:
        return enum_cls(value)
    except ValueError:
        choices = [m.value for m in enum_cls]
        raise InvalidParameterError(f"{name} must be one of {choices}, got {value!r}")


def _check_max_value(max_value) -> None:
    if not 1 <= max_value <= 255:
        raise InvalidParameterError(f"max_value must be in [1, 255], got {max_value}")


# ============================================================================
# Parameters
# ============================================================================

@dataclass
class ThresholdParams:
    """
    Global binary threshold.

    Attributes:
        threshold: Pixels strictly above it are foreground (strictly below if invert)
        max_value: Label written to foreground pixels
        invert: Select the dark side instead of the bright side
    """
    threshold: float = 128
    max_value: int = 255
    invert: bool = False

    def __post_init__(self):
        """Validate configuration parameters."""
        if not 0 <= self.threshold <= 255:
            raise InvalidParameterError(f"threshold must be in [0, 255], got {self.threshold}")
        _check_max_value(self.max_value)


@dataclass
class AdaptiveParams:
    """
    Adaptive (local) threshold.

    Attributes:
        block_size: Side of the square neighbourhood, odd and >= 3
        c: Offset subtracted from the local statistic
        max_value: Label written to foreground pixels
        invert: Select pixels darker than their neighbourhood
        statistic: Plain mean or Gaussian-weighted mean
    """
    block_size: int = 11
    c: float = 2.0
    max_value: int = 255
    invert: bool = False
    statistic: AdaptiveStatistic = AdaptiveStatistic.MEAN

    def __post_init__(self):
        """Validate configuration parameters."""
        if int(self.block_size) != self.block_size or self.block_size < 3 or self.block_size % 2 == 0:
            raise InvalidParameterError(
                f"block_size must be an odd integer >= 3, got {self.block_size}"
            )
        self.block_size = int(self.block_size)
        _check_max_value(self.max_value)
        self.statistic = _coerce_enum(AdaptiveStatistic, self.statistic, "statistic")


@dataclass
class RegionGrowingParams:
    """
    Seeded region growing.

    Attributes:
        seeds: Start pixels; every region joins one merged foreground mask
        tolerance: Maximum intensity step between neighbouring region pixels
        connectivity: 4 (axis neighbours) or 8 (also diagonal neighbours)
    """
    seeds: List[Seed] = field(default_factory=list)
    tolerance: float = 20.0
    connectivity: int = 8

    def __post_init__(self):
        """Validate configuration parameters."""
        self.seeds = coerce_seeds(self.seeds)
        if self.tolerance < 0:
            raise InvalidParameterError(f"tolerance must be >= 0, got {self.tolerance}")
        if self.connectivity not in (4, 8):
            raise InvalidParameterError(f"connectivity must be 4 or 8, got {self.connectivity}")


@dataclass
class WatershedParams:
    """
    Marker-controlled watershed.

    Attributes:
        use_distance_transform: Derive markers automatically (Otsu + distance
            transform) instead of using the seed lists
        foreground_seeds: Manual markers for the foreground class
        background_seeds: Manual markers for the background class
        distance_threshold: Normalised distance above which a pixel becomes a
            foreground marker (auto mode)
        dilation_iterations: 3x3 dilations of the Otsu foreground before it is
            inverted into the background marker (auto mode)
        seed_radius: Radius of the disk painted around each manual seed
        relief: Surface to flood, raw intensities or their gradient
    """
    use_distance_transform: bool = True
    foreground_seeds: List[Seed] = field(default_factory=list)
    background_seeds: List[Seed] = field(default_factory=list)
    distance_threshold: float = 0.3
    dilation_iterations: int = 3
    seed_radius: int = 2
    relief: Relief = Relief.INTENSITY

    def __post_init__(self):
        """Validate configuration parameters."""
        self.relief = _coerce_enum(Relief, self.relief, "relief")
        self.foreground_seeds = coerce_seeds(self.foreground_seeds, SeedLabel.FOREGROUND)
        self.background_seeds = coerce_seeds(self.background_seeds, SeedLabel.BACKGROUND)
        if not 0.0 <= self.distance_threshold < 1.0:
            raise InvalidParameterError(
                f"distance_threshold must be in [0, 1), got {self.distance_threshold}"
            )
        if self.dilation_iterations < 0:
            raise InvalidParameterError(
                f"dilation_iterations must be >= 0, got {self.dilation_iterations}"
            )
        if self.seed_radius < 0:
            raise InvalidParameterError(f"seed_radius must be >= 0, got {self.seed_radius}")

    @property
    def seeds(self) -> List[Seed]:
        """All manual seeds, background first."""
        return list(self.background_seeds) + list(self.foreground_seeds)


SegmentationParams = Union[ThresholdParams, AdaptiveParams, RegionGrowingParams, WatershedParams]


__all__ = [
    'Method',
    'AdaptiveStatistic',
    'Relief',
    'SeedLabel',
    'Seed',
    'coerce_seed',
    'coerce_seeds',
    'check_seeds_in_bounds',
    'ThresholdParams',
    'AdaptiveParams',
    'RegionGrowingParams',
    'WatershedParams',
    'SegmentationParams',
]
