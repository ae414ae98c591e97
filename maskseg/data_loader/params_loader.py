"""
JSON parameter files.

Reads and writes segmentation settings for the caller's configuration layer.
Documents look like::

    {
        "method": "watershed",
        "params": {
            "use_distance_transform": false,
            "foreground_seeds": [[40, 32]],
            "background_seeds": [[2, 2], [60, 60]]
        }
    }

``params`` may be omitted (method defaults) and must be omitted or null for
``otsu``.
"""

import json
from dataclasses import asdict, fields
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

from ..errors import InvalidParameterError
from ..params import (
    AdaptiveParams,
    Method,
    RegionGrowingParams,
    SegmentationParams,
    ThresholdParams,
    WatershedParams,
)

PARAMS_TYPES = {
    Method.THRESHOLD: ThresholdParams,
    Method.OTSU: None,
    Method.ADAPTIVE_MEAN: AdaptiveParams,
    Method.ADAPTIVE_GAUSSIAN: AdaptiveParams,
    Method.REGION_GROWING: RegionGrowingParams,
    Method.WATERSHED: WatershedParams,
}

_SEED_FIELDS = ('seeds', 'foreground_seeds', 'background_seeds')


def params_from_dict(data: Dict[str, Any]) -> Tuple[Method, Optional[SegmentationParams]]:
    """
    Build (method, params) from a parsed JSON document.

    Raises:
        InvalidParameterError: If the method is unknown or params has
                               unexpected keys or invalid values
    """
    if 'method' not in data:
        raise InvalidParameterError("Parameter document has no 'method' field")
    try:
        method = Method(data['method'])
    except ValueError:
        raise InvalidParameterError(f"Unknown segmentation method: {data['method']!r}")

    raw = data.get('params')
    params_type = PARAMS_TYPES[method]
    if params_type is None:
        if raw:
            raise InvalidParameterError(f"{method.value} takes no parameters, got {raw!r}")
        return method, None
    if raw is None:
        return method, params_type()

    allowed = {f.name for f in fields(params_type)}
    unknown = set(raw) - allowed
    if unknown:
        raise InvalidParameterError(
            f"Unexpected {method.value} parameters: {sorted(unknown)}"
        )

    kwargs = dict(raw)
    for name in _SEED_FIELDS:
        if name in kwargs:
            kwargs[name] = [tuple(point[:2]) for point in kwargs[name]]
    return method, params_type(**kwargs)


def _plain(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, dict):
        if set(value) >= {'x', 'y'}:
            return [value['x'], value['y']]
        return {k: _plain(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_plain(v) for v in value]
    return value


def params_to_dict(method: Method, params: Optional[SegmentationParams] = None) -> Dict[str, Any]:
    """Inverse of params_from_dict; seeds are written as [x, y] pairs."""
    document: Dict[str, Any] = {'method': method.value}
    document['params'] = None if params is None else _plain(asdict(params))
    return document


class ParamsLoader:
    """
    Loads and saves named parameter files in one directory.

    Files are named ``{name}.json``.

    Example:
        >>> loader = ParamsLoader(Path('settings'))
        >>> loader.save('lungs', Method.OTSU)
        >>> method, params = loader.load('lungs')
    """

    def __init__(self, data_dir: Union[str, Path]):
        """
        Args:
            data_dir: Directory holding the JSON files; created on first save
        """
        self.data_dir = Path(data_dir)

    def path_for(self, name: str) -> Path:
        return self.data_dir / f"{name}.json"

    def load(self, name: str) -> Tuple[Method, Optional[SegmentationParams]]:
        """
        Raises:
            FileNotFoundError: If no file exists for name
            InvalidParameterError: If the file is not a valid parameter document
        """
        path = self.path_for(name)
        if not path.exists():
            raise FileNotFoundError(
                f"No parameter file for '{name}' in {self.data_dir}; "
                f"available: {self.available()}"
            )
        try:
            with open(path, 'r') as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise InvalidParameterError(f"Malformed JSON in {path}: {e.msg}")
        return params_from_dict(data)

    def save(self, name: str, method: Method, params: Optional[SegmentationParams] = None) -> Path:
        self.data_dir.mkdir(parents=True, exist_ok=True)
        path = self.path_for(name)
        with open(path, 'w') as f:
            json.dump(params_to_dict(method, params), f, indent=2)
        return path

    def available(self) -> List[str]:
        """Names of the stored parameter files, sorted."""
        if not self.data_dir.exists():
            return []
        return sorted(p.stem for p in self.data_dir.glob('*.json'))
