"""
Query string encoding for Docker API calls

Two wire formats are used by the engine:
  * ``filters``: a JSON object of string arrays, percent-encoded as one value
  * flat parameters: ``key=value&key=value`` with one scalar per key
"""

import json
from types import MappingProxyType
from typing import Any, Dict, Iterator, List, Mapping, Optional, Sequence, Tuple
from urllib.parse import quote, unquote

from .exceptions import SerializationError

# Characters left as-is in flat parameter values
_PARAM_SAFE = '/:'


def _to_str(value: Any) -> str:
    """Stringify a scalar the way the engine expects it"""
    if isinstance(value, bool):
        return 'true' if value else 'false'
    return str(value)


def _to_json(value: Any) -> str:
    try:
        return json.dumps(value, separators=(',', ':'))
    except (TypeError, ValueError) as e:
        raise SerializationError(f"Cannot JSON-encode {value!r}: {e}") from e


def encode_filters(params: Mapping[str, Sequence[str]]) -> str:
    """
    Encode filters as the value of the ``filters`` query parameter

    Every filter becomes an array, even single-valued ones. The whole
    JSON text is percent-encoded as one opaque value.

    Args:
        params: Mapping of filter key to its values

    Returns:
        Percent-encoded JSON text

    Raises:
        SerializationError: If a value cannot be JSON-encoded
    """
    normalized = {}
    for key, values in params.items():
        if isinstance(values, (list, tuple)):
            normalized[key] = list(values)
        else:
            normalized[key] = [values]
    return quote(_to_json(normalized), safe='')


def decode_filters(encoded: str) -> Dict[str, List[str]]:
    """Inverse of encode_filters"""
    try:
        data = json.loads(unquote(encoded))
    except ValueError as e:
        raise SerializationError(f"Invalid filters value: {e}") from e
    if not isinstance(data, dict):
        raise SerializationError(f"Filters must be a JSON object, got {type(data).__name__}")
    return {
        key: list(values) if isinstance(values, list) else [values]
        for key, values in data.items()
    }


def encode_params(params: Mapping[str, Any]) -> str:
    """
    Encode flat parameters as ``key=value`` pairs joined by ``&``

    Pairs keep the mapping's iteration order. Values are percent-encoded,
    so ``&``, ``=`` or spaces inside a value cannot split the query.
    """
    return '&'.join(
        f"{key}={quote(_to_str(value), safe=_PARAM_SAFE)}"
        for key, value in params.items()
    )


def encode_build_params(params: Mapping[str, str]) -> str:
    """Encode a BuildParamSet as the query string of a build call"""
    return encode_params(params)


class FilterSet:
    """Immutable snapshot of filter constraints"""

    def __init__(self, params: Optional[Mapping[str, Sequence[str]]] = None):
        self._params: Mapping[str, Tuple[str, ...]] = MappingProxyType({
            key: (values,) if isinstance(values, str) else tuple(values)
            for key, values in (params or {}).items()
        })

    @property
    def params(self) -> Mapping[str, Tuple[str, ...]]:
        return self._params

    def encode(self) -> str:
        return encode_filters(self._params)

    def __len__(self) -> int:
        return len(self._params)

    def __iter__(self) -> Iterator[str]:
        return iter(self._params)

    def __contains__(self, key) -> bool:
        return key in self._params

    def __getitem__(self, key: str) -> Tuple[str, ...]:
        return self._params[key]

    def __eq__(self, other) -> bool:
        if not isinstance(other, FilterSet):
            return NotImplemented
        return dict(self._params) == dict(other._params)

    def __repr__(self):
        return f"FilterSet({dict(self._params)!r})"


class _FilterBuilder:
    """Accumulator for filters restricted to a fixed vocabulary"""

    KEYS: frozenset = frozenset()

    def __init__(self):
        self._params: Dict[str, List[str]] = {}

    def set(self, key: str, *values: Any) -> '_FilterBuilder':
        """
        Set a filter, replacing any values set before for the same key

        Raises:
            ValueError: If the key is not a filter of this call
        """
        if key not in self.KEYS:
            raise ValueError(f"Unknown filter {key!r}, expected one of {sorted(self.KEYS)}")
        self._params[key] = [_to_str(value) for value in values]
        return self

    def build(self) -> FilterSet:
        return FilterSet({key: list(values) for key, values in self._params.items()})


class ListImagesFilterBuilder(_FilterBuilder):
    """Filters for GET /images/json"""

    KEYS = frozenset({'before', 'dangling', 'label', 'reference', 'since'})

    def before(self, image: str) -> 'ListImagesFilterBuilder':
        return self.set('before', image)

    def dangling(self, dangling: bool) -> 'ListImagesFilterBuilder':
        return self.set('dangling', dangling)

    def label(self, *labels: str) -> 'ListImagesFilterBuilder':
        """Match images by ``key`` or ``key=value`` labels"""
        return self.set('label', *labels)

    def reference(self, *references: str) -> 'ListImagesFilterBuilder':
        return self.set('reference', *references)

    def since(self, image: str) -> 'ListImagesFilterBuilder':
        return self.set('since', image)


class SearchImagesFilterBuilder(_FilterBuilder):
    """Filters for GET /images/search"""

    KEYS = frozenset({'is-automated', 'is-official', 'stars'})

    def is_automated(self, automated: bool) -> 'SearchImagesFilterBuilder':
        return self.set('is-automated', automated)

    def is_official(self, official: bool) -> 'SearchImagesFilterBuilder':
        return self.set('is-official', official)

    def minimum_stars(self, stars: int) -> 'SearchImagesFilterBuilder':
        return self.set('stars', stars)


class BuildParams:
    """Immutable snapshot of build parameters"""

    def __init__(self, params: Optional[Mapping[str, str]] = None):
        self._params: Mapping[str, str] = MappingProxyType(dict(params or {}))

    @property
    def params(self) -> Mapping[str, str]:
        return self._params

    def encode(self) -> str:
        return encode_build_params(self._params)

    def __len__(self) -> int:
        return len(self._params)

    def __getitem__(self, key: str) -> str:
        return self._params[key]

    def __contains__(self, key) -> bool:
        return key in self._params

    def __eq__(self, other) -> bool:
        if not isinstance(other, BuildParams):
            return NotImplemented
        return dict(self._params) == dict(other._params)

    def __repr__(self):
        return f"BuildParams({dict(self._params)!r})"


class BuildParamsBuilder:
    """
    Accumulator for POST /build query parameters

    List and map shaped options are stored as compact JSON text, so every
    parameter holds exactly one string.
    """

    def __init__(self):
        self._params: Dict[str, str] = {}

    def _set(self, key: str, value: Any) -> 'BuildParamsBuilder':
        self._params[key] = _to_str(value)
        return self

    def _set_json(self, key: str, value: Any) -> 'BuildParamsBuilder':
        self._params[key] = _to_json(value)
        return self

    def dockerfile(self, path: str) -> 'BuildParamsBuilder':
        return self._set('dockerfile', path)

    def tag(self, tag: str) -> 'BuildParamsBuilder':
        return self._set('t', tag)

    def extra_hosts(self, hosts: str) -> 'BuildParamsBuilder':
        return self._set('extrahosts', hosts)

    def remote(self, url: str) -> 'BuildParamsBuilder':
        return self._set('remote', url)

    def quiet(self, enabled: bool) -> 'BuildParamsBuilder':
        return self._set('q', enabled)

    def no_cache(self, enabled: bool) -> 'BuildParamsBuilder':
        return self._set('nocache', enabled)

    def cache_from(self, *images: str) -> 'BuildParamsBuilder':
        return self._set_json('cachefrom', list(images))

    def pull(self, enabled: bool) -> 'BuildParamsBuilder':
        return self._set('pull', enabled)

    def remove_intermediate(self, enabled: bool) -> 'BuildParamsBuilder':
        return self._set('rm', enabled)

    def force_remove_intermediate(self, enabled: bool) -> 'BuildParamsBuilder':
        return self._set('forcerm', enabled)

    def memory_limit(self, size: int) -> 'BuildParamsBuilder':
        return self._set('memory', size)

    def swap_limit(self, size: int) -> 'BuildParamsBuilder':
        """Total memory (memory + swap), -1 disables swap"""
        return self._set('memswap', size)

    def cpu_shares(self, weight: int) -> 'BuildParamsBuilder':
        return self._set('cpushares', weight)

    def cpuset_cpus(self, cpus: str) -> 'BuildParamsBuilder':
        return self._set('cpusetcpus', cpus)

    def cpu_period(self, period: int) -> 'BuildParamsBuilder':
        return self._set('cpuperiod', period)

    def cpu_quota(self, quota: int) -> 'BuildParamsBuilder':
        return self._set('cpuquota', quota)

    def build_args(self, args: Mapping[str, str]) -> 'BuildParamsBuilder':
        return self._set_json('buildargs', dict(args))

    def shm_size(self, size: int) -> 'BuildParamsBuilder':
        return self._set('shmsize', size)

    def squash(self, enabled: bool) -> 'BuildParamsBuilder':
        return self._set('squash', enabled)

    def labels(self, labels: Any) -> 'BuildParamsBuilder':
        """Labels as a mapping, or as a list of label strings"""
        if not isinstance(labels, Mapping):
            labels = list(labels)
        else:
            labels = dict(labels)
        return self._set_json('labels', labels)

    def network_mode(self, mode: str) -> 'BuildParamsBuilder':
        return self._set('networkmode', mode)

    def platform(self, platform: str) -> 'BuildParamsBuilder':
        return self._set('platform', platform)

    def target(self, stage: str) -> 'BuildParamsBuilder':
        return self._set('target', stage)

    def outputs(self, outputs: str) -> 'BuildParamsBuilder':
        return self._set('outputs', outputs)

    def build(self) -> BuildParams:
        return BuildParams(dict(self._params))
