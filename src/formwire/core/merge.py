"""Recursive option merging used to build field configurations."""

from typing import Any, Dict, Mapping


class ReplaceValue:
    """Wraps a value that must replace, not merge with, the earlier one.

    Usage:
        merge_options({"tags": [1]}, {"tags": ReplaceValue([2])})
        # -> {"tags": [2]}
    """

    def __init__(self, value: Any) -> None:
        self.value = value

    def __repr__(self) -> str:
        return f"ReplaceValue({self.value!r})"


class _Unset:
    """Marker removing a key from the merged result."""

    def __repr__(self) -> str:
        return "UNSET"


UNSET = _Unset()


def _copy(value: Any) -> Any:
    # Containers are copied so merged results never alias the sources.
    # Leaf objects (models, forms) are shared on purpose.
    if isinstance(value, ReplaceValue):
        return _copy(value.value)
    if isinstance(value, Mapping):
        return {k: _copy(v) for k, v in value.items() if v is not UNSET}
    if isinstance(value, list):
        return [_copy(v) for v in value]
    return value


def _merge_into(target: Dict[str, Any], source: Mapping[str, Any]) -> None:
    for key, value in source.items():
        if value is UNSET:
            target.pop(key, None)
        elif isinstance(value, ReplaceValue):
            target[key] = _copy(value.value)
        elif isinstance(value, Mapping) and isinstance(target.get(key), dict):
            _merge_into(target[key], value)
        elif isinstance(value, (list, tuple)) and isinstance(
            target.get(key), (list, tuple)
        ):
            target[key] = list(target[key]) + [_copy(v) for v in value]
        else:
            target[key] = _copy(value)


def merge_options(*sources: Mapping[str, Any]) -> Dict[str, Any]:
    """Merge option mappings left to right into a new dict.

    Nested mappings merge per key, sequences concatenate, and any other
    value from a later source wins. ``ReplaceValue`` forces a replacement
    and ``UNSET`` drops the key. The sources are left untouched.
    """
    result: Dict[str, Any] = {}
    for source in sources:
        if source:
            _merge_into(result, source)
    return result
