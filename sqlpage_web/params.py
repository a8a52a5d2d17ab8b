"""Request parameter maps where a value is a single string or a list of strings."""

from __future__ import annotations

import json
from collections.abc import Iterable
from typing import Union

ParamValue = Union[str, list[str]]
ParamMap = dict[str, ParamValue]

_ARRAY_SUFFIX = "[]"


def _as_list(value: ParamValue) -> list[str]:
    return [value] if isinstance(value, str) else list(value)


def merge_values(old: ParamValue, new: ParamValue) -> ParamValue:
    """Combine two values for the same key.

    Two single values: the newer one wins. Otherwise both are joined into a list.
    """
    if isinstance(old, str) and isinstance(new, str):
        return new
    return _as_list(old) + _as_list(new)


def as_json_str(value: ParamValue) -> str:
    """Return a single value as is, and a list as a compact JSON array."""
    if isinstance(value, str):
        return value
    return json.dumps(list(value), ensure_ascii=False, separators=(",", ":"))


def param_map(pairs: Iterable[tuple[str, str]]) -> ParamMap:
    """Build a parameter map from key/value pairs.

    Keys ending in ``[]`` lose that suffix and always produce a list.
    """
    result: ParamMap = {}
    for key, value in pairs:
        entry: ParamValue
        if key.endswith(_ARRAY_SUFFIX):
            key = key[: -len(_ARRAY_SUFFIX)]
            entry = [value]
        else:
            entry = value
        if key in result:
            result[key] = merge_values(result[key], entry)
        else:
            result[key] = entry
    return result