"""Deterministic JSON encoding with recursively sorted object keys.

Two values that are structurally equal up to mapping key order encode to
byte-identical text, which keeps harness output and logged payloads diffable.
"""

from __future__ import annotations

import dataclasses
import json
import math
from collections.abc import Mapping
from typing import Any, Protocol, runtime_checkable

from shell_call.errors import ensure_error


@runtime_checkable
class JsonSerializable(Protocol):
    """Objects that know how to expand themselves into plain JSON data."""

    def to_json(self) -> Any:
        """Return a JSON-compatible representation of the object."""


def deep_clone_and_sort(value: Any) -> Any:  # noqa: PLR0911
    """Clone ``value`` into plain JSON data with every mapping's keys sorted."""

    if isinstance(value, float) and not math.isfinite(value):
        return None
    if value is None or isinstance(value, (bool, int, float, str)):
        return value
    if isinstance(value, (list, tuple)):
        return [deep_clone_and_sort(item) for item in value]
    if isinstance(value, JsonSerializable) and not isinstance(value, type):
        return deep_clone_and_sort(value.to_json())
    if isinstance(value, BaseException):
        return deep_clone_and_sort(ensure_error(value).to_json())
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return deep_clone_and_sort(
            {field.name: getattr(value, field.name) for field in dataclasses.fields(value)},
        )
    if isinstance(value, Mapping):
        return _sorted_mapping(value)
    return value


def stable_json_dumps(value: Any, pretty: bool = True) -> str:
    """Serialize ``value`` deterministically, 2-space indented unless ``pretty`` is off."""

    sorted_value = deep_clone_and_sort(value)
    if pretty:
        return json.dumps(sorted_value, ensure_ascii=False, indent=2, allow_nan=False)
    return json.dumps(sorted_value, ensure_ascii=False, separators=(",", ":"), allow_nan=False)


def is_equal(left: Any, right: Any) -> bool:
    """Compare two values by their deterministic encoding."""

    return stable_json_dumps(left) == stable_json_dumps(right)


def _sorted_mapping(value: Mapping[Any, Any]) -> dict[str, Any]:
    pairs: dict[str, Any] = {}
    for key, item in value.items():
        json_key = _json_key(key)
        if json_key in pairs:
            raise TypeError(f"Duplicate JSON key after coercion: {json_key!r}")
        pairs[json_key] = item
    return {key: deep_clone_and_sort(pairs[key]) for key in sorted(pairs)}


def _json_key(key: object) -> str:
    # Same key coercion json.dumps applies, done up front so mixed keys sort.
    if isinstance(key, str):
        return key
    if key is True:
        return "true"
    if key is False:
        return "false"
    if key is None:
        return "null"
    if isinstance(key, (int, float)):
        return json.dumps(key)
    raise TypeError(f"Keys must be str, int, float, bool or None, not {type(key).__name__}")
