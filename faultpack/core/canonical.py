"""JSON-safe canonicalization helpers for FaultPack."""

from __future__ import annotations

from collections.abc import Mapping
import json
import math
from typing import Any

_CYCLE_MARKER = "<cycle>"


def canonicalize(value: Any) -> Any:
    """Normalize a value to a deterministic, JSON-safe representation.

    Mappings become dicts with string keys in sorted order, sequences and sets
    become lists, and objects JSON cannot express are replaced by their
    ``repr``. Self-referencing containers are cut at the repeated node.
    Finite floats are kept exactly.
    """
    return _canonicalize(value, active=frozenset())


def canonical_json(value: Any) -> str:
    """Serialize a value to stable canonical JSON."""
    return json.dumps(
        canonicalize(value),
        ensure_ascii=True,
        separators=(",", ":"),
        sort_keys=True,
    )


def string_keyed(mapping: Mapping[Any, Any]) -> dict[str, Any]:
    """Copy a mapping with string keys, never merging two distinct keys.

    String keys are kept as-is. Other keys use ``str(key)`` unless that text is
    already taken, in which case they are tagged with their type
    (``{1: .., "1": ..}`` becomes ``{"1": .., "int:1": ..}``).
    """
    result: dict[str, Any] = {}
    deferred: list[tuple[Any, Any]] = []
    for key, value in mapping.items():
        if isinstance(key, str):
            result[key] = value
        else:
            deferred.append((key, value))

    for key, value in deferred:
        candidate = _safe_text(key, str)
        if candidate in result:
            candidate = f"{type(key).__name__}:{_safe_text(key, repr)}"
        base = candidate
        suffix = 2
        while candidate in result:
            candidate = f"{base}#{suffix}"
            suffix += 1
        result[candidate] = value
    return result


def _canonicalize(value: Any, *, active: frozenset[int]) -> Any:
    if isinstance(value, bool) or value is None:
        return value

    if isinstance(value, int):
        return int(value)

    if isinstance(value, float):
        if math.isnan(value) or math.isinf(value):
            return repr(value)
        return float(value)

    if isinstance(value, str):
        return value.replace("\r\n", "\n").replace("\r", "\n")

    if isinstance(value, Mapping):
        if id(value) in active:
            return _CYCLE_MARKER
        nested = active | {id(value)}
        keyed = string_keyed(value)
        return {key: _canonicalize(keyed[key], active=nested) for key in sorted(keyed)}

    if isinstance(value, (list, tuple)):
        if id(value) in active:
            return _CYCLE_MARKER
        nested = active | {id(value)}
        return [_canonicalize(item, active=nested) for item in value]

    if isinstance(value, (set, frozenset)):
        items = [_canonicalize(item, active=active) for item in value]
        items.sort(key=_stable_item_sort_key)
        return items

    return _safe_text(value, repr)


def _safe_text(value: Any, render: Any) -> str:
    try:
        return render(value)
    except Exception:
        return f"<unrepresentable {type(value).__name__} object>"


def _stable_item_sort_key(item: Any) -> str:
    return json.dumps(item, ensure_ascii=True, separators=(",", ":"), sort_keys=True)
