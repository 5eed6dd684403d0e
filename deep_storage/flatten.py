"""
Path flattening for nested documents.

`flatten` turns a nested mapping into a single-level mapping whose keys are
the delimiter-joined property paths; `unflatten` is its inverse. Only
non-empty mappings are descended into. Sequences and empty mappings are
kept whole as leaf values so they survive a round trip unchanged. Mapping
keys may not contain the delimiter, since their paths could not be split
back apart:

    >>> flatten({"a": {"b": 1, "c": [1, 2]}, "d": {}})
    {'a.b': 1, 'a.c': [1, 2], 'd': {}}
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

DEFAULT_DELIMITER = "."


def _check_delimiter(delimiter: str) -> None:
    if not delimiter:
        raise ValueError("delimiter must not be empty")


def flatten(value: Mapping[Any, Any], delimiter: str = DEFAULT_DELIMITER) -> dict[str, Any]:
    _check_delimiter(delimiter)
    if not isinstance(value, Mapping):
        raise TypeError(f"flatten() expects a mapping, got {type(value).__name__}")

    out: dict[str, Any] = {}

    def _step(node: Mapping[Any, Any], prefix: str | None) -> None:
        for raw_key, child in node.items():
            segment = str(raw_key)
            if delimiter in segment:
                raise ValueError(f"mapping key {segment!r} contains the delimiter {delimiter!r}")
            path = segment if prefix is None else f"{prefix}{delimiter}{segment}"
            if isinstance(child, Mapping) and child:
                _step(child, path)
            else:
                out[path] = child

    _step(value, None)
    return out


def unflatten(flat: Mapping[str, Any], delimiter: str = DEFAULT_DELIMITER) -> dict[str, Any]:
    _check_delimiter(delimiter)

    result: dict[str, Any] = {}
    for path, leaf in flat.items():
        segments = str(path).split(delimiter)
        node = result
        for depth, segment in enumerate(segments[:-1]):
            if segment not in node:
                node[segment] = {}
            child = node[segment]
            if not isinstance(child, dict) or _is_leaf(flat, delimiter, segments[: depth + 1]):
                raise ValueError(f"conflicting path {path!r}: {delimiter.join(segments[: depth + 1])!r} is a leaf")
            node = child
        last = segments[-1]
        if last in node:
            raise ValueError(f"conflicting path {path!r}: already populated")
        node[last] = leaf
    return result


def _is_leaf(flat: Mapping[str, Any], delimiter: str, segments: list[str]) -> bool:
    return delimiter.join(segments) in flat
