from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any, Final


class _Missing:
    """
    Marks an absent value. `None` is a real, storable value, so absence
    needs its own marker.
    """

    _instance: "_Missing | None" = None

    def __new__(cls) -> "_Missing":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False

    def __reduce__(self) -> str:
        return "MISSING"


MISSING: Final = _Missing()


def is_structured(value: Any) -> bool:
    """True for values that get flattened: mappings and non-string sequences."""
    if isinstance(value, (str, bytes, bytearray)):
        return False
    return isinstance(value, (Mapping, Sequence))


def deep_merge(old: Any, new: Any) -> Any:
    """
    Merge `new` into `old` without mutating either.

    Mapping keys are unioned. Where both sides hold a mapping the merge
    recurses; otherwise the new side wins and whatever the old side had
    below that path is discarded.
    """
    if not (isinstance(old, Mapping) and isinstance(new, Mapping)):
        return new
    merged: dict[str, Any] = dict(old)
    for key, value in new.items():
        if key in merged:
            merged[key] = deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged
