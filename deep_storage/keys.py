from __future__ import annotations

from typing import Any

from .codec import FLAT_LIST, FLAT_TOKEN
from .errors import InvalidKeyError


def normalize_key(key: Any) -> str:
    if not key:
        raise InvalidKeyError(f"Invalid key: {key!r}")
    normalized = str(key)
    if not normalized:
        raise InvalidKeyError(f"Invalid key: {key!r}")
    return normalized


def root_key(key: str) -> str:
    # Keeps a flattened document apart from a scalar stored under the same literal key.
    return FLAT_TOKEN + key


def list_key(root: str) -> str:
    return root + FLAT_LIST
