"""
Wire representation of stored values.

Strings are stored as-is unless they start with "{". Every other value
(and such a string) is wrapped as `{"__enc": <value>}` and serialized to
compact JSON, so a number, a boolean, `None` or a leaf list comes back
with its original type. An optional external encoder (encryption,
compression, ...) is applied on top of that string.
"""

from __future__ import annotations

import inspect
import json
import logging
from typing import Any, Final

from pydantic import TypeAdapter, ValidationError

from .errors import IndexParseError
from .flatten import DEFAULT_DELIMITER
from .interfaces import ValueEncoder
from .values import MISSING

FLAT_TOKEN: Final = "__flat__"
FLAT_LIST: Final = "__list__"
ENC_KEY: Final = "__enc"

__all__ = [
    "FLAT_TOKEN",
    "FLAT_LIST",
    "ENC_KEY",
    "DEFAULT_DELIMITER",
    "ValueCodec",
    "dump_flat_keys",
    "load_flat_keys",
    "resolve",
]

logger = logging.getLogger(__name__)

_FLAT_KEYS = TypeAdapter(list[str])


def _dumps(payload: Any) -> str:
    return json.dumps(payload, separators=(",", ":"), ensure_ascii=False)


async def resolve(result: Any) -> Any:
    """Await `result` if a capability returned an awaitable, else pass it through."""
    if inspect.isawaitable(result):
        return await result
    return result


class ValueCodec:
    def __init__(self, encoder: ValueEncoder | None = None) -> None:
        self._encoder = encoder

    @property
    def encoder(self) -> ValueEncoder | None:
        return self._encoder

    async def encode(self, value: Any) -> str | None:
        """Return the string to store for `value`, or None when nothing should be written."""
        if value is MISSING:
            return None
        if isinstance(value, str) and not value.startswith("{"):
            data = value
        else:
            # Strings starting with "{" are wrapped too, or they could decode as a payload.
            data = _dumps({ENC_KEY: value})
        if self._encoder is not None:
            data = await resolve(self._encoder.encode(data))
        return data

    async def decode(self, raw: Any) -> Any:
        """
        Turn a stored string back into its value.

        Anything that does not parse as a `{"__enc": ...}` wrapper comes back
        as the plain string, so one damaged entry never fails a whole read.
        """
        if raw is None or raw is MISSING:
            return MISSING
        data = raw
        if self._encoder is not None:
            data = await resolve(self._encoder.decode(data))
        if not isinstance(data, str) or not data.startswith("{"):
            return data
        try:
            parsed = json.loads(data)
        except ValueError:
            logger.debug("Stored value looks like JSON but does not parse; returning it verbatim")
            return data
        if isinstance(parsed, dict) and ENC_KEY in parsed:
            return parsed[ENC_KEY]
        return data


def dump_flat_keys(flat_keys: list[str]) -> str:
    return _dumps(flat_keys)


def load_flat_keys(raw: str) -> list[str]:
    try:
        return _FLAT_KEYS.validate_json(raw)
    except ValidationError as e:
        raise IndexParseError(f"Malformed flat-key index: {e}") from e
