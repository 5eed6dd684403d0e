"""
Ready-made value encoders.

Each is a symmetric string transform: `decode(encode(s)) == s` for every
string the adapter writes.
"""

from __future__ import annotations

import base64
import zlib

from .interfaces import ValueEncoder


class Base64Encoder:
    """Base64 over UTF-8. Keeps stored values free of newlines, commas and quotes."""

    def encode(self, value: str) -> str:
        return base64.b64encode(value.encode("utf-8")).decode("ascii")

    def decode(self, data: str) -> str:
        return base64.b64decode(data.encode("ascii")).decode("utf-8")


class ZlibEncoder:
    """zlib-compressed, then base64 so the result is still a string."""

    def __init__(self, level: int = 6) -> None:
        self._level = level

    def encode(self, value: str) -> str:
        packed = zlib.compress(value.encode("utf-8"), self._level)
        return base64.b64encode(packed).decode("ascii")

    def decode(self, data: str) -> str:
        return zlib.decompress(base64.b64decode(data.encode("ascii"))).decode("utf-8")


ENCODERS: dict[str, type] = {
    "base64": Base64Encoder,
    "zlib": ZlibEncoder,
}


def get_encoder(name: str | None) -> ValueEncoder | None:
    key = (name or "none").strip().lower()
    if key in ("", "none"):
        return None
    try:
        return ENCODERS[key]()
    except KeyError:
        raise ValueError(f"Unknown encoder {name!r}; expected one of: none, {', '.join(ENCODERS)}") from None
