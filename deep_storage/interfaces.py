from __future__ import annotations

from typing import Any, Awaitable, Protocol


class KeyStore(Protocol):
    """
    Flat string-to-string store the adapter sits on.

    Methods may be plain or async. `get` signals a missing key by returning
    None (or MISSING) or by raising KeyError; `remove` of a missing key is a
    no-op. `clear` is optional and is looked up once when the adapter is
    built.
    """

    def get(self, key: str) -> Any | Awaitable[Any]:
        ...

    def set(self, key: str, value: str) -> Any | Awaitable[Any]:
        ...

    def remove(self, key: str) -> Any | Awaitable[Any]:
        ...


class ClearableKeyStore(KeyStore, Protocol):
    def clear(self) -> Any | Awaitable[Any]:
        ...


class ValueEncoder(Protocol):
    """Symmetric string transform applied to every stored value (e.g. encryption)."""

    def encode(self, value: str) -> str | Awaitable[str]:
        ...

    def decode(self, data: str) -> str | Awaitable[str]:
        ...
