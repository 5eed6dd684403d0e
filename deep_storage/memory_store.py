"""
In-memory key store.

Plain dict behind a lock. Everything is lost when the process exits, so it
suits tests, development and caches rather than real persistence.
"""

from __future__ import annotations

import logging
from threading import Lock

logger = logging.getLogger(__name__)


class InMemoryKeyStore:
    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})
        self._lock = Lock()

    def get(self, key: str) -> str | None:
        with self._lock:
            return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        if not isinstance(value, str):
            raise TypeError(f"InMemoryKeyStore only holds strings, got {type(value).__name__} for {key!r}")
        with self._lock:
            self._data[key] = value

    def remove(self, key: str) -> None:
        with self._lock:
            self._data.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            size = len(self._data)
            self._data.clear()
        logger.debug("InMemoryKeyStore cleared %d entries", size)

    def snapshot(self) -> dict[str, str]:
        """Copy of the raw entries, for inspection."""
        with self._lock:
            return dict(self._data)

    def get_stats(self) -> dict[str, int]:
        with self._lock:
            return {
                "entry_count": len(self._data),
                "total_size_bytes": sum(len(v) for v in self._data.values()),
            }
