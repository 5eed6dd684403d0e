from __future__ import annotations

import asyncio
import json
import logging
import threading
from pathlib import Path
from typing import Callable

logger = logging.getLogger(__name__)

DEFAULT_STORE_FILE = Path("data") / "documents.json"

_registry_guard = threading.Lock()
_file_locks: dict[str, threading.Lock] = {}


def _lock_for(path: Path) -> threading.Lock:
    # Stores pointed at the same file share one lock.
    key = str(path.resolve())
    with _registry_guard:
        return _file_locks.setdefault(key, threading.Lock())


class DiskKeyStore:
    """
    Key store whose entries live together in one JSON object on disk.

    Each write loads the entry map, changes one key and replaces the file
    atomically, all under a per-file lock. File I/O runs in a worker thread
    via asyncio.to_thread so the event loop is never blocked.

    A file that exists but is not a JSON object raises instead of being
    treated as empty, so a damaged file is never overwritten.
    """

    def __init__(self, path: Path | str = DEFAULT_STORE_FILE) -> None:
        self._path = Path(path)
        self._lock = _lock_for(self._path)

    @property
    def path(self) -> Path:
        return self._path

    async def get(self, key: str) -> str | None:
        return await asyncio.to_thread(self._get_sync, key)

    async def set(self, key: str, value: str) -> None:
        await asyncio.to_thread(self._update, lambda entries: entries.__setitem__(key, value))

    async def remove(self, key: str) -> None:
        await asyncio.to_thread(self._update, lambda entries: entries.pop(key, None))

    async def clear(self) -> None:
        await asyncio.to_thread(self._update, dict.clear)
        logger.info("DiskKeyStore cleared %s", self._path)

    def entries(self) -> dict[str, str]:
        """Copy of every stored entry, read straight from disk."""
        with self._lock:
            return self._read_entries()

    def _get_sync(self, key: str) -> str | None:
        with self._lock:
            return self._read_entries().get(key)

    def _update(self, change: Callable[[dict[str, str]], object]) -> None:
        with self._lock:
            entries = self._read_entries()
            before = dict(entries)
            change(entries)
            if entries != before:
                self._write_entries(entries)

    def _read_entries(self) -> dict[str, str]:
        if not self._path.exists():
            return {}
        raw = self._path.read_text(encoding="utf-8")
        if not raw.strip():
            return {}
        data = json.loads(raw)
        if not isinstance(data, dict):
            raise ValueError(f"{self._path} does not hold a JSON object")
        return {k: v for k, v in data.items() if isinstance(v, str)}

    def _write_entries(self, entries: dict[str, str]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self._path.with_suffix(self._path.suffix + ".tmp")
        with tmp_path.open("w", encoding="utf-8") as f:
            json.dump(entries, f, indent=2, sort_keys=True, ensure_ascii=False)
            f.write("\n")
        tmp_path.replace(self._path)
