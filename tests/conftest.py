from __future__ import annotations

import importlib
from pathlib import Path
import sys


import pytest


# Ensure the repository root (parent of ./tests) is importable during pytest collection.
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))


class MemStore:
    """Synchronous dict store that signals absence with None."""

    def __init__(self) -> None:
        self.data: dict[str, str] = {}

    def get(self, key: str) -> str | None:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        assert isinstance(value, str), f"non-string written to {key!r}: {value!r}"
        self.data[key] = value

    def remove(self, key: str) -> None:
        self.data.pop(key, None)

    def clear(self) -> None:
        self.data = {}


class AsyncKeyErrorStore:
    """Async store without clear() that signals absence by raising KeyError."""

    def __init__(self) -> None:
        self.data: dict[str, str] = {}
        self.calls: list[tuple[str, str]] = []

    async def get(self, key: str) -> str:
        self.calls.append(("get", key))
        return self.data[key]

    async def set(self, key: str, value: str) -> None:
        self.calls.append(("set", key))
        self.data[key] = value

    async def remove(self, key: str) -> None:
        self.calls.append(("remove", key))
        self.data.pop(key, None)


class WrappingEncoder:
    """Marks every stored value so tests can tell it went through the encoder."""

    def encode(self, value: str) -> str:
        return f"<<{value}>>"

    def decode(self, data: str) -> str:
        assert data.startswith("<<") and data.endswith(">>"), data
        return data[2:-2]


@pytest.fixture
def mem_store() -> MemStore:
    return MemStore()


@pytest.fixture
def async_store() -> AsyncKeyErrorStore:
    return AsyncKeyErrorStore()


@pytest.fixture
def wrapping_encoder() -> WrappingEncoder:
    return WrappingEncoder()


@pytest.fixture
def sandbox_project(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Path:
    """
    Run from a temp project directory so the relative default ./data never points at the real one.
    """
    monkeypatch.chdir(tmp_path)
    for name in ("PERSIST_TO_DISK", "DEEP_STORAGE_FILE", "DEEP_STORAGE_ENCODER", "DEEP_STORAGE_DELIMITER"):
        monkeypatch.delenv(name, raising=False)
    return tmp_path


@pytest.fixture
def reload_endpoints(sandbox_project: Path) -> None:
    """
    Endpoints create the adapter singleton at import time; reload after sandboxing the working directory.
    """
    import endpoints.items_endpoints as items_endpoints
    import endpoints.mcp_endpoints as mcp_endpoints

    importlib.reload(items_endpoints)
    importlib.reload(mcp_endpoints)
