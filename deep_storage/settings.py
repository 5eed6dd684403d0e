from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from .codec import DEFAULT_DELIMITER
from .disk_store import DEFAULT_STORE_FILE


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class Settings:
    # Flattening / encoding
    delimiter: str
    encoder: str

    # Persistence (default: in-memory store)
    persist_to_disk: bool
    store_file: Path

    # Logging
    log_level: str
    debug_log_requests: bool


def get_settings() -> Settings:
    delimiter = os.getenv("DEEP_STORAGE_DELIMITER", DEFAULT_DELIMITER)
    encoder = os.getenv("DEEP_STORAGE_ENCODER", "none").strip().lower()

    persist_to_disk = _env_bool("PERSIST_TO_DISK", False)
    raw_file = os.getenv("DEEP_STORAGE_FILE", "").strip()
    store_file = Path(raw_file) if raw_file else DEFAULT_STORE_FILE

    log_level = os.getenv("LOG_LEVEL", "INFO").strip().upper()
    debug_log_requests = _env_bool("DEBUG_LOG_REQUESTS", False)

    return Settings(
        delimiter=delimiter,
        encoder=encoder,
        persist_to_disk=persist_to_disk,
        store_file=store_file,
        log_level=log_level,
        debug_log_requests=debug_log_requests,
    )
