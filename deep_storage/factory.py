from __future__ import annotations

import logging

from .adapter import DeepStorageAdapter
from .disk_store import DiskKeyStore
from .encoders import get_encoder
from .interfaces import KeyStore
from .memory_store import InMemoryKeyStore
from .settings import Settings, get_settings

logger = logging.getLogger(__name__)


def build_store(settings: Settings) -> KeyStore:
    if not settings.persist_to_disk:
        return InMemoryKeyStore()
    logger.info("Using disk key store at %s", settings.store_file)
    return DiskKeyStore(settings.store_file)


def build_adapter(settings: Settings | None = None) -> DeepStorageAdapter:
    settings = settings or get_settings()
    return DeepStorageAdapter(
        build_store(settings),
        encoder=get_encoder(settings.encoder),
        delimiter=settings.delimiter,
    )
