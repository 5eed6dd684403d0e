from __future__ import annotations

from .adapter import DeepStorageAdapter
from .codec import DEFAULT_DELIMITER, ENC_KEY, FLAT_LIST, FLAT_TOKEN, ValueCodec
from .disk_store import DiskKeyStore
from .encoders import Base64Encoder, ZlibEncoder, get_encoder
from .errors import (
    DataCorruptionError,
    DeepStorageError,
    IndexParseError,
    InvalidConfigurationError,
    InvalidKeyError,
    InvalidValueError,
    NotSupportedError,
)
from .flatten import flatten, unflatten
from .interfaces import ClearableKeyStore, KeyStore, ValueEncoder
from .memory_store import InMemoryKeyStore
from .values import MISSING, deep_merge, is_structured

__all__ = [
    "DeepStorageAdapter",
    "ValueCodec",
    "DEFAULT_DELIMITER",
    "ENC_KEY",
    "FLAT_LIST",
    "FLAT_TOKEN",
    "KeyStore",
    "ClearableKeyStore",
    "ValueEncoder",
    "InMemoryKeyStore",
    "DiskKeyStore",
    "Base64Encoder",
    "ZlibEncoder",
    "get_encoder",
    "DeepStorageError",
    "DataCorruptionError",
    "IndexParseError",
    "InvalidConfigurationError",
    "InvalidKeyError",
    "InvalidValueError",
    "NotSupportedError",
    "flatten",
    "unflatten",
    "MISSING",
    "deep_merge",
    "is_structured",
]
