from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping
from typing import Any

from .codec import DEFAULT_DELIMITER, ValueCodec, dump_flat_keys, load_flat_keys, resolve
from .errors import DataCorruptionError, InvalidConfigurationError, InvalidValueError, NotSupportedError
from .flatten import flatten, unflatten
from .interfaces import KeyStore, ValueEncoder
from .keys import list_key, normalize_key, root_key
from .values import MISSING, deep_merge, is_structured

logger = logging.getLogger(__name__)


class DeepStorageAdapter:
    """
    Turns a flat key-value store into a pseudo-document store.

    Scalars are stored directly under their key. Mappings and sequences are
    split into one entry per leaf path (under `__flat__<key>`) plus an index
    entry (`__flat__<key>__list__`) listing every flat key the document owns.
    The adapter holds no data of its own.
    """

    def __init__(
        self,
        store: KeyStore,
        encoder: ValueEncoder | None = None,
        delimiter: str = DEFAULT_DELIMITER,
    ) -> None:
        if not delimiter:
            raise InvalidConfigurationError("Delimiter must not be empty")

        self._store = store
        self._codec = ValueCodec(encoder)
        self._delimiter = delimiter
        self._store_clear = getattr(store, "clear", None)
        self.supports_clear = callable(self._store_clear)
        self.has_encoder = encoder is not None

    @property
    def store(self) -> KeyStore:
        return self._store

    @property
    def encoder(self) -> ValueEncoder | None:
        return self._codec.encoder

    @property
    def delimiter(self) -> str:
        return self._delimiter

    async def get_item(self, key: Any, default: Any = None) -> Any:
        """Return the value stored at `key`, or `default` if there is none."""
        key = normalize_key(key)

        flat_keys = await self._get_flat_keys(key)
        if flat_keys is None:
            value = await self._get_value(key)
            return default if value is MISSING else value

        value = await self._load_document(key, flat_keys)
        logger.debug("get_item key=%s flat_entries=%d", key, len(flat_keys))
        return value

    async def set_item(self, key: Any, value: Any, *, merge: bool = False) -> None:
        """
        Store `value` at `key`, replacing whatever was there.

        With `merge=True` and an existing document, `value` is deep-merged
        into it first. Storing MISSING removes the key; merging MISSING
        changes nothing.
        """
        key = normalize_key(key)

        if merge:
            if value is MISSING:
                return
            flat_keys = await self._get_flat_keys(key)
            if flat_keys is not None:
                existing = await self._load_document(key, flat_keys)
                value = deep_merge(existing, value)

        # Everything is encoded before the old value goes, so a value that
        # cannot be stored leaves the key as it was.
        entries: dict[str, str] = {}
        index: str | None = None
        if is_structured(value):
            entries = await self._encode_document(key, value)
            index = dump_flat_keys(list(entries))
        elif value is not MISSING:
            entries = {key: await self._codec.encode(value)}

        await self.remove_item(key)

        await asyncio.gather(*(resolve(self._store.set(k, v)) for k, v in entries.items()))
        if index is not None:
            # Written last: its presence marks the key as holding a document.
            await resolve(self._store.set(list_key(root_key(key)), index))
        logger.debug("set_item key=%s entries=%d document=%s", key, len(entries), index is not None)

    async def remove_item(self, key: Any) -> None:
        """Remove `key` and every flat entry it owns. Removing a missing key is fine."""
        key = normalize_key(key)

        flat_keys = await self._get_flat_keys(key) or []
        root = root_key(key)
        keys = [*flat_keys, key, root, list_key(root)]
        await asyncio.gather(*(resolve(self._store.remove(k)) for k in keys))
        logger.debug("remove_item key=%s flat_entries=%d", key, len(flat_keys))

    async def clear(self) -> None:
        """Wipe the whole underlying store."""
        if not self.supports_clear:
            raise NotSupportedError(f"{type(self._store).__name__} does not support clear()")
        await resolve(self._store_clear())

    async def _load_document(self, key: str, flat_keys: list[str]) -> Any:
        root = root_key(key)
        if not flat_keys:
            return {}

        values = await asyncio.gather(*(self._get_value(k) for k in flat_keys))
        flat_data: dict[str, Any] = {}
        for flat_key, value in zip(flat_keys, values):
            if value is MISSING:
                logger.warning("Flat entry %s listed in index of %s is missing; skipping", flat_key, key)
                continue
            flat_data[flat_key] = value
        if not flat_data:
            raise DataCorruptionError(f"None of the {len(flat_keys)} entries indexed for {key!r} exist")

        if root in flat_data:
            # Empty containers and sequences are stored whole under the root itself.
            if len(flat_data) > 1:
                raise DataCorruptionError(f"Root entry {root!r} is not the only entry of {key!r}")
            return flat_data[root]

        # Paths are split below the root only, so a key containing the delimiter still works.
        prefix = root + self._delimiter
        relative: dict[str, Any] = {}
        for flat_key, value in flat_data.items():
            if not flat_key.startswith(prefix):
                raise DataCorruptionError(
                    f"Unexpected data in key store. Expected root key {root!r}, but got {flat_key!r}"
                )
            relative[flat_key[len(prefix):]] = value

        try:
            return unflatten(relative, self._delimiter)
        except ValueError as e:
            raise DataCorruptionError(f"Cannot reassemble {key!r}: {e}") from e

    async def _encode_document(self, key: str, value: Any) -> dict[str, str]:
        root = root_key(key)
        if isinstance(value, Mapping) and value:
            try:
                flat = flatten(value, self._delimiter)
            except ValueError as e:
                raise InvalidValueError(f"Cannot store {key!r}: {e}") from e
            leaves = {f"{root}{self._delimiter}{path}": leaf for path, leaf in flat.items()}
        else:
            # Sequences and empty mappings are stored whole under the root itself.
            leaves = {root: value}
        flat_keys = [k for k, leaf in leaves.items() if leaf is not MISSING]
        encoded = await asyncio.gather(*(self._codec.encode(leaves[k]) for k in flat_keys))
        return dict(zip(flat_keys, encoded))

    async def _get_flat_keys(self, key: str) -> list[str] | None:
        raw = await self._store_get(list_key(root_key(key)))
        if not raw:
            return None
        return load_flat_keys(raw)

    async def _get_value(self, key: str) -> Any:
        return await self._codec.decode(await self._store_get(key))

    async def _store_get(self, key: str) -> Any:
        try:
            return await resolve(self._store.get(key))
        except KeyError:
            return MISSING
