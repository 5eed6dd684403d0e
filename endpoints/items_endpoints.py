from __future__ import annotations

import contextlib
import logging
from typing import Any, Iterator

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from deep_storage import MISSING, DeepStorageError, InvalidKeyError, InvalidValueError, NotSupportedError
from deep_storage.factory import build_adapter
from deep_storage.settings import get_settings

router = APIRouter(prefix="/items", tags=["items"])
logger = logging.getLogger(__name__)

SETTINGS = get_settings()
DEBUG_LOG_REQUESTS = SETTINGS.debug_log_requests

# Shared with the MCP tools so both surfaces see the same documents.
ADAPTER = build_adapter(SETTINGS)


class SetItemRequest(BaseModel):
    value: Any = None
    merge: bool = False


class ItemResponse(BaseModel):
    key: str
    value: Any = None


class RemovedResponse(BaseModel):
    key: str
    removed: bool = True


@contextlib.contextmanager
def _storage_errors(key: str | None = None) -> Iterator[None]:
    try:
        yield
    except (InvalidKeyError, InvalidValueError) as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    except NotSupportedError as e:
        raise HTTPException(status_code=501, detail=str(e)) from e
    except DeepStorageError as e:
        logger.error("ITEMS: storage error for key=%s: %r", key, e)
        raise HTTPException(status_code=500, detail=str(e)) from e


@router.get("/{key:path}", response_model=ItemResponse)
async def get_item(key: str) -> ItemResponse:
    with _storage_errors(key):
        value = await ADAPTER.get_item(key, default=MISSING)
    if value is MISSING:
        raise HTTPException(status_code=404, detail=f"Item {key!r} not found")
    return ItemResponse(key=key, value=value)


@router.put("/{key:path}", response_model=ItemResponse)
async def put_item(key: str, body: SetItemRequest) -> ItemResponse:
    if DEBUG_LOG_REQUESTS:
        logger.info("ITEMS PUT: key=%s merge=%s type=%s", key, body.merge, type(body.value).__name__)
    with _storage_errors(key):
        await ADAPTER.set_item(key, body.value, merge=body.merge)
        value = await ADAPTER.get_item(key)
    return ItemResponse(key=key, value=value)


@router.delete("/{key:path}", response_model=RemovedResponse)
async def delete_item(key: str) -> RemovedResponse:
    if DEBUG_LOG_REQUESTS:
        logger.info("ITEMS DELETE: key=%s", key)
    with _storage_errors(key):
        await ADAPTER.remove_item(key)
    return RemovedResponse(key=key)


@router.delete("", status_code=204)
async def clear_items() -> None:
    if DEBUG_LOG_REQUESTS:
        logger.info("ITEMS CLEAR")
    with _storage_errors():
        await ADAPTER.clear()
