from __future__ import annotations

import json
import logging
from typing import Any, Literal

from typing_extensions import TypedDict

from mcp.server.fastmcp import FastMCP
from mcp.server.transport_security import TransportSecuritySettings

from deep_storage import MISSING, DeepStorageError
from endpoints.items_endpoints import ADAPTER

logger = logging.getLogger(__name__)


class ToolTextContent(TypedDict):
    type: Literal["text"]
    text: str


class ItemToolResponse(TypedDict, total=False):
    content: list[ToolTextContent]
    structuredContent: dict[str, Any]


def _reply(message: str | None = None, **structured: Any) -> ItemToolResponse:
    return {
        "content": ([{"type": "text", "text": message}] if message else []),
        "structuredContent": structured,
    }


def _preview(value: Any, limit: int = 200) -> str:
    text = value if isinstance(value, str) else json.dumps(value, ensure_ascii=False)
    return text if len(text) <= limit else text[: limit - 3] + "..."


mcp = FastMCP(
    "Deep Storage",
    stateless_http=True,
    json_response=True,
    # FastMCP enables DNS rebinding protection on localhost, which rejects proxied Host headers.
    transport_security=TransportSecuritySettings(enable_dns_rebinding_protection=False),
)


@mcp.tool()
async def get_item(key: str) -> ItemToolResponse:
    """
    Reads the document or value stored under a key.
    """
    if not isinstance(key, str) or not key.strip():
        return _reply("Invalid input: `key` must be a non-empty string.")
    try:
        value = await ADAPTER.get_item(key, default=MISSING)
    except DeepStorageError as e:
        logger.warning("MCP get_item failed for key=%s: %r", key, e)
        return _reply(f"Could not read {key!r}: {e}", key=key, error=str(e))
    if value is MISSING:
        return _reply(f"No item stored under {key!r}.", key=key, found=False)
    return _reply(f"{key}: {_preview(value)}", key=key, found=True, value=value)


@mcp.tool()
async def set_item(key: str, value: Any, merge: bool = False) -> ItemToolResponse:
    """
    Stores a value under a key. With merge=true, objects are deep-merged into the existing document.
    """
    if not isinstance(key, str) or not key.strip():
        return _reply("Invalid input: `key` must be a non-empty string.")
    try:
        await ADAPTER.set_item(key, value, merge=bool(merge))
        stored = await ADAPTER.get_item(key)
    except DeepStorageError as e:
        logger.warning("MCP set_item failed for key=%s: %r", key, e)
        return _reply(f"Could not store {key!r}: {e}", key=key, error=str(e))
    verb = "Merged into" if merge else "Stored"
    return _reply(f"{verb} {key!r}.", key=key, value=stored)


@mcp.tool()
async def remove_item(key: str) -> ItemToolResponse:
    """
    Removes a key and everything stored under it.
    """
    if not isinstance(key, str) or not key.strip():
        return _reply("Invalid input: `key` must be a non-empty string.")
    try:
        await ADAPTER.remove_item(key)
    except DeepStorageError as e:
        logger.warning("MCP remove_item failed for key=%s: %r", key, e)
        return _reply(f"Could not remove {key!r}: {e}", key=key, removed=False, error=str(e))
    return _reply(f"Removed {key!r}.", key=key, removed=True)
