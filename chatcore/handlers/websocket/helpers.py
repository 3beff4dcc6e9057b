"""Safe send helpers for WebSocket transports.

A transport that already went away must never raise into the caller: broadcast
fan-out skips it and keeps delivering to the other members.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from fastapi import WebSocket
from starlette.websockets import WebSocketState

from .disconnects import is_expected_disconnect

logger = logging.getLogger(__name__)


def is_sendable(ws: WebSocket) -> bool:
    """Return True unless the transport reports it is no longer connected."""
    client_state = getattr(ws, "client_state", WebSocketState.CONNECTED)
    application_state = getattr(ws, "application_state", WebSocketState.CONNECTED)
    return client_state == WebSocketState.CONNECTED and application_state == WebSocketState.CONNECTED


async def safe_send_text(ws: WebSocket, text: str) -> bool:
    """Send text to the client, returning False if the socket is gone."""
    if not is_sendable(ws):
        return False
    try:
        await ws.send_text(text)
    except Exception as exc:
        if not is_expected_disconnect(exc):
            raise
        logger.info("WebSocket disconnected while sending %s bytes", len(text))
        return False
    return True


async def safe_send_json(ws: WebSocket, payload: dict[str, Any]) -> bool:
    """Send a JSON payload, swallowing client disconnects."""
    return await safe_send_text(ws, json.dumps(payload, ensure_ascii=False))


__all__ = ["is_sendable", "safe_send_text", "safe_send_json"]
