"""WebSocket message loop and per-frame error recovery."""

from __future__ import annotations

import asyncio
import logging

from fastapi import WebSocket, WebSocketDisconnect

from .errors import send_error
from .parser import parse_client_message
from .lifecycle import WebSocketLifecycle
from .disconnects import is_expected_disconnect
from ..connection import ChatConnectionHandler
from ...errors import ChatError, ErrorCode
from ...telemetry.sentry import capture_error
from ...config.websocket import WS_WATCHDOG_TICK_S

logger = logging.getLogger(__name__)

_INTERNAL_ERROR_MESSAGE = "Internal server error"


async def _receive_text(ws: WebSocket) -> str:
    message = await ws.receive()
    if message["type"] == "websocket.disconnect":
        raise WebSocketDisconnect(message.get("code", 1000), message.get("reason"))
    text = message.get("text")
    if text is not None:
        return text
    data = message.get("bytes") or b""
    return data.decode("utf-8", errors="replace")


async def _recv_with_watchdog(ws: WebSocket, lifecycle: WebSocketLifecycle) -> tuple[str | None, bool]:
    try:
        raw = await asyncio.wait_for(_receive_text(ws), timeout=WS_WATCHDOG_TICK_S * 2)
        return raw, False
    except TimeoutError:
        return None, lifecycle.should_close()


async def process_frame(ws: WebSocket, handler: ChatConnectionHandler, raw: str) -> None:
    """Parse and dispatch one frame, reporting failures to this client only.

    Transport disconnects propagate so the caller can tear the connection
    down; every other failure leaves the connection running.
    """
    try:
        envelope = parse_client_message(raw)
        await handler.dispatch(envelope)
    except ChatError as exc:
        logger.info("WS op failed: code=%s message=%s", exc.code, exc.message)
        await send_error(ws, code=exc.code, message=exc.message)
    except Exception as exc:
        if is_expected_disconnect(exc):
            raise
        logger.exception("WS op raised unexpectedly")
        capture_error(
            exc,
            session_id=handler.connection.session_id,
            connection_id=handler.connection.connection_id,
            client_id=handler.connection.client_address,
        )
        await send_error(ws, code=ErrorCode.INTERNAL_ERROR, message=_INTERNAL_ERROR_MESSAGE)


async def run_message_loop(
    ws: WebSocket,
    handler: ChatConnectionHandler,
    lifecycle: WebSocketLifecycle,
) -> None:
    """Receive, validate, and dispatch client frames until idle close."""
    while True:
        raw, should_close = await _recv_with_watchdog(ws, lifecycle)
        if raw is None:
            if should_close:
                break
            continue

        lifecycle.touch()
        await process_frame(ws, handler, raw)


__all__ = ["process_frame", "run_message_loop"]
