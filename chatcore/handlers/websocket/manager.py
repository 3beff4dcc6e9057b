"""Primary WebSocket connection handler orchestration.

Entry point for every chat client connection. It orchestrates:

1. Connection Setup:
   - Connection admission (capacity check)
   - Client identity resolution (X-Forwarded-For, else peer host)
   - Lifecycle watchdog initialization

2. Message Routing:
   - JOIN_SESSION / LEAVE_SESSION: bind to or unbind from a session
   - SEND_MESSAGE: persist, broadcast, schedule the assistant reply
   - TYPING_START / TYPING_STOP: relay typing indicators

3. Cleanup:
   - Leave the bound session (registry removal)
   - Watchdog stop
   - Connection slot release
"""

from __future__ import annotations

import time
import logging
import contextlib
from typing import TYPE_CHECKING

from fastapi import WebSocket

from .auth import client_address
from .lifecycle import WebSocketLifecycle
from .message_loop import run_message_loop
from .disconnects import is_expected_disconnect
from .errors import reject_connection
from ..state import ChatConnection
from ..connection import ChatConnectionHandler
from ...errors import ErrorCode
from ...logging import log_context
from ...telemetry.sentry import capture_error
from ...telemetry.traces import connection_span
from ...telemetry.instruments import get_metrics
from ...config.websocket import WS_CLOSE_BUSY_CODE, WS_CLOSE_INTERNAL_ERROR_CODE

if TYPE_CHECKING:
    from ...runtime.dependencies import RuntimeDeps

logger = logging.getLogger(__name__)


async def _admit(ws: WebSocket, deps: RuntimeDeps) -> bool:
    """Reserve a connection slot or reject the handshake with RATE_LIMITED."""
    if await deps.admission.connect(ws):
        return True
    get_metrics().connections_rejected_total.add(1, {"reason": "capacity"})
    capacity = deps.admission.get_capacity_info()
    await reject_connection(
        ws,
        code=ErrorCode.RATE_LIMITED,
        message=(
            "Server is at capacity. "
            f"Active connections: {capacity['active']}/{capacity['max']}. "
            "Please try again later."
        ),
        close_code=WS_CLOSE_BUSY_CODE,
    )
    return False


async def handle_websocket_connection(ws: WebSocket, deps: RuntimeDeps) -> None:
    """Serve one chat client from handshake to teardown.

    Args:
        ws: The incoming WebSocket connection from FastAPI.
        deps: Shared runtime services (directory, registry, limiter, replies).
    """
    if not await _admit(ws, deps):
        return

    connection = ChatConnection(websocket=ws, client_address=client_address(ws))
    handler = ChatConnectionHandler(connection, deps)
    lifecycle = WebSocketLifecycle(ws)
    metrics = get_metrics()
    started = time.perf_counter()

    with (
        log_context(connection_id=connection.connection_id, client_id=connection.client_address),
        connection_span(connection_id=connection.connection_id, client_id=connection.client_address),
    ):
        metrics.active_connections.add(1)
        try:
            await ws.accept()
            lifecycle.start()
            logger.info(
                "WebSocket connection accepted. Active: %s",
                deps.admission.get_connection_count(),
            )
            await run_message_loop(ws, handler, lifecycle)
        except Exception as exc:  # noqa: BLE001
            if not is_expected_disconnect(exc):
                logger.exception("WebSocket error")
                capture_error(exc, session_id=connection.session_id)
                with contextlib.suppress(Exception):
                    await ws.close(code=WS_CLOSE_INTERNAL_ERROR_CODE)
        finally:
            await lifecycle.stop()
            try:
                await handler.close()
            finally:
                await deps.admission.disconnect(ws)
                metrics.active_connections.add(-1)
                metrics.connection_duration.record(time.perf_counter() - started)
                if lifecycle.idle_timed_out():
                    metrics.timeout_disconnects_total.add(1)
                logger.info(
                    "WebSocket connection closed. Active: %s",
                    deps.admission.get_connection_count(),
                )


__all__ = ["handle_websocket_connection"]
