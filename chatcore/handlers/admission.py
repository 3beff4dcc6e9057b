"""Connection admission for the chat WebSocket endpoint.

Bounds the number of concurrently open chat connections. Admission is
two-stage:
1. Semaphore acquisition (with timeout) to reserve a slot
2. Lock-protected set addition to track the connection

This prevents both over-admission and races between connect and disconnect.

Example:
    admission = ConnectionAdmission(max_connections=100)

    if not await admission.connect(ws):
        ...  # reject with ERROR RATE_LIMITED, close 1013
    try:
        ...
    finally:
        await admission.disconnect(ws)
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from fastapi import WebSocket

from ..config import MAX_CONCURRENT_CONNECTIONS, WS_HANDSHAKE_ACQUIRE_TIMEOUT_S

logger = logging.getLogger(__name__)


class ConnectionAdmission:
    """Tracks admitted WebSockets and enforces the concurrency cap.

    Attributes:
        max_connections: Maximum allowed concurrent connections.
        acquire_timeout: Max seconds to wait for a connection slot.
        active_connections: Set of currently admitted WebSocket instances.
    """

    def __init__(
        self,
        max_connections: int = MAX_CONCURRENT_CONNECTIONS,
        acquire_timeout: float = WS_HANDSHAKE_ACQUIRE_TIMEOUT_S,
    ):
        if max_connections <= 0:
            raise ValueError("max_connections must be positive")
        self.max_connections = max_connections
        self.acquire_timeout = acquire_timeout
        self.active_connections: set[WebSocket] = set()
        self._lock = asyncio.Lock()
        self._semaphore = asyncio.Semaphore(max_connections)

    async def connect(self, websocket: WebSocket) -> bool:
        """Reserve a slot for `websocket`; False when at capacity."""
        try:
            await asyncio.wait_for(self._semaphore.acquire(), timeout=self.acquire_timeout)
        except TimeoutError:
            logger.warning(
                "Connection rejected: at capacity (%s/%s)",
                len(self.active_connections),
                self.max_connections,
            )
            return False

        try:
            async with self._lock:
                self.active_connections.add(websocket)
        except BaseException:
            self._semaphore.release()
            raise
        logger.debug(
            "Connection admitted: %s/%s active",
            len(self.active_connections),
            self.max_connections,
        )
        return True

    async def disconnect(self, websocket: WebSocket) -> None:
        """Release the slot held by `websocket`; no-op if it holds none."""
        should_release = False
        async with self._lock:
            if websocket in self.active_connections:
                self.active_connections.remove(websocket)
                should_release = True
        if should_release:
            self._semaphore.release()

    def get_connection_count(self) -> int:
        return len(self.active_connections)

    def get_capacity_info(self) -> dict[str, Any]:
        active = len(self.active_connections)
        return {
            "active": active,
            "max": self.max_connections,
            "available": self.max_connections - active,
            "at_capacity": active >= self.max_connections,
        }


__all__ = ["ConnectionAdmission"]
