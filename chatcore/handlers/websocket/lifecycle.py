"""Idle enforcement for chat WebSocket connections.

A chat client that sends nothing for WS_IDLE_TIMEOUT_S is closed with
WS_CLOSE_IDLE_CODE. Any inbound frame counts as activity, including frames
that fail validation; outbound fan-out does not.

Usage:
    lifecycle = WebSocketLifecycle(websocket)
    lifecycle.start()

    # per inbound frame
    lifecycle.touch()

    # teardown
    await lifecycle.stop()
    if lifecycle.idle_timed_out():
        ...
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
import time
from collections.abc import Callable

from fastapi import WebSocket

from ...config.websocket import (
    WS_IDLE_TIMEOUT_S,
    WS_WATCHDOG_TICK_S,
    WS_CLOSE_IDLE_CODE,
    WS_CLOSE_IDLE_REASON,
)

logger = logging.getLogger(__name__)


class WebSocketLifecycle:
    """Watchdog that closes a chat connection after a quiet period.

    The message loop polls should_close() between receive timeouts; the
    watchdog sets it once the idle close has been issued.
    """

    def __init__(
        self,
        websocket: WebSocket,
        idle_timeout_s: float | None = None,
        watchdog_tick_s: float | None = None,
        idle_close_code: int | None = None,
        *,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._ws = websocket
        self._clock = clock
        self.idle_timeout_s = float(idle_timeout_s or WS_IDLE_TIMEOUT_S)
        self.tick_s = float(watchdog_tick_s or WS_WATCHDOG_TICK_S)
        self.close_code = WS_CLOSE_IDLE_CODE if idle_close_code is None else idle_close_code
        self._last_seen = clock()
        self._done = asyncio.Event()
        self._expired = False
        self._watchdog: asyncio.Task | None = None

    def touch(self) -> None:
        self._last_seen = self._clock()

    def idle_for(self) -> float:
        """Seconds since the last inbound frame."""
        return self._clock() - self._last_seen

    def should_close(self) -> bool:
        return self._done.is_set()

    def idle_timed_out(self) -> bool:
        """True once the watchdog closed the socket for inactivity."""
        return self._expired

    def start(self) -> asyncio.Task:
        if self._watchdog is None:
            self._watchdog = asyncio.create_task(self._watch(), name="ws-idle-watchdog")
        return self._watchdog

    async def stop(self) -> None:
        self._done.set()
        task, self._watchdog = self._watchdog, None
        if task is None:
            return
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task

    async def _watch(self) -> None:
        while not self._done.is_set():
            remaining = self.idle_timeout_s - self.idle_for()
            if remaining <= 0:
                await self._expire()
                return
            await asyncio.sleep(min(self.tick_s, remaining))

    async def _expire(self) -> None:
        logger.info("closing idle chat connection after %.1fs", self.idle_for())
        self._expired = True
        self._done.set()
        try:
            await self._ws.close(code=self.close_code, reason=WS_CLOSE_IDLE_REASON)
        except Exception:  # noqa: BLE001
            logger.debug("idle close failed; transport already gone", exc_info=True)


__all__ = ["WebSocketLifecycle"]
