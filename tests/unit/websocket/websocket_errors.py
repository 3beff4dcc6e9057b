"""Unit tests for websocket error responses and safe sends."""

from __future__ import annotations

import asyncio

import pytest
from fastapi import WebSocketDisconnect

from chatcore.handlers.websocket.errors import reject_connection, send_error
from chatcore.handlers.websocket.helpers import safe_send_json
from tests.helpers.fakes import FakeWebSocket


def test_send_error_emits_error_envelope() -> None:
    async def _run() -> None:
        ws = FakeWebSocket()
        assert await send_error(ws, code="SESSION_NOT_FOUND", message="nope")
        assert ws.sent == [{"type": "ERROR", "payload": {"code": "SESSION_NOT_FOUND", "message": "nope"}}]

    asyncio.run(_run())


def test_reject_connection_accepts_sends_and_closes() -> None:
    async def _run() -> None:
        ws = FakeWebSocket()
        await reject_connection(ws, code="RATE_LIMITED", message="busy", close_code=1013)
        assert ws.accepted
        assert ws.types() == ["ERROR"]
        assert ws.close_calls == [(1013, None)]

    asyncio.run(_run())


def test_safe_send_skips_disconnected_transport() -> None:
    async def _run() -> None:
        ws = FakeWebSocket()
        ws.disconnect()
        assert await safe_send_json(ws, {"type": "X"}) is False
        assert ws.sent == []

    asyncio.run(_run())


def test_safe_send_swallows_expected_disconnect() -> None:
    async def _run() -> None:
        ws = FakeWebSocket(fail_with=WebSocketDisconnect(code=1001))
        assert await safe_send_json(ws, {"type": "X"}) is False

    asyncio.run(_run())


def test_safe_send_propagates_unexpected_errors() -> None:
    async def _run() -> None:
        ws = FakeWebSocket(fail_with=ValueError("boom"))
        with pytest.raises(ValueError):
            await safe_send_json(ws, {"type": "X"})

    asyncio.run(_run())
