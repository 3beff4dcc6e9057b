"""Unit tests for session membership and broadcast fan-out."""

from __future__ import annotations

import asyncio

import pytest

from chatcore.handlers.registry import ConnectionRegistry
from tests.helpers.fakes import make_connection

_ENVELOPE = {"type": "TYPING_START", "payload": {"isAdmin": False}}


def test_broadcast_reaches_members_except_excluded() -> None:
    async def _run() -> None:
        registry = ConnectionRegistry()
        a, b, c = make_connection(), make_connection(), make_connection()
        for conn in (a, b):
            await registry.add("s1", conn)
        await registry.add("s2", c)

        delivered = await registry.broadcast("s1", _ENVELOPE, exclude=a)
        assert delivered == 1
        assert a.websocket.sent == []
        assert b.websocket.sent == [_ENVELOPE]
        assert c.websocket.sent == []

    asyncio.run(_run())


def test_remove_is_noop_when_absent_and_drops_empty_sessions() -> None:
    async def _run() -> None:
        registry = ConnectionRegistry()
        conn = make_connection()
        await registry.remove("missing", conn)
        await registry.add("s1", conn)
        assert registry.session_count() == 1
        await registry.remove("s1", conn)
        await registry.remove("s1", conn)
        assert registry.session_count() == 0
        assert registry.members("s1") == frozenset()
        assert registry._locks == {}

    asyncio.run(_run())


def test_broadcast_skips_dead_transports() -> None:
    async def _run() -> None:
        registry = ConnectionRegistry()
        alive, gone, broken = make_connection(), make_connection(), make_connection()
        gone.websocket.disconnect()
        broken.websocket.fail_with = RuntimeError("socket exploded")
        for conn in (alive, gone, broken):
            await registry.add("s1", conn)

        assert await registry.broadcast("s1", _ENVELOPE) == 1
        assert alive.websocket.sent == [_ENVELOPE]

    asyncio.run(_run())


def test_add_runs_on_join_before_membership() -> None:
    async def _run() -> None:
        registry = ConnectionRegistry()
        conn = make_connection()
        seen: list[int] = []

        async def on_join() -> str:
            seen.append(len(registry.members("s1")))
            return "greeted"

        assert await registry.add("s1", conn, on_join=on_join) == "greeted"
        assert seen == [0]
        assert conn in registry.members("s1")

    asyncio.run(_run())


def test_failed_on_join_leaves_connection_out() -> None:
    async def _run() -> None:
        registry = ConnectionRegistry()
        conn = make_connection()

        async def on_join() -> None:
            raise RuntimeError("history unavailable")

        with pytest.raises(RuntimeError):
            await registry.add("s1", conn, on_join=on_join)
        assert registry.members("s1") == frozenset()
        assert registry._locks == {}

    asyncio.run(_run())


def test_publish_persists_then_broadcasts_in_order() -> None:
    async def _run() -> None:
        registry = ConnectionRegistry()
        listener = make_connection()
        await registry.add("s1", listener)
        counter = iter(range(100))

        async def persist() -> int:
            n = next(counter)
            await asyncio.sleep(0.001 * (5 - n % 5))
            return n

        await asyncio.gather(
            *(registry.publish("s1", persist, lambda n: {"type": "N", "payload": {"n": n}}) for _ in range(10))
        )
        assert [f["payload"]["n"] for f in listener.websocket.sent] == list(range(10))

    asyncio.run(_run())


def test_publish_failure_broadcasts_nothing() -> None:
    async def _run() -> None:
        registry = ConnectionRegistry()
        listener = make_connection()
        await registry.add("s1", listener)

        async def persist() -> None:
            raise ValueError("write failed")

        with pytest.raises(ValueError):
            await registry.publish("s1", persist, lambda _: _ENVELOPE)
        assert listener.websocket.sent == []

    asyncio.run(_run())


def test_connection_count_spans_sessions() -> None:
    async def _run() -> None:
        registry = ConnectionRegistry()
        for sid in ("s1", "s1", "s2"):
            await registry.add(sid, make_connection())
        assert registry.connection_count() == 3
        assert registry.session_count() == 2

    asyncio.run(_run())
