"""Unit tests for the in-process Session Directory."""

from __future__ import annotations

import asyncio
from datetime import datetime, timedelta, timezone

import pytest

from chatcore.chat.models import MessageRole, SessionStatus
from chatcore.directory import InMemorySessionDirectory
from chatcore.errors import ChatValidationError, SessionClosedError, SessionNotFoundError

_T0 = datetime(2024, 3, 1, tzinfo=timezone.utc)


def test_append_orders_messages_even_when_clock_stalls() -> None:
    async def _run() -> None:
        directory = InMemorySessionDirectory(now_fn=lambda: _T0)
        session = await directory.create_session("1.2.3.4")
        for text in ("a", "b", "c"):
            await directory.append_message(session.id, MessageRole.USER, text)
        messages = await directory.list_messages(session.id)
        assert [m.content for m in messages] == ["a", "b", "c"]
        stamps = [m.created_at for m in messages]
        assert stamps == sorted(stamps)
        assert len(set(stamps)) == 3

    asyncio.run(_run())


def test_list_messages_limit_returns_most_recent_oldest_first() -> None:
    async def _run() -> None:
        directory = InMemorySessionDirectory()
        session = await directory.create_session("v")
        for i in range(25):
            await directory.append_message(session.id, MessageRole.USER, str(i))
        recent = await directory.list_messages(session.id, limit=20)
        assert [m.content for m in recent] == [str(i) for i in range(5, 25)]
        assert await directory.count_messages(session.id) == 25

    asyncio.run(_run())


def test_append_to_closed_session_raises() -> None:
    async def _run() -> None:
        directory = InMemorySessionDirectory()
        session = await directory.create_session("v")
        await directory.update_session_status(session.id, SessionStatus.CLOSED)
        with pytest.raises(SessionClosedError):
            await directory.append_message(session.id, MessageRole.USER, "late")

    asyncio.run(_run())


def test_closed_session_cannot_reopen() -> None:
    async def _run() -> None:
        directory = InMemorySessionDirectory()
        session = await directory.create_session("v")
        await directory.update_session_status(session.id, SessionStatus.CLOSED)
        with pytest.raises(ChatValidationError):
            await directory.update_session_status(session.id, SessionStatus.ACTIVE)

    asyncio.run(_run())


def test_missing_session_operations() -> None:
    async def _run() -> None:
        directory = InMemorySessionDirectory()
        assert await directory.find_session("nope") is None
        with pytest.raises(SessionNotFoundError):
            await directory.append_message("nope", MessageRole.USER, "x")
        with pytest.raises(SessionNotFoundError):
            await directory.update_session_timestamp("nope")

    asyncio.run(_run())


def test_find_session_returns_snapshot() -> None:
    async def _run() -> None:
        directory = InMemorySessionDirectory()
        session = await directory.create_session("v", metadata={"k": 1})
        session.metadata["k"] = 2
        session.status = SessionStatus.CLOSED
        stored = await directory.find_session(session.id)
        assert stored is not None
        assert stored.metadata == {"k": 1}
        assert stored.is_active

    asyncio.run(_run())


def test_list_sessions_orders_by_recent_activity() -> None:
    async def _run() -> None:
        clock = [_T0]
        directory = InMemorySessionDirectory(now_fn=lambda: clock[0])
        first = await directory.create_session("a")
        clock[0] = _T0 + timedelta(minutes=1)
        second = await directory.create_session("b")
        clock[0] = _T0 + timedelta(minutes=2)
        await directory.update_session_timestamp(first.id)

        listed = await directory.list_sessions(offset=0, limit=10)
        assert [s.id for s in listed] == [first.id, second.id]
        assert [s.id for s in await directory.list_sessions(offset=1, limit=10)] == [second.id]
        assert await directory.count_sessions() == 2

    asyncio.run(_run())
