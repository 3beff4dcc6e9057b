"""Unit tests for background assistant replies."""

from __future__ import annotations

import asyncio

from chatcore.chat.models import MessageRole, SessionStatus
from chatcore.handlers.connection import ChatConnectionHandler
from tests.helpers.fakes import FakeGenerator, failing_generator, make_connection, make_deps


async def _joined(deps) -> tuple[str, ChatConnectionHandler]:
    session = await deps.directory.create_session("10.0.0.1")
    handler = ChatConnectionHandler(make_connection(), deps)
    await handler.join(session.id)
    handler.connection.websocket.clear()
    return session.id, handler


def test_generator_failure_still_stops_typing_and_sends_nothing_else() -> None:
    async def _run() -> None:
        deps = await make_deps(generator=failing_generator())
        sid, handler = await _joined(deps)
        await handler.send_message("hello?")
        await deps.replies.drain()

        assert handler.connection.websocket.types() == ["MESSAGE_RECEIVED", "TYPING_START", "TYPING_STOP"]
        stored = await deps.directory.list_messages(sid)
        assert [m.role for m in stored] == [MessageRole.USER]

    asyncio.run(_run())


def test_generation_timeout_stops_typing() -> None:
    async def _run() -> None:
        deps = await make_deps(generator=FakeGenerator("late", delay_s=1.0), generation_timeout_s=0.02)
        sid, handler = await _joined(deps)
        await handler.send_message("anyone?")
        await deps.replies.drain()

        types = handler.connection.websocket.types()
        assert types.count("TYPING_START") == 1
        assert types.count("TYPING_STOP") == 1
        assert "AI_RESPONSE" not in types
        assert await deps.directory.count_messages(sid) == 1

    asyncio.run(_run())


def test_blank_reply_is_not_persisted() -> None:
    async def _run() -> None:
        deps = await make_deps(generator=FakeGenerator("   "))
        sid, handler = await _joined(deps)
        await handler.send_message("hi")
        await deps.replies.drain()
        assert "AI_RESPONSE" not in handler.connection.websocket.types()
        assert await deps.directory.count_messages(sid) == 1

    asyncio.run(_run())


def test_reply_dropped_when_session_closes_mid_generation() -> None:
    async def _run() -> None:
        deps = await make_deps(generator=FakeGenerator("too late", delay_s=0.02))
        sid, handler = await _joined(deps)
        await handler.send_message("hi")
        await asyncio.sleep(0)
        await deps.directory.update_session_status(sid, SessionStatus.CLOSED)
        await deps.replies.drain()

        types = handler.connection.websocket.types()
        assert types == ["MESSAGE_RECEIVED", "TYPING_START", "TYPING_STOP"]
        assert deps.replies.pending == 0

    asyncio.run(_run())


def test_slow_reply_does_not_block_other_sessions() -> None:
    async def _run() -> None:
        deps = await make_deps(generator=FakeGenerator("slow", delay_s=0.5))
        _, first = await _joined(deps)
        _, second = await _joined(deps)
        await first.send_message("start a slow reply")
        await asyncio.sleep(0.01)

        await asyncio.wait_for(second.send_message("quick one"), timeout=0.1)
        assert "MESSAGE_RECEIVED" in second.connection.websocket.types()
        await deps.replies.shutdown()

    asyncio.run(_run())


def test_shutdown_cancels_pending_replies_and_closes_generator() -> None:
    async def _run() -> None:
        generator = FakeGenerator("never", delay_s=5.0)
        deps = await make_deps(generator=generator)
        _, handler = await _joined(deps)
        await handler.send_message("hi")
        await asyncio.sleep(0.01)
        assert deps.replies.pending == 1

        await deps.shutdown()
        assert deps.replies.pending == 0
        assert generator.closed
        # Cancellation still unwinds through the typing indicator
        assert handler.connection.websocket.types()[-1] == "TYPING_STOP"

    asyncio.run(_run())


def test_unexpected_generator_exception_is_contained() -> None:
    async def _run() -> None:
        deps = await make_deps(generator=FakeGenerator(error=KeyError("oops")))
        _, handler = await _joined(deps)
        await handler.send_message("hi")
        await deps.replies.drain()
        assert handler.connection.websocket.types()[-1] == "TYPING_STOP"

    asyncio.run(_run())
