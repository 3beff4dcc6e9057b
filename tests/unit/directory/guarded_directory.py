"""Unit tests for storage failure normalization."""

from __future__ import annotations

import asyncio
import uuid

import pytest

from chatcore.chat.models import MessageRole, SessionStatus
from chatcore.directory import GuardedSessionDirectory, InMemorySessionDirectory
from chatcore.errors import DirectoryError, SessionClosedError, SessionNotFoundError


class _BrokenDirectory(InMemorySessionDirectory):
    async def list_messages(self, session_id, limit=None):
        raise TimeoutError("query timed out")


def test_store_failures_become_directory_errors() -> None:
    async def _run() -> None:
        directory = GuardedSessionDirectory(_BrokenDirectory())
        session = await directory.create_session("10.0.0.1")
        with pytest.raises(DirectoryError) as exc_info:
            await directory.list_messages(session.id)
        assert exc_info.value.code == "INTERNAL_ERROR"
        assert isinstance(exc_info.value.__cause__, TimeoutError)

    asyncio.run(_run())


def test_chat_errors_pass_through() -> None:
    async def _run() -> None:
        directory = GuardedSessionDirectory(InMemorySessionDirectory())
        with pytest.raises(SessionNotFoundError):
            await directory.append_message(str(uuid.uuid4()), MessageRole.USER, "hi")

        session = await directory.create_session("10.0.0.1")
        await directory.update_session_status(session.id, SessionStatus.CLOSED)
        with pytest.raises(SessionClosedError):
            await directory.append_message(session.id, MessageRole.USER, "hi")
        assert await directory.count_messages(session.id) == 0

    asyncio.run(_run())
