"""In-process Session Directory.

Keeps sessions and their message lists in dictionaries owned by one
instance. Every method body runs without awaiting, so each call is atomic
with respect to other tasks on the event loop; append order on the loop is
the persisted order.

Ordering:
    Messages get created_at = max(now, previous created_at + 1 microsecond)
    so timestamps within a session are strictly increasing even when the
    wall clock stalls or steps backwards.
"""

from __future__ import annotations

import uuid
import logging
import dataclasses
from datetime import datetime, timedelta
from collections.abc import Callable
from typing import Any

from ..errors import ChatValidationError, SessionClosedError, SessionNotFoundError
from ..chat.models import ChatMessage, ChatSession, MessageRole, SessionStatus, utcnow

logger = logging.getLogger(__name__)

_TICK = timedelta(microseconds=1)


class InMemorySessionDirectory:
    """Session Directory backed by process memory."""

    def __init__(self, *, now_fn: Callable[[], datetime] | None = None) -> None:
        self._now = now_fn or utcnow
        self._sessions: dict[str, ChatSession] = {}
        self._messages: dict[str, list[ChatMessage]] = {}

    def _require(self, session_id: str) -> ChatSession:
        session = self._sessions.get(session_id)
        if session is None:
            raise SessionNotFoundError()
        return session

    @staticmethod
    def _snapshot(session: ChatSession) -> ChatSession:
        return dataclasses.replace(session, metadata=dict(session.metadata))

    async def find_session(self, session_id: str) -> ChatSession | None:
        session = self._sessions.get(session_id)
        return self._snapshot(session) if session is not None else None

    async def create_session(
        self,
        visitor_id: str,
        visitor_name: str | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> ChatSession:
        now = self._now()
        session = ChatSession(
            id=str(uuid.uuid4()),
            visitor_id=visitor_id,
            visitor_name=visitor_name,
            metadata=dict(metadata or {}),
            created_at=now,
            updated_at=now,
        )
        self._sessions[session.id] = session
        self._messages[session.id] = []
        logger.debug("directory: created session %s", session.id)
        return self._snapshot(session)

    async def update_session_status(self, session_id: str, status: SessionStatus) -> ChatSession:
        session = self._require(session_id)
        if session.status is SessionStatus.CLOSED and status is not SessionStatus.CLOSED:
            raise ChatValidationError("closed sessions cannot be reopened")
        if session.status is not status:
            session.status = status
            session.updated_at = self._now()
        return self._snapshot(session)

    async def update_session_timestamp(self, session_id: str) -> None:
        session = self._require(session_id)
        session.updated_at = max(self._now(), session.updated_at)

    async def list_messages(self, session_id: str, limit: int | None = None) -> list[ChatMessage]:
        self._require(session_id)
        messages = self._messages[session_id]
        if limit is not None:
            if limit <= 0:
                return []
            return list(messages[-limit:])
        return list(messages)

    async def append_message(self, session_id: str, role: MessageRole, content: str) -> ChatMessage:
        session = self._require(session_id)
        if not session.is_active:
            raise SessionClosedError()
        messages = self._messages[session_id]
        created_at = self._now()
        if messages and created_at <= messages[-1].created_at:
            created_at = messages[-1].created_at + _TICK
        message = ChatMessage(
            id=str(uuid.uuid4()),
            session_id=session_id,
            role=role,
            content=content,
            created_at=created_at,
        )
        messages.append(message)
        return message

    async def list_sessions(self, *, offset: int = 0, limit: int = 20) -> list[ChatSession]:
        ordered = sorted(self._sessions.values(), key=lambda s: s.updated_at, reverse=True)
        start = max(0, offset)
        return [self._snapshot(s) for s in ordered[start:start + max(0, limit)]]

    async def count_sessions(self) -> int:
        return len(self._sessions)

    async def count_messages(self, session_id: str) -> int:
        self._require(session_id)
        return len(self._messages[session_id])


__all__ = ["InMemorySessionDirectory"]
