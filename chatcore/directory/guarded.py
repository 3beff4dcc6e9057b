"""Session Directory wrapper that normalizes storage failures.

Whatever the backing store raises (driver errors, OSError, timeouts) reaches
the chat core as DirectoryError, which the message loop and the REST error
handler report as INTERNAL_ERROR. ChatErrors raised by the store itself
(SessionNotFoundError, SessionClosedError) pass through untouched.
"""

from __future__ import annotations

import logging
from typing import Any
from collections.abc import Awaitable, Callable

from .base import SessionDirectory
from ..chat.models import ChatMessage, ChatSession, MessageRole, SessionStatus
from ..errors import ChatError, DirectoryError
from ..telemetry.sentry import capture_error
from ..telemetry.instruments import get_metrics

logger = logging.getLogger(__name__)


class GuardedSessionDirectory:
    """Delegates to `inner`, re-raising unexpected failures as DirectoryError."""

    def __init__(self, inner: SessionDirectory) -> None:
        self.inner = inner

    async def _call(self, operation: str, call: Callable[[], Awaitable[Any]]) -> Any:
        try:
            return await call()
        except ChatError:
            raise
        except Exception as exc:
            logger.exception("session directory %s failed", operation)
            get_metrics().errors_total.add(1, {"code": "directory"})
            capture_error(exc, extra={"operation": operation})
            raise DirectoryError() from exc

    async def find_session(self, session_id: str) -> ChatSession | None:
        return await self._call("find_session", lambda: self.inner.find_session(session_id))

    async def create_session(
        self,
        visitor_id: str,
        visitor_name: str | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> ChatSession:
        return await self._call(
            "create_session",
            lambda: self.inner.create_session(visitor_id, visitor_name, metadata),
        )

    async def update_session_status(self, session_id: str, status: SessionStatus) -> ChatSession:
        return await self._call(
            "update_session_status",
            lambda: self.inner.update_session_status(session_id, status),
        )

    async def update_session_timestamp(self, session_id: str) -> None:
        await self._call(
            "update_session_timestamp",
            lambda: self.inner.update_session_timestamp(session_id),
        )

    async def list_messages(self, session_id: str, limit: int | None = None) -> list[ChatMessage]:
        return await self._call("list_messages", lambda: self.inner.list_messages(session_id, limit))

    async def append_message(self, session_id: str, role: MessageRole, content: str) -> ChatMessage:
        return await self._call(
            "append_message",
            lambda: self.inner.append_message(session_id, role, content),
        )

    async def list_sessions(self, *, offset: int = 0, limit: int = 20) -> list[ChatSession]:
        return await self._call(
            "list_sessions",
            lambda: self.inner.list_sessions(offset=offset, limit=limit),
        )

    async def count_sessions(self) -> int:
        return await self._call("count_sessions", self.inner.count_sessions)

    async def count_messages(self, session_id: str) -> int:
        return await self._call("count_messages", lambda: self.inner.count_messages(session_id))


__all__ = ["GuardedSessionDirectory"]
