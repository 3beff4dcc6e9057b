"""Session Directory collaborator interface.

The directory is the source of truth for session existence, status and
message history. The chat core only calls it; concurrency control and
durability belong to the implementation. Storage failures must surface as
DirectoryError so the caller can report INTERNAL_ERROR without assuming a
partial write.
"""

from __future__ import annotations

from typing import Any, Protocol

from ..chat.models import ChatMessage, ChatSession, MessageRole, SessionStatus


class SessionDirectory(Protocol):
    async def find_session(self, session_id: str) -> ChatSession | None: ...

    async def create_session(
        self,
        visitor_id: str,
        visitor_name: str | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> ChatSession: ...

    async def update_session_status(self, session_id: str, status: SessionStatus) -> ChatSession: ...

    async def update_session_timestamp(self, session_id: str) -> None: ...

    async def list_messages(self, session_id: str, limit: int | None = None) -> list[ChatMessage]:
        """Return messages oldest-first; with limit, only the most recent ones."""
        ...

    async def append_message(self, session_id: str, role: MessageRole, content: str) -> ChatMessage: ...

    async def list_sessions(self, *, offset: int = 0, limit: int = 20) -> list[ChatSession]: ...

    async def count_sessions(self) -> int: ...

    async def count_messages(self, session_id: str) -> int: ...


__all__ = ["SessionDirectory"]
