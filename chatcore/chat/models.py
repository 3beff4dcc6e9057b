"""Chat session and message data shapes.

ChatSession:
    One visitor conversation. Status only ever moves ACTIVE -> CLOSED.

ChatMessage:
    One immutable entry in a session's history. Messages in a session are
    strictly ordered by created_at.

Both serialize to the camelCase wire shape the browser client consumes via
to_payload().
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import StrEnum
from typing import Any


class SessionStatus(StrEnum):
    ACTIVE = "ACTIVE"
    CLOSED = "CLOSED"


class MessageRole(StrEnum):
    USER = "USER"
    ASSISTANT = "ASSISTANT"
    SYSTEM = "SYSTEM"

    @property
    def completion_role(self) -> str:
        """Role name used by chat completion APIs."""
        return self.value.lower()


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _iso(value: datetime) -> str:
    return value.isoformat().replace("+00:00", "Z")


@dataclass(slots=True)
class ChatSession:
    """A chat session as known to the Session Directory.

    Attributes:
        id: Opaque unique identifier (uuid4 string).
        visitor_id: Client network address or generated token.
        visitor_name: Optional display name supplied at creation.
        status: ACTIVE or CLOSED.
        metadata: Free-form metadata map.
        created_at: Creation time (UTC).
        updated_at: Last activity time (UTC).
    """

    id: str
    visitor_id: str
    visitor_name: str | None = None
    status: SessionStatus = SessionStatus.ACTIVE
    metadata: dict[str, Any] = field(default_factory=dict)
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)

    @property
    def is_active(self) -> bool:
        return self.status is SessionStatus.ACTIVE

    def to_payload(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "visitorId": self.visitor_id,
            "visitorName": self.visitor_name,
            "status": self.status.value,
            "metadata": dict(self.metadata),
            "createdAt": _iso(self.created_at),
            "updatedAt": _iso(self.updated_at),
        }


@dataclass(frozen=True, slots=True)
class ChatMessage:
    """An immutable chat message."""

    id: str
    session_id: str
    role: MessageRole
    content: str
    created_at: datetime

    def to_payload(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "sessionId": self.session_id,
            "role": self.role.value,
            "content": self.content,
            "createdAt": _iso(self.created_at),
        }

    def to_completion(self) -> dict[str, str]:
        return {"role": self.role.completion_role, "content": self.content}


__all__ = [
    "ChatMessage",
    "ChatSession",
    "MessageRole",
    "SessionStatus",
    "utcnow",
]
