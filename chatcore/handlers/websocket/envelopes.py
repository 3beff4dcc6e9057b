"""Wire envelopes exchanged over the chat WebSocket.

Every frame in either direction is a JSON object of the form:

    {"type": "<MESSAGE_TYPE>", "payload": {...}}

Inbound types (client -> server):
    JOIN_SESSION    {sessionId, isAdmin?, adminKey?}
    LEAVE_SESSION   {}
    SEND_MESSAGE    {content}
    TYPING_START    {}
    TYPING_STOP     {}

Outbound types (server -> client):
    SESSION_JOINED    {session, messages}
    MESSAGE_RECEIVED  {message}
    AI_RESPONSE       {message}
    TYPING_START      {isAdmin}
    TYPING_STOP       {isAdmin}
    SESSION_CLOSED    {}
    ERROR             {code, message}
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any
from collections.abc import Iterable
from dataclasses import dataclass, field

from ...chat.models import ChatMessage, ChatSession

Envelope = dict[str, Any]


class InboundType(StrEnum):
    JOIN_SESSION = "JOIN_SESSION"
    LEAVE_SESSION = "LEAVE_SESSION"
    SEND_MESSAGE = "SEND_MESSAGE"
    TYPING_START = "TYPING_START"
    TYPING_STOP = "TYPING_STOP"


class OutboundType(StrEnum):
    SESSION_JOINED = "SESSION_JOINED"
    MESSAGE_RECEIVED = "MESSAGE_RECEIVED"
    AI_RESPONSE = "AI_RESPONSE"
    TYPING_START = "TYPING_START"
    TYPING_STOP = "TYPING_STOP"
    SESSION_CLOSED = "SESSION_CLOSED"
    ERROR = "ERROR"


@dataclass(frozen=True, slots=True)
class InboundEnvelope:
    """A parsed client frame."""

    type: InboundType
    payload: dict[str, Any] = field(default_factory=dict)


def build_envelope(msg_type: OutboundType, payload: dict[str, Any] | None = None) -> Envelope:
    return {"type": msg_type.value, "payload": payload or {}}


def error_envelope(code: str, message: str) -> Envelope:
    return build_envelope(OutboundType.ERROR, {"code": str(code), "message": message})


def session_joined_envelope(session: ChatSession, messages: Iterable[ChatMessage]) -> Envelope:
    return build_envelope(
        OutboundType.SESSION_JOINED,
        {
            "session": session.to_payload(),
            "messages": [message.to_payload() for message in messages],
        },
    )


def message_envelope(
    message: ChatMessage,
    msg_type: OutboundType = OutboundType.MESSAGE_RECEIVED,
) -> Envelope:
    return build_envelope(msg_type, {"message": message.to_payload()})


def typing_envelope(msg_type: OutboundType, *, is_admin: bool) -> Envelope:
    if msg_type not in (OutboundType.TYPING_START, OutboundType.TYPING_STOP):
        raise ValueError(f"not a typing envelope type: {msg_type}")
    return build_envelope(msg_type, {"isAdmin": bool(is_admin)})


def session_closed_envelope() -> Envelope:
    return build_envelope(OutboundType.SESSION_CLOSED)


__all__ = [
    "Envelope",
    "InboundEnvelope",
    "InboundType",
    "OutboundType",
    "build_envelope",
    "error_envelope",
    "message_envelope",
    "session_closed_envelope",
    "session_joined_envelope",
    "typing_envelope",
]
