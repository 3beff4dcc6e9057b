"""Unit tests for outbound envelope builders."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from chatcore.chat.models import ChatMessage, ChatSession, MessageRole
from chatcore.handlers.websocket.envelopes import (
    OutboundType,
    error_envelope,
    message_envelope,
    session_closed_envelope,
    session_joined_envelope,
    typing_envelope,
)

_TS = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


def _message(content: str = "hi") -> ChatMessage:
    return ChatMessage(id="m1", session_id="s1", role=MessageRole.USER, content=content, created_at=_TS)


def test_error_envelope_shape() -> None:
    assert error_envelope("NOT_IN_SESSION", "Join first") == {
        "type": "ERROR",
        "payload": {"code": "NOT_IN_SESSION", "message": "Join first"},
    }


def test_message_envelope_uses_camel_case_payload() -> None:
    env = message_envelope(_message())
    assert env["type"] == "MESSAGE_RECEIVED"
    assert env["payload"]["message"] == {
        "id": "m1",
        "sessionId": "s1",
        "role": "USER",
        "content": "hi",
        "createdAt": "2024-05-01T12:00:00Z",
    }


def test_message_envelope_ai_response_type() -> None:
    assert message_envelope(_message(), OutboundType.AI_RESPONSE)["type"] == "AI_RESPONSE"


def test_session_joined_envelope_includes_history_in_order() -> None:
    session = ChatSession(id="s1", visitor_id="1.2.3.4", created_at=_TS, updated_at=_TS)
    env = session_joined_envelope(session, [_message("a"), _message("b")])
    assert env["type"] == "SESSION_JOINED"
    assert env["payload"]["session"]["visitorId"] == "1.2.3.4"
    assert env["payload"]["session"]["status"] == "ACTIVE"
    assert [m["content"] for m in env["payload"]["messages"]] == ["a", "b"]


def test_typing_envelope_carries_admin_flag() -> None:
    assert typing_envelope(OutboundType.TYPING_START, is_admin=True) == {
        "type": "TYPING_START",
        "payload": {"isAdmin": True},
    }


def test_typing_envelope_rejects_non_typing_type() -> None:
    with pytest.raises(ValueError):
        typing_envelope(OutboundType.ERROR, is_admin=False)


def test_session_closed_envelope_has_empty_payload() -> None:
    assert session_closed_envelope() == {"type": "SESSION_CLOSED", "payload": {}}
