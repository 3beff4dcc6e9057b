"""Unit tests for chat field validation and persona history."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

import pytest

from chatcore.chat.models import ChatMessage, MessageRole
from chatcore.chat.persona import SYSTEM_PROMPT, build_generation_history
from chatcore.chat.validation import (
    parse_flag,
    parse_optional_str,
    utf16_length,
    validate_content,
    validate_session_id,
    validate_visitor_name,
)
from chatcore.errors import ChatValidationError


def test_validate_session_id_canonicalizes_uuid() -> None:
    sid = uuid.uuid4()
    assert validate_session_id(str(sid).upper()) == str(sid)


@pytest.mark.parametrize("raw", [None, "", "   ", "not-a-uuid", 42])
def test_validate_session_id_rejects(raw: object) -> None:
    with pytest.raises(ChatValidationError) as exc_info:
        validate_session_id(raw)
    assert exc_info.value.code == "VALIDATION_ERROR"


def test_validate_content_bounds() -> None:
    assert validate_content("x") == "x"
    assert validate_content("x" * 4000) == "x" * 4000
    with pytest.raises(ChatValidationError):
        validate_content("")
    with pytest.raises(ChatValidationError):
        validate_content("x" * 4001)
    with pytest.raises(ChatValidationError):
        validate_content(123)


def test_content_length_counts_utf16_units() -> None:
    emoji = "\U0001F600"
    assert utf16_length(emoji) == 2
    assert utf16_length("\ud800") == 1
    assert validate_content(emoji * 2000) == emoji * 2000
    with pytest.raises(ChatValidationError):
        validate_content(emoji * 2000 + "x")


def test_validate_visitor_name() -> None:
    assert validate_visitor_name(None) is None
    assert validate_visitor_name("  Ada  ") == "Ada"
    assert validate_visitor_name("   ") is None
    with pytest.raises(ChatValidationError):
        validate_visitor_name("n" * 51)


def test_parse_flag_rejects_non_boolean_values() -> None:
    assert parse_flag(True, "isAdmin") is True
    assert parse_flag(False, "isAdmin") is False
    assert parse_flag(None, "isAdmin") is False
    for raw in ("true", 1, 0, []):
        with pytest.raises(ChatValidationError, match="isAdmin"):
            parse_flag(raw, "isAdmin")


def test_parse_optional_str() -> None:
    assert parse_optional_str(None, "adminKey") is None
    assert parse_optional_str("", "adminKey") == ""
    with pytest.raises(ChatValidationError, match="adminKey"):
        parse_optional_str(123, "adminKey")


def test_generation_history_prepends_persona_and_maps_roles() -> None:
    ts = datetime(2024, 1, 1, tzinfo=timezone.utc)
    messages = [
        ChatMessage(id="1", session_id="s", role=MessageRole.ASSISTANT, content="Welcome", created_at=ts),
        ChatMessage(id="2", session_id="s", role=MessageRole.USER, content="Hi", created_at=ts),
    ]
    history = build_generation_history(messages)
    assert history[0] == {"role": "system", "content": SYSTEM_PROMPT}
    assert history[1:] == [
        {"role": "assistant", "content": "Welcome"},
        {"role": "user", "content": "Hi"},
    ]
