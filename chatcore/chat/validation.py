"""Validation helpers for client-supplied chat fields."""

from __future__ import annotations

import uuid
from typing import Any

from ..errors import ChatValidationError
from ..config.chat import CHAT_CONTENT_MAX_LEN, CHAT_CONTENT_MIN_LEN, VISITOR_NAME_MAX_LEN


def validate_session_id(raw: Any) -> str:
    """Return the canonical session id string or raise ChatValidationError."""
    if not isinstance(raw, str) or not raw.strip():
        raise ChatValidationError("sessionId is required")
    try:
        return str(uuid.UUID(raw.strip()))
    except ValueError as exc:
        raise ChatValidationError("sessionId must be a valid UUID") from exc


def utf16_length(text: str) -> int:
    """Length in UTF-16 code units, the unit browser clients count in."""
    return len(text.encode("utf-16-le", errors="surrogatepass")) // 2


def validate_content(raw: Any) -> str:
    """Check message content is CHAT_CONTENT_MIN_LEN..CHAT_CONTENT_MAX_LEN UTF-16 units.

    Characters outside the Basic Multilingual Plane (most emoji) count twice.
    """
    if not isinstance(raw, str):
        raise ChatValidationError("content must be a string")
    length = utf16_length(raw)
    if length < CHAT_CONTENT_MIN_LEN:
        raise ChatValidationError("content must not be empty")
    if length > CHAT_CONTENT_MAX_LEN:
        raise ChatValidationError(f"content must be at most {CHAT_CONTENT_MAX_LEN} characters")
    return raw


def validate_visitor_name(raw: Any) -> str | None:
    if raw is None:
        return None
    if not isinstance(raw, str):
        raise ChatValidationError("visitorName must be a string")
    name = raw.strip()
    if utf16_length(name) > VISITOR_NAME_MAX_LEN:
        raise ChatValidationError(f"visitorName must be at most {VISITOR_NAME_MAX_LEN} characters")
    return name or None


def parse_flag(raw: Any, field: str) -> bool:
    """Interpret an optional boolean payload flag; absent means False."""
    if raw is None:
        return False
    if not isinstance(raw, bool):
        raise ChatValidationError(f"{field} must be a boolean")
    return raw


def parse_optional_str(raw: Any, field: str) -> str | None:
    if raw is None:
        return None
    if not isinstance(raw, str):
        raise ChatValidationError(f"{field} must be a string")
    return raw


__all__ = [
    "parse_flag",
    "parse_optional_str",
    "utf16_length",
    "validate_content",
    "validate_session_id",
    "validate_visitor_name",
]
