"""Chat data shapes, validation and persona."""

from .models import ChatMessage, ChatSession, MessageRole, SessionStatus, utcnow
from .persona import SYSTEM_PROMPT, build_generation_history
from .validation import parse_flag, parse_optional_str, validate_content, validate_session_id, validate_visitor_name

__all__ = [
    "ChatMessage",
    "ChatSession",
    "MessageRole",
    "SessionStatus",
    "utcnow",
    "SYSTEM_PROMPT",
    "build_generation_history",
    "parse_flag",
    "parse_optional_str",
    "validate_content",
    "validate_session_id",
    "validate_visitor_name",
]
