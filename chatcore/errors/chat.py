"""Chat protocol exceptions with structured error codes.

Each exception carries the wire code that the connection handler puts into
the ERROR envelope, plus a human-readable message. They are raised inside a
single operation and recovered by the message loop, so they never end the
connection.
"""

from __future__ import annotations

from .codes import ErrorCode


class ChatError(Exception):
    """Base class for failures reported to the originating client.

    Attributes:
        code: Machine-parseable error identifier.
        message: Human-readable error description.
    """

    code: ErrorCode = ErrorCode.INTERNAL_ERROR
    default_message = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ChatValidationError(ChatError):
    code = ErrorCode.VALIDATION_ERROR
    default_message = "Invalid request"


class UnauthorizedError(ChatError):
    code = ErrorCode.UNAUTHORIZED
    default_message = "Invalid or missing admin API key"


class ForbiddenError(ChatError):
    code = ErrorCode.FORBIDDEN
    default_message = "You can only view your own chat sessions"


class SessionNotFoundError(ChatError):
    code = ErrorCode.SESSION_NOT_FOUND
    default_message = "Chat session not found"


class NotInSessionError(ChatError):
    code = ErrorCode.NOT_IN_SESSION
    default_message = "Join a chat session first"


class SessionClosedError(ChatError):
    code = ErrorCode.SESSION_CLOSED
    default_message = "This chat session has been closed"


class UnknownMessageTypeError(ChatError):
    code = ErrorCode.UNKNOWN_MESSAGE_TYPE
    default_message = "Unknown message type"


class InvalidMessageError(ChatError):
    code = ErrorCode.INVALID_MESSAGE
    default_message = "Invalid message format"


class DirectoryError(ChatError):
    """Session Directory storage failure; surfaced as INTERNAL_ERROR."""

    code = ErrorCode.INTERNAL_ERROR
    default_message = "Failed to access chat storage"


__all__ = [
    "ChatError",
    "ChatValidationError",
    "UnauthorizedError",
    "ForbiddenError",
    "SessionNotFoundError",
    "NotInSessionError",
    "SessionClosedError",
    "UnknownMessageTypeError",
    "InvalidMessageError",
    "DirectoryError",
]
