"""Centralized exception classes for the chat server.

Organization:
    - codes.py: Wire error codes (ErrorCode)
    - chat.py: Protocol errors reported to the originating client
    - limits.py: Rate limiting errors with retry info
    - generator.py: Response generator failures
    - classify.py: Exception-to-telemetry label mapping
"""

from .codes import ErrorCode
from .classify import classify_error
from .generator import GeneratorError
from .limits import RateLimitError, RateLimiterBackendError
from .chat import (
    ChatError,
    ChatValidationError,
    DirectoryError,
    ForbiddenError,
    InvalidMessageError,
    NotInSessionError,
    SessionClosedError,
    SessionNotFoundError,
    UnauthorizedError,
    UnknownMessageTypeError,
)

__all__ = [
    "ErrorCode",
    # Protocol errors
    "ChatError",
    "ChatValidationError",
    "DirectoryError",
    "ForbiddenError",
    "InvalidMessageError",
    "NotInSessionError",
    "SessionClosedError",
    "SessionNotFoundError",
    "UnauthorizedError",
    "UnknownMessageTypeError",
    # Rate limiting
    "RateLimitError",
    "RateLimiterBackendError",
    # Generator
    "GeneratorError",
    # Classification
    "classify_error",
]
