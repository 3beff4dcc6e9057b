"""Rate limiting exceptions.

RateLimitError carries information about when a client can retry after being
rate limited. RateLimiterBackendError signals that the limiter's window store
could not be reached; the limiter fails open when it sees one.
"""

from __future__ import annotations

from .codes import ErrorCode
from .chat import ChatError


class RateLimitError(ChatError):
    """Raised when a rate limiter rejects an action.

    Attributes:
        retry_in: Seconds until a new slot becomes available.
        limit: The maximum allowed events per window.
        window_seconds: The duration of the rate limit window.
    """

    code = ErrorCode.RATE_LIMITED
    default_message = "Too many messages. Please slow down."

    def __init__(
        self,
        *,
        retry_in: float,
        limit: int,
        window_seconds: float,
        message: str | None = None,
    ) -> None:
        super().__init__(message)
        self.retry_in = max(0.0, float(retry_in))
        self.limit = max(0, int(limit))
        self.window_seconds = max(0.0, float(window_seconds))


class RateLimiterBackendError(Exception):
    """Raised by a window store when its backing storage is unavailable."""


__all__ = ["RateLimitError", "RateLimiterBackendError"]
