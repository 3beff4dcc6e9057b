"""Exception classification helpers for metrics and telemetry labels."""

from __future__ import annotations

from .chat import ChatError
from .generator import GeneratorError
from .limits import RateLimiterBackendError

ERROR_CATEGORIES: tuple[tuple[type[BaseException], str], ...] = (
    (GeneratorError, "generator"),
    (RateLimiterBackendError, "rate_limiter_backend"),
    (TimeoutError, "timeout"),
    (ConnectionError, "connection"),
)


def classify_error(exc: BaseException) -> str:
    """Map an exception to a metric-friendly category label."""

    if isinstance(exc, ChatError):
        return str(exc.code).lower()
    for cls, label in ERROR_CATEGORIES:
        if isinstance(exc, cls):
            return label
    return "unknown"


__all__ = ["ERROR_CATEGORIES", "classify_error"]
