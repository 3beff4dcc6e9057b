"""Unit tests for error classification helpers."""

from __future__ import annotations

from chatcore.errors import (
    GeneratorError,
    RateLimitError,
    RateLimiterBackendError,
    SessionClosedError,
    classify_error,
)


def test_chat_errors_use_their_wire_code() -> None:
    assert classify_error(SessionClosedError()) == "session_closed"
    assert classify_error(RateLimitError(retry_in=1.0, limit=30, window_seconds=60)) == "rate_limited"


def test_generator_error() -> None:
    assert classify_error(GeneratorError("boom")) == "generator"


def test_rate_limiter_backend_error() -> None:
    assert classify_error(RateLimiterBackendError("down")) == "rate_limiter_backend"


def test_timeout_error() -> None:
    assert classify_error(TimeoutError()) == "timeout"


def test_connection_error() -> None:
    assert classify_error(ConnectionRefusedError()) == "connection"


def test_unknown_error() -> None:
    assert classify_error(ValueError("bad")) == "unknown"


def test_chat_error_default_message() -> None:
    err = SessionClosedError()
    assert err.message == "This chat session has been closed"
    assert str(err) == err.message
