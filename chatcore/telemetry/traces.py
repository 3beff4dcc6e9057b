"""Span context managers for connection and generation tracing."""

from __future__ import annotations

from opentelemetry import trace
from collections.abc import Iterator
from contextlib import contextmanager
from ..config.telemetry import SPAN_CONNECTION, SPAN_GENERATION, OTEL_SERVICE_NAME


def _tracer() -> trace.Tracer:
    return trace.get_tracer(OTEL_SERVICE_NAME)


@contextmanager
def connection_span(*, connection_id: str, client_id: str) -> Iterator[trace.Span]:
    """Outermost span wrapping the entire WebSocket connection."""
    with _tracer().start_as_current_span(
        SPAN_CONNECTION,
        attributes={"connection.id": connection_id, "client.id": client_id},
    ) as span:
        yield span


@contextmanager
def generation_span(*, session_id: str, model: str = "", history_len: int = 0) -> Iterator[trace.Span]:
    """Response generator call span."""
    attrs: dict[str, str | int] = {"session.id": session_id}
    if model:
        attrs["model"] = model
    if history_len:
        attrs["history_len"] = history_len
    with _tracer().start_as_current_span(SPAN_GENERATION, attributes=attrs) as span:
        yield span


__all__ = ["connection_span", "generation_span"]
