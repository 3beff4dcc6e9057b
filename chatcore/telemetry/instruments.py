"""MetricInstruments registry: typed accessors for all OTel instruments."""

from __future__ import annotations

import logging
from opentelemetry import metrics
from ..config.telemetry import (
    OTEL_SERVICE_NAME,
    METRIC_ERRORS_TOTAL,
    METRIC_MESSAGES_TOTAL,
    METRIC_ACTIVE_CONNECTIONS,
    METRIC_ACTIVE_GENERATIONS,
    METRIC_GENERATION_LATENCY,
    METRIC_CONNECTION_DURATION,
    METRIC_BROADCAST_SKIPPED_TOTAL,
    METRIC_GENERATION_FAILURES_TOTAL,
    METRIC_TIMEOUT_DISCONNECTS_TOTAL,
    METRIC_CONNECTIONS_REJECTED_TOTAL,
    METRIC_RATE_LIMITER_FAILURES_TOTAL,
    METRIC_RATE_LIMIT_VIOLATIONS_TOTAL,
)

logger = logging.getLogger(__name__)


def _histogram(meter: metrics.Meter, spec: tuple[str, str, str]) -> metrics.Histogram:
    name, unit, desc = spec
    return meter.create_histogram(name, unit=unit, description=desc)


def _counter(meter: metrics.Meter, spec: tuple[str, str, str]) -> metrics.Counter:
    name, unit, desc = spec
    return meter.create_counter(name, unit=unit, description=desc)


def _updown(meter: metrics.Meter, spec: tuple[str, str, str]) -> metrics.UpDownCounter:
    name, unit, desc = spec
    return meter.create_up_down_counter(name, unit=unit, description=desc)


class MetricInstruments:
    """Holds all OTel metric instruments created from config specs."""

    __slots__ = (
        "generation_latency",
        "connection_duration",
        "messages_total",
        "broadcast_skipped_total",
        "connections_rejected_total",
        "errors_total",
        "rate_limit_violations_total",
        "rate_limiter_failures_total",
        "generation_failures_total",
        "timeout_disconnects_total",
        "active_connections",
        "active_generations",
    )

    def __init__(self, meter: metrics.Meter) -> None:
        # Histograms
        self.generation_latency = _histogram(meter, METRIC_GENERATION_LATENCY)
        self.connection_duration = _histogram(meter, METRIC_CONNECTION_DURATION)
        # Counters
        self.messages_total = _counter(meter, METRIC_MESSAGES_TOTAL)
        self.broadcast_skipped_total = _counter(meter, METRIC_BROADCAST_SKIPPED_TOTAL)
        self.connections_rejected_total = _counter(meter, METRIC_CONNECTIONS_REJECTED_TOTAL)
        self.errors_total = _counter(meter, METRIC_ERRORS_TOTAL)
        self.rate_limit_violations_total = _counter(meter, METRIC_RATE_LIMIT_VIOLATIONS_TOTAL)
        self.rate_limiter_failures_total = _counter(meter, METRIC_RATE_LIMITER_FAILURES_TOTAL)
        self.generation_failures_total = _counter(meter, METRIC_GENERATION_FAILURES_TOTAL)
        self.timeout_disconnects_total = _counter(meter, METRIC_TIMEOUT_DISCONNECTS_TOTAL)
        # UpDown counters
        self.active_connections = _updown(meter, METRIC_ACTIVE_CONNECTIONS)
        self.active_generations = _updown(meter, METRIC_ACTIVE_GENERATIONS)


_metrics: MetricInstruments | None = None


def get_metrics() -> MetricInstruments:
    """Return the global MetricInstruments (no-op meter if OTel not initialized)."""
    global _metrics  # noqa: PLW0603
    if _metrics is None:
        meter = metrics.get_meter(OTEL_SERVICE_NAME)
        _metrics = MetricInstruments(meter)
    return _metrics


def initialize_metrics() -> None:
    """Create MetricInstruments from the global meter provider."""
    global _metrics  # noqa: PLW0603
    meter = metrics.get_meter(OTEL_SERVICE_NAME)
    _metrics = MetricInstruments(meter)
    logger.info("Telemetry metrics initialized")


__all__ = ["MetricInstruments", "get_metrics", "initialize_metrics"]
