"""Telemetry configuration: env vars, metric specs, span names, Sentry constants."""

import os

# ---------------------------------------------------------------------------
# Sentry
# ---------------------------------------------------------------------------
SENTRY_DSN: str = os.getenv("SENTRY_DSN", "")
SENTRY_ENVIRONMENT: str = os.getenv("SENTRY_ENVIRONMENT", "production")
SENTRY_RELEASE: str = os.getenv("SENTRY_RELEASE", "")
SENTRY_SAMPLE_RATE: float = float(os.getenv("SENTRY_SAMPLE_RATE", "1.0"))

# ---------------------------------------------------------------------------
# OTLP export
# ---------------------------------------------------------------------------
OTEL_EXPORTER_OTLP_ENDPOINT: str = (os.getenv("OTEL_EXPORTER_OTLP_ENDPOINT", "") or "").rstrip("/")
OTEL_EXPORTER_OTLP_TOKEN: str = os.getenv("OTEL_EXPORTER_OTLP_TOKEN", "")
OTEL_DEPLOYMENT_ENVIRONMENT: str = os.getenv("OTEL_DEPLOYMENT_ENVIRONMENT", "production")

# ---------------------------------------------------------------------------
# OTel tuning
# ---------------------------------------------------------------------------
OTEL_SERVICE_NAME: str = os.getenv("OTEL_SERVICE_NAME", "marins-room-chat")
OTEL_TRACES_EXPORT_INTERVAL_MS: int = int(os.getenv("OTEL_TRACES_EXPORT_INTERVAL_MS", "5000"))
OTEL_METRICS_EXPORT_INTERVAL_MS: int = int(os.getenv("OTEL_METRICS_EXPORT_INTERVAL_MS", "15000"))
OTEL_TRACES_BATCH_SIZE: int = int(os.getenv("OTEL_TRACES_BATCH_SIZE", "512"))

# ---------------------------------------------------------------------------
# Metric spec tuples: (name, unit, description)
# ---------------------------------------------------------------------------

# Histograms
METRIC_GENERATION_LATENCY = ("chat.generation_latency", "s", "Assistant reply latency")
METRIC_CONNECTION_DURATION = ("chat.connection_duration", "s", "WebSocket connection duration")

# Counters
METRIC_MESSAGES_TOTAL = ("chat.messages_total", "{message}", "Persisted chat messages")
METRIC_BROADCAST_SKIPPED_TOTAL = (
    "chat.broadcast_skipped_total",
    "{envelope}",
    "Envelopes skipped for unsendable transports",
)
METRIC_CONNECTIONS_REJECTED_TOTAL = (
    "chat.connections_rejected_total",
    "{connection}",
    "Rejected at capacity",
)
METRIC_ERRORS_TOTAL = ("chat.errors_total", "{error}", "Error envelopes sent to clients")
METRIC_RATE_LIMIT_VIOLATIONS_TOTAL = (
    "chat.rate_limit_violations_total",
    "{violation}",
    "Rate limit hits",
)
METRIC_RATE_LIMITER_FAILURES_TOTAL = (
    "chat.rate_limiter_failures_total",
    "{failure}",
    "Rate limiter backend failures (failed open)",
)
METRIC_GENERATION_FAILURES_TOTAL = (
    "chat.generation_failures_total",
    "{failure}",
    "Assistant replies that failed or timed out",
)
METRIC_TIMEOUT_DISCONNECTS_TOTAL = (
    "chat.timeout_disconnects_total",
    "{connection}",
    "Idle timeout disconnects",
)

# UpDown counters
METRIC_ACTIVE_CONNECTIONS = ("chat.active_connections", "{connection}", "Current WebSocket connections")
METRIC_ACTIVE_GENERATIONS = ("chat.active_generations", "{generation}", "Assistant replies in flight")

# ---------------------------------------------------------------------------
# Span names
# ---------------------------------------------------------------------------
SPAN_CONNECTION = "chat.connection"
SPAN_GENERATION = "chat.generation"

# ---------------------------------------------------------------------------
# Sentry constants
# ---------------------------------------------------------------------------
SENTRY_RATE_LIMIT_S: float = 10.0
SENTRY_TAG_SESSION_ID = "session_id"
SENTRY_TAG_CONNECTION_ID = "connection_id"
SENTRY_TAG_CLIENT_ID = "client_id"


__all__ = [
    # Sentry env
    "SENTRY_DSN",
    "SENTRY_ENVIRONMENT",
    "SENTRY_RELEASE",
    "SENTRY_SAMPLE_RATE",
    # OTLP env
    "OTEL_EXPORTER_OTLP_ENDPOINT",
    "OTEL_EXPORTER_OTLP_TOKEN",
    "OTEL_DEPLOYMENT_ENVIRONMENT",
    # OTel tuning
    "OTEL_SERVICE_NAME",
    "OTEL_TRACES_EXPORT_INTERVAL_MS",
    "OTEL_METRICS_EXPORT_INTERVAL_MS",
    "OTEL_TRACES_BATCH_SIZE",
    # Histograms
    "METRIC_GENERATION_LATENCY",
    "METRIC_CONNECTION_DURATION",
    # Counters
    "METRIC_MESSAGES_TOTAL",
    "METRIC_BROADCAST_SKIPPED_TOTAL",
    "METRIC_CONNECTIONS_REJECTED_TOTAL",
    "METRIC_ERRORS_TOTAL",
    "METRIC_RATE_LIMIT_VIOLATIONS_TOTAL",
    "METRIC_RATE_LIMITER_FAILURES_TOTAL",
    "METRIC_GENERATION_FAILURES_TOTAL",
    "METRIC_TIMEOUT_DISCONNECTS_TOTAL",
    # UpDown counters
    "METRIC_ACTIVE_CONNECTIONS",
    "METRIC_ACTIVE_GENERATIONS",
    # Span names
    "SPAN_CONNECTION",
    "SPAN_GENERATION",
    # Sentry constants
    "SENTRY_RATE_LIMIT_S",
    "SENTRY_TAG_SESSION_ID",
    "SENTRY_TAG_CONNECTION_ID",
    "SENTRY_TAG_CLIENT_ID",
]
