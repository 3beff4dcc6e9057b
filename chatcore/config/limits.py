"""Rate and concurrency limits configuration."""

import os


# Chat messages per client address (rolling window)
WS_MESSAGE_WINDOW_SECONDS = float(os.getenv("WS_MESSAGE_WINDOW_SECONDS", "60"))
WS_MAX_MESSAGES_PER_WINDOW = int(os.getenv("WS_MAX_MESSAGES_PER_WINDOW", "30"))

# Session creation per client address (rolling window)
CHAT_START_WINDOW_SECONDS = float(os.getenv("CHAT_START_WINDOW_SECONDS", "60"))
CHAT_START_MAX_PER_WINDOW = int(os.getenv("CHAT_START_MAX_PER_WINDOW", "5"))

# Rate limiter key prefixes
WS_MESSAGE_RATE_KEY_PREFIX = "ws-message"
CHAT_START_RATE_KEY_PREFIX = "chat-start"
CHAT_MESSAGE_RATE_KEY_PREFIX = "chat-message"

# Full idle-key sweep cadence (number of checks between sweeps)
RATE_LIMIT_SWEEP_EVERY = int(os.getenv("RATE_LIMIT_SWEEP_EVERY", "256"))

# Maximum concurrent WebSocket connections
_max_concurrent_raw = os.getenv("MAX_CONCURRENT_CONNECTIONS", "500")
try:
    MAX_CONCURRENT_CONNECTIONS = int(_max_concurrent_raw)
except ValueError as exc:
    raise ValueError(
        f"MAX_CONCURRENT_CONNECTIONS must be an integer, got '{_max_concurrent_raw}'."
    ) from exc
if MAX_CONCURRENT_CONNECTIONS <= 0:
    raise ValueError("MAX_CONCURRENT_CONNECTIONS must be positive.")


__all__ = [
    "WS_MESSAGE_WINDOW_SECONDS",
    "WS_MAX_MESSAGES_PER_WINDOW",
    "CHAT_START_WINDOW_SECONDS",
    "CHAT_START_MAX_PER_WINDOW",
    "WS_MESSAGE_RATE_KEY_PREFIX",
    "CHAT_START_RATE_KEY_PREFIX",
    "CHAT_MESSAGE_RATE_KEY_PREFIX",
    "RATE_LIMIT_SWEEP_EVERY",
    "MAX_CONCURRENT_CONNECTIONS",
]
