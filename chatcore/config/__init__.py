"""Aggregator of configuration modules.

This module re-exports the config API from smaller modules:
- chat: content bounds, history window, fixed texts
- limits: rate and concurrency limits
- generator: completion API settings
- timeouts: reply deadlines
- secrets: admin and completion API keys
- websocket: endpoint path, idle timeouts, close codes

Logging and telemetry settings are imported from their own modules.
"""

from .chat import (
    CHAT_CONTENT_MIN_LEN,
    CHAT_CONTENT_MAX_LEN,
    VISITOR_NAME_MAX_LEN,
    CHAT_HISTORY_WINDOW,
    ADMIN_ATTRIBUTION_PREFIX,
    WELCOME_MESSAGE,
    SESSION_PAGE_SIZE_DEFAULT,
    SESSION_PAGE_SIZE_MAX,
)
from .limits import (
    WS_MESSAGE_WINDOW_SECONDS,
    WS_MAX_MESSAGES_PER_WINDOW,
    CHAT_START_WINDOW_SECONDS,
    CHAT_START_MAX_PER_WINDOW,
    WS_MESSAGE_RATE_KEY_PREFIX,
    CHAT_START_RATE_KEY_PREFIX,
    CHAT_MESSAGE_RATE_KEY_PREFIX,
    RATE_LIMIT_SWEEP_EVERY,
    MAX_CONCURRENT_CONNECTIONS,
)
from .generator import AI_API_URL, AI_MODEL, AI_MAX_TOKENS, AI_TEMPERATURE
from .timeouts import GEN_TIMEOUT_S, AI_HTTP_TIMEOUT_S
from .secrets import ADMIN_API_KEY, AI_API_KEY
from .websocket import (
    WS_CHAT_PATH,
    WS_IDLE_TIMEOUT_S,
    WS_WATCHDOG_TICK_S,
    WS_HANDSHAKE_ACQUIRE_TIMEOUT_S,
    WS_CLOSE_NORMAL_CODE,
    WS_CLOSE_INTERNAL_ERROR_CODE,
    WS_CLOSE_BUSY_CODE,
    WS_CLOSE_IDLE_CODE,
    WS_CLOSE_IDLE_REASON,
    FORWARDED_FOR_HEADER,
)

__all__ = [
    # chat
    "CHAT_CONTENT_MIN_LEN",
    "CHAT_CONTENT_MAX_LEN",
    "VISITOR_NAME_MAX_LEN",
    "CHAT_HISTORY_WINDOW",
    "ADMIN_ATTRIBUTION_PREFIX",
    "WELCOME_MESSAGE",
    "SESSION_PAGE_SIZE_DEFAULT",
    "SESSION_PAGE_SIZE_MAX",
    # limits
    "WS_MESSAGE_WINDOW_SECONDS",
    "WS_MAX_MESSAGES_PER_WINDOW",
    "CHAT_START_WINDOW_SECONDS",
    "CHAT_START_MAX_PER_WINDOW",
    "WS_MESSAGE_RATE_KEY_PREFIX",
    "CHAT_START_RATE_KEY_PREFIX",
    "CHAT_MESSAGE_RATE_KEY_PREFIX",
    "RATE_LIMIT_SWEEP_EVERY",
    "MAX_CONCURRENT_CONNECTIONS",
    # generator
    "AI_API_URL",
    "AI_MODEL",
    "AI_MAX_TOKENS",
    "AI_TEMPERATURE",
    # timeouts
    "GEN_TIMEOUT_S",
    "AI_HTTP_TIMEOUT_S",
    # secrets
    "ADMIN_API_KEY",
    "AI_API_KEY",
    # websocket
    "WS_CHAT_PATH",
    "WS_IDLE_TIMEOUT_S",
    "WS_WATCHDOG_TICK_S",
    "WS_HANDSHAKE_ACQUIRE_TIMEOUT_S",
    "WS_CLOSE_NORMAL_CODE",
    "WS_CLOSE_INTERNAL_ERROR_CODE",
    "WS_CLOSE_BUSY_CODE",
    "WS_CLOSE_IDLE_CODE",
    "WS_CLOSE_IDLE_REASON",
    "FORWARDED_FOR_HEADER",
]
