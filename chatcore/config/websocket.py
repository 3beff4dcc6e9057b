"""WebSocket-specific runtime configuration values.

Timeouts:
    WS_IDLE_TIMEOUT_S: Close connections after this many seconds without an
        inbound envelope. Chat tabs left open in the background are the
        common case here, so the default is generous.

    WS_WATCHDOG_TICK_S: How often the idle watchdog checks activity.

    WS_HANDSHAKE_ACQUIRE_TIMEOUT_S: Max time to wait for a connection slot
        before rejecting the handshake.

Close Codes (RFC 6455):
    1000: Normal closure
    1011: Internal error
    1013: Try again later (server at capacity)
    4000+: Application-defined (idle timeout)
"""

from __future__ import annotations

import os

# ============================================================================
# Endpoint
# ============================================================================

WS_CHAT_PATH = os.getenv("WS_CHAT_PATH", "/ws/chat")

# ============================================================================
# Timeout Configuration
# ============================================================================

WS_IDLE_TIMEOUT_S = float(os.getenv("WS_IDLE_TIMEOUT_S", "900"))  # 15 minutes
WS_WATCHDOG_TICK_S = float(os.getenv("WS_WATCHDOG_TICK_S", "5"))
WS_HANDSHAKE_ACQUIRE_TIMEOUT_S = float(os.getenv("WS_HANDSHAKE_ACQUIRE_TIMEOUT_S", "0.5"))

# ============================================================================
# WebSocket Close Codes
# ============================================================================

WS_CLOSE_NORMAL_CODE = int(os.getenv("WS_CLOSE_NORMAL_CODE", "1000"))
WS_CLOSE_INTERNAL_ERROR_CODE = int(os.getenv("WS_CLOSE_INTERNAL_ERROR_CODE", "1011"))
WS_CLOSE_BUSY_CODE = int(os.getenv("WS_CLOSE_BUSY_CODE", "1013"))
WS_CLOSE_IDLE_CODE = int(os.getenv("WS_CLOSE_IDLE_CODE", "4000"))
WS_CLOSE_IDLE_REASON = os.getenv("WS_CLOSE_IDLE_REASON", "idle_timeout")

# Header carrying the original client address behind a proxy
FORWARDED_FOR_HEADER = "x-forwarded-for"

__all__ = [
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
