"""Shared response helpers for WebSocket error handling.

All error responses use the ERROR envelope:

    {
        "type": "ERROR",
        "payload": {
            "code": "SESSION_NOT_FOUND",   # Machine-readable code
            "message": "Human-readable description"
        }
    }

Error codes are the ErrorCode members in chatcore.errors.codes:
    - VALIDATION_ERROR: Invalid field values
    - UNAUTHORIZED: Admin join with a missing or wrong key
    - SESSION_NOT_FOUND: Unknown session id
    - NOT_IN_SESSION: Operation needs a joined session
    - SESSION_CLOSED: Session no longer accepts messages
    - RATE_LIMITED: Too many messages per window, or server at capacity
    - UNKNOWN_MESSAGE_TYPE: Unrecognized message type
    - INVALID_MESSAGE: Malformed JSON, missing type, bad payload
    - INTERNAL_ERROR: Unexpected server error
"""

from __future__ import annotations

from fastapi import WebSocket

from .helpers import safe_send_json
from .envelopes import error_envelope
from ...telemetry.instruments import get_metrics


async def send_error(ws: WebSocket, *, code: str, message: str) -> bool:
    """Send an ERROR envelope to one client.

    Returns False when the transport was already gone.
    """
    get_metrics().errors_total.add(1, {"code": str(code)})
    return await safe_send_json(ws, error_envelope(code, message))


async def reject_connection(
    ws: WebSocket,
    *,
    code: str,
    message: str,
    close_code: int,
) -> None:
    """Accept connection briefly to send an error, then close immediately.

    The client receives a meaningful ERROR envelope rather than a bare close
    code.
    """
    await ws.accept()
    await send_error(ws, code=code, message=message)
    await ws.close(code=close_code)


__all__ = ["send_error", "reject_connection"]
