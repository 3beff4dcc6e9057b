"""Client payload parsing for the WebSocket handler."""

from __future__ import annotations

import json

from .envelopes import InboundEnvelope, InboundType
from ...errors.chat import InvalidMessageError, UnknownMessageTypeError


def parse_client_message(raw: str | None) -> InboundEnvelope:
    """Decode one client frame into an InboundEnvelope.

    The type is matched case-insensitively. A missing payload is treated as
    an empty object.

    Raises:
        InvalidMessageError: Empty frame, bad JSON, non-object frame, missing
            or non-string type, or a payload that is not an object.
        UnknownMessageTypeError: Well-formed frame with an unsupported type.
    """

    text = (raw or "").strip()
    if not text:
        raise InvalidMessageError("Empty message.")

    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise InvalidMessageError("Message must be valid JSON.") from exc

    if not isinstance(data, dict):
        raise InvalidMessageError("Message must be a JSON object.")

    msg_type = data.get("type")
    if not isinstance(msg_type, str) or not msg_type.strip():
        raise InvalidMessageError("Missing 'type' in message.")

    payload = data.get("payload")
    if payload is None:
        payload = {}
    if not isinstance(payload, dict):
        raise InvalidMessageError("'payload' must be a JSON object.")

    normalized = msg_type.strip().upper()
    try:
        inbound_type = InboundType(normalized)
    except ValueError as exc:
        raise UnknownMessageTypeError(f"Message type '{msg_type}' is not supported.") from exc

    return InboundEnvelope(type=inbound_type, payload=payload)


__all__ = ["parse_client_message"]
