"""Per-connection protocol state."""

from __future__ import annotations

import uuid
from enum import StrEnum
from typing import Any
from dataclasses import dataclass, field

from fastapi import WebSocket

from .websocket.helpers import safe_send_json


class ConnectionPhase(StrEnum):
    UNBOUND = "UNBOUND"
    BOUND = "BOUND"
    CLOSED = "CLOSED"


def _new_connection_id() -> str:
    return uuid.uuid4().hex[:12]


@dataclass(eq=False, slots=True)
class ChatConnection:
    """State of one live transport.

    Owned by its ChatConnectionHandler; the ConnectionRegistry only holds
    references while the connection is bound. Identity-based equality keeps
    two connections from the same address distinct inside membership sets.

    Attributes:
        websocket: Underlying transport handle.
        client_address: Client network identity, used as the rate-limit key.
        connection_id: Short random id for logs.
        session_id: Bound session id, None while unbound.
        is_admin: Set once an admin join succeeds.
        phase: UNBOUND, BOUND or CLOSED.
    """

    websocket: WebSocket
    client_address: str
    connection_id: str = field(default_factory=_new_connection_id)
    session_id: str | None = None
    is_admin: bool = False
    phase: ConnectionPhase = ConnectionPhase.UNBOUND

    @property
    def is_bound(self) -> bool:
        return self.phase is ConnectionPhase.BOUND and self.session_id is not None

    async def send(self, envelope: dict[str, Any]) -> bool:
        """Deliver one envelope; False when the transport cannot take it."""
        if self.phase is ConnectionPhase.CLOSED:
            return False
        return await safe_send_json(self.websocket, envelope)


__all__ = ["ChatConnection", "ConnectionPhase"]
