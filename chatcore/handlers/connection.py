"""Per-connection chat protocol state machine.

A ChatConnectionHandler drives one ChatConnection through its phases:

    UNBOUND --JOIN_SESSION--> BOUND --LEAVE_SESSION--> UNBOUND
       |                        |
       +--------close()---------+--> CLOSED

Every operation either completes or raises a ChatError before touching
connection state, so a failed operation leaves the phase, bound session and
admin flag exactly as they were. The message loop turns the ChatError into an
ERROR envelope for the originating client only.

Join order:
    1. sessionId must be a UUID
    2. admin joins must present the configured admin key
    3. the session must exist
    4. leave the previous session, if any
    5. register, snapshot history and reply SESSION_JOINED under the
       session lock so no broadcast lands between snapshot and membership

SendMessage order:
    1. must be BOUND
    2. content within length bounds
    3. per-client rate limit
    4. session must still exist and be ACTIVE
    5. persist and broadcast MESSAGE_RECEIVED (sender included) under the
       session lock
    6. visitors schedule an assistant reply; admins refresh the session
       timestamp
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any
from collections.abc import Awaitable, Callable

from .state import ChatConnection, ConnectionPhase
from .websocket.auth import is_valid_admin_key
from .websocket.envelopes import (
    InboundEnvelope,
    InboundType,
    OutboundType,
    message_envelope,
    session_joined_envelope,
    typing_envelope,
)
from ..chat.models import ChatMessage, MessageRole
from ..chat.validation import parse_flag, parse_optional_str, validate_content, validate_session_id
from ..config import ADMIN_ATTRIBUTION_PREFIX, WS_MESSAGE_RATE_KEY_PREFIX
from ..errors import (
    NotInSessionError,
    SessionClosedError,
    SessionNotFoundError,
    UnauthorizedError,
)
from ..logging import set_log_context
from ..telemetry.sentry import add_breadcrumb
from ..telemetry.instruments import get_metrics

if TYPE_CHECKING:
    from ..runtime.dependencies import RuntimeDeps

logger = logging.getLogger(__name__)

OperationFn = Callable[[dict[str, Any]], Awaitable[None]]


class ChatConnectionHandler:
    """Implements the chat operations for one connection."""

    def __init__(self, connection: ChatConnection, deps: RuntimeDeps) -> None:
        self.connection = connection
        self._deps = deps
        self._operations: dict[InboundType, OperationFn] = {
            InboundType.JOIN_SESSION: self._on_join,
            InboundType.LEAVE_SESSION: self._on_leave,
            InboundType.SEND_MESSAGE: self._on_send_message,
            InboundType.TYPING_START: self._on_typing_start,
            InboundType.TYPING_STOP: self._on_typing_stop,
        }
        missing = set(InboundType) - set(self._operations)
        if missing:
            raise RuntimeError(f"no handler for inbound types: {sorted(missing)}")

    async def dispatch(self, envelope: InboundEnvelope) -> None:
        """Run the operation for one parsed client envelope."""
        if self.connection.phase is ConnectionPhase.CLOSED:
            return
        await self._operations[envelope.type](envelope.payload)

    # ============================================================================
    # Envelope adapters
    # ============================================================================
    async def _on_join(self, payload: dict[str, Any]) -> None:
        await self.join(
            payload.get("sessionId"),
            is_admin=parse_flag(payload.get("isAdmin"), "isAdmin"),
            admin_key=parse_optional_str(payload.get("adminKey"), "adminKey"),
        )

    async def _on_leave(self, payload: dict[str, Any]) -> None:
        await self.leave()

    async def _on_send_message(self, payload: dict[str, Any]) -> None:
        await self.send_message(payload.get("content"))

    async def _on_typing_start(self, payload: dict[str, Any]) -> None:
        await self.typing(OutboundType.TYPING_START)

    async def _on_typing_stop(self, payload: dict[str, Any]) -> None:
        await self.typing(OutboundType.TYPING_STOP)

    # ============================================================================
    # Operations
    # ============================================================================
    async def join(
        self,
        raw_session_id: Any,
        *,
        is_admin: bool = False,
        admin_key: str | None = None,
    ) -> None:
        """Bind this connection to a session and send it the full history.

        If storage fails after the implicit leave of a previous session, the
        connection ends up UNBOUND rather than in the old session.
        """
        conn = self.connection
        session_id = validate_session_id(raw_session_id)

        if is_admin and not is_valid_admin_key(admin_key, self._deps.admin_api_key):
            logger.warning("admin join rejected for session %s", session_id)
            raise UnauthorizedError()

        session = await self._deps.directory.find_session(session_id)
        if session is None:
            raise SessionNotFoundError()

        if is_admin:
            conn.is_admin = True

        # Re-joining the current session only refreshes the history snapshot
        if conn.is_bound and conn.session_id != session_id:
            await self.leave()

        async def _greet() -> None:
            messages = await self._deps.directory.list_messages(session_id)
            await conn.send(session_joined_envelope(session, messages))

        await self._deps.registry.add(session_id, conn, on_join=_greet)
        conn.session_id = session_id
        conn.phase = ConnectionPhase.BOUND
        set_log_context(session_id=session_id)
        add_breadcrumb(
            "joined session",
            category="chat.session",
            data={"session_id": session_id, "admin": conn.is_admin},
        )
        logger.info("joined session %s admin=%s", session_id, conn.is_admin)

    async def leave(self) -> None:
        """Unbind from the current session; no-op when unbound."""
        conn = self.connection
        if not conn.is_bound:
            return
        session_id = conn.session_id
        assert session_id is not None
        await self._deps.registry.remove(session_id, conn)
        conn.session_id = None
        conn.phase = ConnectionPhase.UNBOUND
        set_log_context(session_id="-")
        add_breadcrumb("left session", category="chat.session", data={"session_id": session_id})
        logger.info("left session %s", session_id)

    async def send_message(self, raw_content: Any) -> ChatMessage:
        """Persist one message and fan it out to the session."""
        conn = self.connection
        session_id = self._require_bound()
        content = validate_content(raw_content)

        deps = self._deps
        await deps.rate_limiter.consume(
            f"{WS_MESSAGE_RATE_KEY_PREFIX}:{conn.client_address}",
            deps.message_limit,
            deps.message_window_seconds,
            scope="message",
        )

        session = await deps.directory.find_session(session_id)
        if session is None:
            raise SessionNotFoundError()
        if not session.is_active:
            raise SessionClosedError()

        is_admin = conn.is_admin
        role = MessageRole.ASSISTANT if is_admin else MessageRole.USER
        if is_admin:
            content = f"{ADMIN_ATTRIBUTION_PREFIX}{content}"

        message = await deps.registry.publish(
            session_id,
            lambda: deps.directory.append_message(session_id, role, content),
            message_envelope,
        )
        get_metrics().messages_total.add(1, {"role": role.value})

        if is_admin:
            await deps.directory.update_session_timestamp(session_id)
        else:
            deps.replies.schedule(session_id)
        return message

    async def typing(self, msg_type: OutboundType) -> None:
        """Relay a typing indicator to the other members of the session."""
        session_id = self._require_bound()
        await self._deps.registry.broadcast(
            session_id,
            typing_envelope(msg_type, is_admin=self.connection.is_admin),
            exclude=self.connection,
        )

    async def close(self) -> None:
        """Leave any session and mark the connection CLOSED. Idempotent."""
        conn = self.connection
        if conn.phase is ConnectionPhase.CLOSED:
            return
        try:
            await self.leave()
        finally:
            conn.session_id = None
            conn.phase = ConnectionPhase.CLOSED

    def _require_bound(self) -> str:
        conn = self.connection
        if not conn.is_bound or conn.session_id is None:
            raise NotInSessionError()
        return conn.session_id


__all__ = ["ChatConnectionHandler"]
