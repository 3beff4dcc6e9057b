"""REST routes for chat session management.

Visitors create sessions over HTTP, then talk over the WebSocket or the
blocking send route; the admin dashboard lists sessions, reads transcripts,
replies and closes sessions through these routes. REST sends, admin replies
and closures reach the live members of the session through the same
ConnectionRegistry the WebSocket handlers use.

Routes:
    POST /api/chat/sessions                      start a session (rate limited)
    POST /api/chat/messages                      send a visitor message and await the reply
    GET  /api/chat/sessions                      admin: paginated listing
    GET  /api/chat/sessions/{id}/messages        owner or admin: transcript
    POST /api/chat/sessions/{id}/close           admin: close and notify
    POST /api/chat/sessions/{id}/reply           admin: attributed reply
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from fastapi import APIRouter, Depends, Query, Request
from pydantic import BaseModel, ConfigDict, Field

from .deps import get_runtime_deps, is_admin_request, require_admin
from ..chat.models import ChatSession, MessageRole, SessionStatus
from ..chat.validation import validate_content, validate_session_id, validate_visitor_name
from ..config import (
    ADMIN_ATTRIBUTION_PREFIX,
    CHAT_MESSAGE_RATE_KEY_PREFIX,
    CHAT_START_RATE_KEY_PREFIX,
    SESSION_PAGE_SIZE_DEFAULT,
    SESSION_PAGE_SIZE_MAX,
    WELCOME_MESSAGE,
)
from ..errors import ForbiddenError, SessionClosedError, SessionNotFoundError
from ..handlers.websocket.auth import client_address
from ..handlers.websocket.envelopes import message_envelope, session_closed_envelope
from ..runtime.dependencies import RuntimeDeps
from ..telemetry.instruments import get_metrics

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/chat", tags=["chat"])


class StartSessionRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    visitor_name: str | None = Field(default=None, alias="visitorName")


class SendMessageRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    session_id: str = Field(alias="sessionId")
    content: str


class ReplyRequest(BaseModel):
    content: str


def _ok(data: dict[str, Any]) -> dict[str, Any]:
    return {"success": True, "data": data}


async def _require_session(deps: RuntimeDeps, raw_session_id: str) -> ChatSession:
    session = await deps.directory.find_session(validate_session_id(raw_session_id))
    if session is None:
        raise SessionNotFoundError()
    return session


@router.post("/sessions")
async def start_session(
    request: Request,
    body: StartSessionRequest | None = None,
    deps: RuntimeDeps = Depends(get_runtime_deps),
):
    """Create an ACTIVE session seeded with the welcome message."""
    visitor_id = client_address(request)
    await deps.rate_limiter.consume(
        f"{CHAT_START_RATE_KEY_PREFIX}:{visitor_id}",
        deps.start_limit,
        deps.start_window_seconds,
        scope="session_start",
    )
    visitor_name = validate_visitor_name(body.visitor_name if body is not None else None)

    session = await deps.directory.create_session(visitor_id, visitor_name)
    await deps.directory.append_message(session.id, MessageRole.ASSISTANT, WELCOME_MESSAGE)
    logger.info("chat session started: %s", session.id)
    return _ok({"sessionId": session.id, "session": session.to_payload()})


@router.post("/messages")
async def send_message(
    request: Request,
    body: SendMessageRequest,
    deps: RuntimeDeps = Depends(get_runtime_deps),
):
    """Persist a visitor message, then wait for the assistant reply.

    Live members of the session see both messages as they are stored. The
    reply is null when the generator produced no text.
    """
    await deps.rate_limiter.consume(
        f"{CHAT_MESSAGE_RATE_KEY_PREFIX}:{client_address(request)}",
        deps.message_limit,
        deps.message_window_seconds,
        scope="rest_message",
    )
    content = validate_content(body.content)
    session = await _require_session(deps, body.session_id)
    if not session.is_active:
        raise SessionClosedError()

    message = await deps.registry.publish(
        session.id,
        lambda: deps.directory.append_message(session.id, MessageRole.USER, content),
        message_envelope,
    )
    get_metrics().messages_total.add(1, {"role": MessageRole.USER.value})
    ai_message = await deps.replies.reply(session.id)
    return _ok(
        {
            "message": message.to_payload(),
            "aiResponse": ai_message.to_payload() if ai_message is not None else None,
        }
    )


@router.get("/sessions", dependencies=[Depends(require_admin)])
async def list_sessions(
    page: int = Query(default=1, ge=1),
    page_size: int = Query(default=SESSION_PAGE_SIZE_DEFAULT, ge=1, le=SESSION_PAGE_SIZE_MAX, alias="pageSize"),
    deps: RuntimeDeps = Depends(get_runtime_deps),
):
    """List sessions, most recent activity first."""
    sessions, total = await asyncio.gather(
        deps.directory.list_sessions(offset=(page - 1) * page_size, limit=page_size),
        deps.directory.count_sessions(),
    )
    counts = await asyncio.gather(*(deps.directory.count_messages(s.id) for s in sessions))
    return _ok(
        {
            "sessions": [
                {**session.to_payload(), "messageCount": count}
                for session, count in zip(sessions, counts)
            ],
            "total": total,
        }
    )


@router.get("/sessions/{session_id}/messages")
async def get_session_messages(
    session_id: str,
    request: Request,
    is_admin: bool = Depends(is_admin_request),
    deps: RuntimeDeps = Depends(get_runtime_deps),
):
    """Full transcript for the visitor who owns the session, or an admin."""
    session = await _require_session(deps, session_id)
    if not is_admin and session.visitor_id != client_address(request):
        raise ForbiddenError()
    messages = await deps.directory.list_messages(session.id)
    return _ok(
        {
            "session": session.to_payload(),
            "messages": [message.to_payload() for message in messages],
        }
    )


@router.post("/sessions/{session_id}/close", dependencies=[Depends(require_admin)])
async def close_session(
    session_id: str,
    deps: RuntimeDeps = Depends(get_runtime_deps),
):
    """Mark the session CLOSED and tell its live members."""
    session = await _require_session(deps, session_id)
    session = await deps.directory.update_session_status(session.id, SessionStatus.CLOSED)
    notified = await deps.registry.broadcast(session.id, session_closed_envelope())
    logger.info("chat session closed: %s (notified %s)", session.id, notified)
    return _ok({"session": session.to_payload()})


@router.post("/sessions/{session_id}/reply", dependencies=[Depends(require_admin)])
async def admin_reply(
    session_id: str,
    body: ReplyRequest,
    deps: RuntimeDeps = Depends(get_runtime_deps),
):
    """Persist an attributed admin reply and push it to live members."""
    content = validate_content(body.content)
    session = await _require_session(deps, session_id)
    if not session.is_active:
        raise SessionClosedError()

    attributed = f"{ADMIN_ATTRIBUTION_PREFIX}{content}"
    message = await deps.registry.publish(
        session.id,
        lambda: deps.directory.append_message(session.id, MessageRole.ASSISTANT, attributed),
        message_envelope,
    )
    get_metrics().messages_total.add(1, {"role": MessageRole.ASSISTANT.value})
    await deps.directory.update_session_timestamp(session.id)
    return _ok({"message": message.to_payload()})


__all__ = ["router", "StartSessionRequest", "SendMessageRequest", "ReplyRequest"]
