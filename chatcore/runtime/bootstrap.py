"""Runtime dependency bootstrap.

This module eagerly builds all chat services at startup. Collaborators can be
injected (tests, alternative storage) and default to the in-process ones.
"""

from __future__ import annotations

import logging

from chatcore.config import (
    ADMIN_API_KEY,
    AI_API_KEY,
    AI_MODEL,
    CHAT_HISTORY_WINDOW,
    CHAT_START_MAX_PER_WINDOW,
    CHAT_START_WINDOW_SECONDS,
    GEN_TIMEOUT_S,
    MAX_CONCURRENT_CONNECTIONS,
    WS_MAX_MESSAGES_PER_WINDOW,
    WS_MESSAGE_WINDOW_SECONDS,
)
from chatcore.directory import GuardedSessionDirectory, InMemorySessionDirectory, SessionDirectory
from chatcore.generator import NullGenerator, OpenAICompatibleGenerator, ResponseGenerator
from chatcore.handlers.admission import ConnectionAdmission
from chatcore.handlers.limits import SlidingWindowRateLimiter
from chatcore.handlers.registry import ConnectionRegistry
from chatcore.handlers.replies import ReplyDispatcher

from .dependencies import RuntimeDeps

logger = logging.getLogger(__name__)

_UNSET = object()


def build_generator(api_key: str | None = AI_API_KEY) -> ResponseGenerator:
    """Completion API client when a key is configured, else a silent generator."""
    if not api_key:
        logger.info("AI_API_KEY not set; assistant replies disabled")
        return NullGenerator()
    logger.info("assistant replies enabled: model=%s", AI_MODEL)
    return OpenAICompatibleGenerator(api_key=api_key)


async def build_runtime_deps(
    *,
    directory: SessionDirectory | None = None,
    generator: ResponseGenerator | None = None,
    rate_limiter: SlidingWindowRateLimiter | None = None,
    admin_api_key: str | None | object = _UNSET,
    max_connections: int = MAX_CONCURRENT_CONNECTIONS,
    message_limit: int = WS_MAX_MESSAGES_PER_WINDOW,
    message_window_seconds: float = WS_MESSAGE_WINDOW_SECONDS,
    start_limit: int = CHAT_START_MAX_PER_WINDOW,
    start_window_seconds: float = CHAT_START_WINDOW_SECONDS,
    history_window: int = CHAT_HISTORY_WINDOW,
    generation_timeout_s: float = GEN_TIMEOUT_S,
) -> RuntimeDeps:
    """Build runtime dependencies eagerly."""
    directory = GuardedSessionDirectory(directory if directory is not None else InMemorySessionDirectory())
    generator = generator if generator is not None else build_generator()
    registry = ConnectionRegistry()
    replies = ReplyDispatcher(
        directory=directory,
        registry=registry,
        generator=generator,
        history_window=history_window,
        timeout_s=generation_timeout_s,
    )
    if admin_api_key is _UNSET:
        admin_api_key = ADMIN_API_KEY
    if not admin_api_key:
        logger.info("ADMIN_API_KEY not set; admin features disabled")

    return RuntimeDeps(
        directory=directory,
        registry=registry,
        rate_limiter=rate_limiter if rate_limiter is not None else SlidingWindowRateLimiter(),
        generator=generator,
        replies=replies,
        admission=ConnectionAdmission(max_connections=max_connections),
        admin_api_key=admin_api_key or None,  # type: ignore[arg-type]
        message_limit=message_limit,
        message_window_seconds=message_window_seconds,
        start_limit=start_limit,
        start_window_seconds=start_window_seconds,
    )


__all__ = ["build_generator", "build_runtime_deps"]
