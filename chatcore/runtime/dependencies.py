"""Runtime dependency container.

All long-lived chat services are assembled at startup and passed explicitly
to the WebSocket manager and the REST routes. Nothing in the request path
constructs a shared service lazily.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from chatcore.handlers.admission import ConnectionAdmission
    from chatcore.handlers.limits import SlidingWindowRateLimiter
    from chatcore.handlers.registry import ConnectionRegistry
    from chatcore.handlers.replies import ReplyDispatcher
    from chatcore.generator.base import ResponseGenerator
    from chatcore.directory.base import SessionDirectory

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class RuntimeDeps:
    """Process-wide chat services initialized during startup."""

    directory: SessionDirectory
    registry: ConnectionRegistry
    rate_limiter: SlidingWindowRateLimiter
    generator: ResponseGenerator
    replies: ReplyDispatcher
    admission: ConnectionAdmission
    admin_api_key: str | None
    message_limit: int
    message_window_seconds: float
    start_limit: int
    start_window_seconds: float

    async def shutdown(self) -> None:
        """Cancel in-flight replies, then close the generator's HTTP client."""
        pending = self.replies.pending
        await self.replies.shutdown()
        if pending:
            logger.info("shutdown: cancelled %s reply tasks", pending)
        await self.generator.aclose()


__all__ = ["RuntimeDeps"]
