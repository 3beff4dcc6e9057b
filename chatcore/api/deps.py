"""FastAPI dependencies for the chat REST routes."""

from __future__ import annotations

import logging

from fastapi import Depends, Request, Security
from fastapi.security.api_key import APIKeyHeader

from ..errors import UnauthorizedError
from ..runtime.dependencies import RuntimeDeps
from ..handlers.websocket.auth import is_valid_admin_key

logger = logging.getLogger(__name__)

ADMIN_KEY_HEADER = "X-Admin-API-Key"

admin_key_header = APIKeyHeader(name=ADMIN_KEY_HEADER, auto_error=False)


def get_runtime_deps(request: Request) -> RuntimeDeps:
    deps = getattr(request.app.state, "runtime_deps", None)
    if deps is None:
        raise RuntimeError("runtime dependencies are not initialized")
    return deps


def is_admin_request(
    provided_key: str | None = Security(admin_key_header),
    deps: RuntimeDeps = Depends(get_runtime_deps),
) -> bool:
    """True when the request carries the configured admin key."""
    return is_valid_admin_key(provided_key, deps.admin_api_key)


def require_admin(is_admin: bool = Depends(is_admin_request)) -> None:
    if not is_admin:
        logger.warning("admin request rejected")
        raise UnauthorizedError()


__all__ = [
    "ADMIN_KEY_HEADER",
    "get_runtime_deps",
    "is_admin_request",
    "require_admin",
]
