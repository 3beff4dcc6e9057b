"""Main FastAPI server for the live chat core.

It provides:

- REST endpoints for health checks (/healthz, /)
- REST routes for chat sessions (/api/chat/...)
- WebSocket endpoint for live chat (/ws/chat)
- Graceful shutdown that cancels pending assistant replies

Server Lifecycle:
    1. On startup: initialize telemetry, build runtime dependencies
    2. Accept WebSocket connections on /ws/chat
    3. Route envelopes through the per-connection handler
    4. On shutdown: cancel reply tasks, close the completion client, flush telemetry

Example:
    Run directly with uvicorn:
        $ uvicorn chatcore.server:app --host 0.0.0.0 --port 8000
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from collections.abc import AsyncIterator, Awaitable, Callable

from fastapi import FastAPI, Request, WebSocket
from fastapi.responses import ORJSONResponse

from .api import install_exception_handlers, sessions_router
from .config import WS_CHAT_PATH
from .logging import configure_logging
from .runtime import RuntimeDeps, build_runtime_deps
from .telemetry.setup import init_telemetry, shutdown_telemetry
from .handlers.websocket.manager import handle_websocket_connection

logger = logging.getLogger(__name__)

RuntimeDepsFactory = Callable[[], Awaitable[RuntimeDeps]]


def _health(deps: RuntimeDeps | None) -> dict:
    if deps is None:
        return {"status": "starting"}
    return {
        "status": "ok",
        "connections": deps.admission.get_connection_count(),
        "sessions": deps.registry.session_count(),
        "pendingReplies": deps.replies.pending,
    }


def create_app(runtime_deps_factory: RuntimeDepsFactory | None = None) -> FastAPI:
    """Build the FastAPI application.

    Args:
        runtime_deps_factory: Coroutine building the runtime services;
            defaults to build_runtime_deps with configuration from the
            environment.
    """
    factory = runtime_deps_factory or build_runtime_deps

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        init_telemetry()
        deps = await factory()
        app.state.runtime_deps = deps
        logger.info("chat server ready: ws=%s", WS_CHAT_PATH)
        try:
            yield
        finally:
            await deps.shutdown()
            app.state.runtime_deps = None
            shutdown_telemetry()

    app = FastAPI(default_response_class=ORJSONResponse, lifespan=lifespan)
    app.state.runtime_deps = None
    install_exception_handlers(app)
    app.include_router(sessions_router)

    @app.get("/")
    async def root(request: Request):
        """Root endpoint for load balancer health checks."""
        return _health(request.app.state.runtime_deps)

    @app.get("/healthz")
    async def healthz(request: Request):
        """Health check endpoint (no authentication required)."""
        return _health(request.app.state.runtime_deps)

    @app.get("/favicon.ico", status_code=204)
    async def favicon():
        """Suppress favicon requests from browsers and health checkers."""
        return None

    @app.websocket(WS_CHAT_PATH)
    async def websocket_endpoint(websocket: WebSocket):
        """Live chat WebSocket endpoint."""
        await handle_websocket_connection(websocket, websocket.app.state.runtime_deps)

    return app


configure_logging()

app = create_app()
