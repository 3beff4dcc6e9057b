"""Real-time chat coordination server.

This package hosts the live chat core for Marin's Room: WebSocket clients
join chat sessions, exchange messages with visitors and the site admin, and
receive assistant replies produced by an OpenAI-compatible completion API.

Architecture Overview:
    - server.py: FastAPI application entry point (/ws/chat, REST, health)
    - config/: Configuration modules (environment-based)
    - chat/: Session and message data shapes, validation, persona
    - directory/: Session Directory collaborator (sessions + history)
    - generator/: Response Generator collaborator (AI replies)
    - handlers/: Rate limiting, connection registry, per-connection protocol
    - api/: REST routes for session creation and admin actions
    - telemetry/: OpenTelemetry metrics/traces and Sentry reporting

Example:
    Start the server with uvicorn:

    $ uvicorn chatcore.server:app --host 0.0.0.0 --port 8000

Environment Variables:
    Optional:
        - ADMIN_API_KEY: Secret that unlocks admin joins and admin routes
        - AI_API_KEY / AI_API_URL / AI_MODEL: Completion API settings
        - MAX_CONCURRENT_CONNECTIONS: Maximum WebSocket connections
        - WS_MAX_MESSAGES_PER_WINDOW / WS_MESSAGE_WINDOW_SECONDS: Chat rate limit
"""
