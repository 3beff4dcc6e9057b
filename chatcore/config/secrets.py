"""Secrets and authentication related configuration."""

import os


# Admin secret for admin WebSocket joins and admin REST routes.
# Admin access is disabled entirely when unset.
ADMIN_API_KEY = os.getenv("ADMIN_API_KEY") or None

# Bearer token for the completion API (no assistant replies when unset)
AI_API_KEY = os.getenv("AI_API_KEY") or None


__all__ = ["ADMIN_API_KEY", "AI_API_KEY"]
