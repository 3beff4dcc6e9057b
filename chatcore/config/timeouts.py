"""Timeouts configuration.

Centralizes the assistant reply deadlines. Values are sourced from
environment variables with sensible defaults.
"""

import os


# Hard deadline for one assistant reply, including retries inside the client
GEN_TIMEOUT_S = float(os.getenv("GEN_TIMEOUT_S", "30"))

# Per-request timeout handed to the HTTP client
AI_HTTP_TIMEOUT_S = float(os.getenv("AI_HTTP_TIMEOUT_S", "25"))


__all__ = [
    "GEN_TIMEOUT_S",
    "AI_HTTP_TIMEOUT_S",
]
