"""Admin credential checks and client identity resolution."""

from __future__ import annotations

import logging
import secrets

from starlette.requests import HTTPConnection

from ...config.websocket import FORWARDED_FOR_HEADER

logger = logging.getLogger(__name__)

UNKNOWN_CLIENT = "unknown"


def is_valid_admin_key(provided_key: str | None, expected_key: str | None) -> bool:
    """Compare an admin key in constant time.

    A missing key on either side never matches, so admin features stay off
    when no server key is configured.
    """
    if not provided_key or not expected_key:
        return False
    return secrets.compare_digest(provided_key.encode("utf-8"), expected_key.encode("utf-8"))


def client_address(conn: HTTPConnection) -> str:
    """Resolve the client network identity for rate limiting and ownership.

    First entry of X-Forwarded-For, else the peer host, else "unknown".
    """
    forwarded = conn.headers.get(FORWARDED_FOR_HEADER)
    if forwarded:
        first = forwarded.split(",")[0].strip()
        if first:
            return first
    if conn.client is not None and conn.client.host:
        return conn.client.host
    return UNKNOWN_CLIENT


__all__ = ["is_valid_admin_key", "client_address", "UNKNOWN_CLIENT"]
