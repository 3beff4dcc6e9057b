"""Unit tests for admin key checks and client identity resolution."""

from __future__ import annotations

from types import SimpleNamespace

from chatcore.handlers.websocket.auth import UNKNOWN_CLIENT, client_address, is_valid_admin_key


def _conn(headers: dict[str, str] | None = None, host: str | None = "192.168.1.9"):
    client = SimpleNamespace(host=host) if host is not None else None
    return SimpleNamespace(headers=headers or {}, client=client)


def test_admin_key_matches() -> None:
    assert is_valid_admin_key("secret123", "secret123") is True


def test_admin_key_mismatch() -> None:
    assert is_valid_admin_key("wrong", "secret123") is False


def test_admin_key_missing_on_either_side() -> None:
    assert is_valid_admin_key(None, "secret123") is False
    assert is_valid_admin_key("", "secret123") is False
    assert is_valid_admin_key("secret123", None) is False


def test_client_address_prefers_first_forwarded_entry() -> None:
    conn = _conn({"x-forwarded-for": " 203.0.113.7 , 10.0.0.2"})
    assert client_address(conn) == "203.0.113.7"


def test_client_address_falls_back_to_peer_host() -> None:
    assert client_address(_conn()) == "192.168.1.9"


def test_client_address_unknown_without_peer() -> None:
    assert client_address(_conn(host=None)) == UNKNOWN_CLIENT
