"""Shared fakes and builders for the chat core test suite."""

__all__ = ["fakes"]
