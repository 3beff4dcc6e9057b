"""Session Directory interface, the in-process store and the failure guard."""

from .base import SessionDirectory
from .memory import InMemorySessionDirectory
from .guarded import GuardedSessionDirectory

__all__ = ["SessionDirectory", "InMemorySessionDirectory", "GuardedSessionDirectory"]
