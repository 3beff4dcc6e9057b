"""Connection registry: session membership and broadcast fan-out.

This module keeps the in-process index from session id to the connections
currently bound to it, and is the only place that enumerates members to
deliver an envelope.

Locking:
    Every session gets its own asyncio.Lock. Membership changes, broadcast
    enumeration and publish (persist then broadcast) for one session hold that
    lock, so a broadcast never races a removal and every member sees
    published messages in the order they were persisted. Operations on
    different sessions never wait on each other.

    Lock entries are reference counted and dropped together with the
    membership set once the session has no members and no lock users, so
    abandoned sessions do not accumulate.

Example:
    registry = ConnectionRegistry()
    await registry.add(session_id, connection)
    await registry.broadcast(session_id, envelope, exclude=connection)
    await registry.remove(session_id, connection)
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from contextlib import asynccontextmanager
from collections.abc import AsyncIterator, Awaitable, Callable
from typing import Any, TypeVar

from .state import ChatConnection
from ..telemetry.instruments import get_metrics

logger = logging.getLogger(__name__)

T = TypeVar("T")

Envelope = dict[str, Any]


@dataclass(slots=True)
class _SessionLock:
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)
    users: int = 0


class ConnectionRegistry:
    """Task-safe index from session id to member connections."""

    def __init__(self) -> None:
        self._members: dict[str, set[ChatConnection]] = {}
        self._locks: dict[str, _SessionLock] = {}

    @asynccontextmanager
    async def _session_lock(self, session_id: str) -> AsyncIterator[None]:
        entry = self._locks.get(session_id)
        if entry is None:
            entry = _SessionLock()
            self._locks[session_id] = entry
        entry.users += 1
        try:
            async with entry.lock:
                yield
        finally:
            entry.users -= 1
            if entry.users == 0 and session_id not in self._members:
                self._locks.pop(session_id, None)

    # ============================================================================
    # Membership
    # ============================================================================
    async def add(
        self,
        session_id: str,
        connection: ChatConnection,
        *,
        on_join: Callable[[], Awaitable[T]] | None = None,
    ) -> T | None:
        """Insert `connection` into the session's set, creating it if absent.

        `on_join` runs under the session lock before the insert; if it raises,
        the connection is not added. Used to snapshot history and greet the
        joining client without a concurrent broadcast slipping in between.
        """
        async with self._session_lock(session_id):
            result = await on_join() if on_join is not None else None
            self._members.setdefault(session_id, set()).add(connection)
        logger.debug("registry: %s joined session %s", connection.connection_id, session_id)
        return result

    async def remove(self, session_id: str, connection: ChatConnection) -> None:
        """Remove `connection`; no-op when it or the session is absent."""
        async with self._session_lock(session_id):
            members = self._members.get(session_id)
            if members is None:
                return
            members.discard(connection)
            if not members:
                del self._members[session_id]
        logger.debug("registry: %s left session %s", connection.connection_id, session_id)

    def members(self, session_id: str) -> frozenset[ChatConnection]:
        return frozenset(self._members.get(session_id, ()))

    def session_count(self) -> int:
        return len(self._members)

    def connection_count(self) -> int:
        return sum(len(members) for members in self._members.values())

    # ============================================================================
    # Fan-out
    # ============================================================================
    async def broadcast(
        self,
        session_id: str,
        envelope: Envelope,
        *,
        exclude: ChatConnection | None = None,
    ) -> int:
        """Send `envelope` to every member except `exclude`; return delivered count."""
        async with self._session_lock(session_id):
            return await self._deliver(session_id, envelope, exclude)

    async def publish(
        self,
        session_id: str,
        persist: Callable[[], Awaitable[T]],
        build_envelope: Callable[[T], Envelope],
        *,
        exclude: ChatConnection | None = None,
    ) -> T:
        """Persist then broadcast under the session lock.

        Nothing is broadcast if `persist` raises.
        """
        async with self._session_lock(session_id):
            result = await persist()
            await self._deliver(session_id, build_envelope(result), exclude)
        return result

    async def _deliver(
        self,
        session_id: str,
        envelope: Envelope,
        exclude: ChatConnection | None,
    ) -> int:
        delivered = 0
        skipped = 0
        for connection in list(self._members.get(session_id, ())):
            if connection is exclude:
                continue
            try:
                sent = await connection.send(envelope)
            except Exception:  # noqa: BLE001
                logger.warning(
                    "registry: send to %s failed; skipping",
                    connection.connection_id,
                    exc_info=True,
                )
                sent = False
            if sent:
                delivered += 1
            else:
                skipped += 1
        if skipped:
            get_metrics().broadcast_skipped_total.add(skipped)
        return delivered


__all__ = ["ConnectionRegistry"]
