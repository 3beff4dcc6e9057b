"""Keyed sliding-window rate limiter.

This module bounds how often a keyed action (chat messages per client
address, session creation per client address) may happen within a trailing
time window.

Sliding Window Algorithm:
    Each key owns a deque of attempt timestamps. On every check:
    1. Drop timestamps older than (now - window_seconds)
    2. Remember how many attempts remain (the pre-insertion count)
    3. Record the current attempt, allowed or not
    4. Allow when the pre-insertion count was below the limit

Recording denied attempts means a client that keeps hammering stays limited
until it goes quiet for a while.

Storage:
    Timestamps live in a WindowStore. InMemoryWindowStore keeps them in
    process; a shared store (for several server processes) can implement the
    same two coroutines. Stores signal an unreachable backend with
    RateLimiterBackendError, on which the limiter fails open: the action is
    allowed, a warning is logged and rate_limiter_failures_total is counted.

Example:
    limiter = SlidingWindowRateLimiter()

    result = await limiter.check("ws-message:10.0.0.1", limit=30, window_seconds=60)
    if not result.allowed:
        ...
"""

from __future__ import annotations

import time
import asyncio
import logging
import collections
from dataclasses import dataclass
from collections.abc import Callable
from typing import Protocol

from ..config import RATE_LIMIT_SWEEP_EVERY
from ..telemetry.instruments import get_metrics
from ..errors import RateLimitError, RateLimiterBackendError

logger = logging.getLogger(__name__)

# Type alias for injectable time functions (used in testing)
TimeFn = Callable[[], float]


@dataclass(frozen=True, slots=True)
class RateLimitResult:
    """Outcome of one limiter check.

    Attributes:
        allowed: Whether the action may proceed.
        remaining: Attempts left in the current window after this one.
        retry_in: Seconds until the oldest recorded attempt leaves the window
            (0 when allowed).
    """

    allowed: bool
    remaining: int
    retry_in: float = 0.0


class WindowStore(Protocol):
    async def record(self, key: str, now: float, window_seconds: float) -> tuple[int, float]:
        """Purge expired attempts, record `now`, return (previous_count, oldest_timestamp).

        Must be atomic per key. Raise RateLimiterBackendError when the backing
        storage cannot be reached.
        """
        ...

    async def sweep(self, now: float) -> int:
        """Drop keys silent for a full window; return how many were dropped."""
        ...


@dataclass(slots=True)
class _KeyWindow:
    events: collections.deque[float]
    window_seconds: float


class InMemoryWindowStore:
    """Process-local WindowStore.

    One asyncio.Lock guards the whole table; critical sections never await,
    so contention only matters for correctness, not latency.
    """

    def __init__(self) -> None:
        self._windows: dict[str, _KeyWindow] = {}
        self._lock = asyncio.Lock()

    def __len__(self) -> int:
        return len(self._windows)

    def __contains__(self, key: object) -> bool:
        return key in self._windows

    async def record(self, key: str, now: float, window_seconds: float) -> tuple[int, float]:
        async with self._lock:
            entry = self._windows.get(key)
            if entry is None:
                entry = _KeyWindow(collections.deque(), window_seconds)
                self._windows[key] = entry
            entry.window_seconds = window_seconds

            # Remove expired events from the front of the deque
            events = entry.events
            cutoff = now - window_seconds
            while events and events[0] <= cutoff:
                events.popleft()

            previous = len(events)
            oldest = events[0] if events else now
            events.append(now)
            return previous, oldest

    async def sweep(self, now: float) -> int:
        async with self._lock:
            expired = [
                key
                for key, entry in self._windows.items()
                if not entry.events or entry.events[-1] <= now - entry.window_seconds
            ]
            for key in expired:
                del self._windows[key]
        if expired:
            logger.debug("rate limiter: dropped %s idle keys", len(expired))
        return len(expired)


class SlidingWindowRateLimiter:
    """Keyed sliding-window limiter shared by every connection.

    The limiter is disabled for a call when limit <= 0 or window_seconds <= 0,
    in which case check() always allows.
    """

    def __init__(
        self,
        *,
        store: WindowStore | None = None,
        now_fn: TimeFn | None = None,
        sweep_every: int = RATE_LIMIT_SWEEP_EVERY,
    ) -> None:
        """Initialize the rate limiter.

        Args:
            store: Window storage; defaults to an InMemoryWindowStore.
            now_fn: Optional time function for testing. Defaults to time.monotonic.
            sweep_every: Run a full idle-key sweep after this many checks (0 disables
                the count trigger). A sweep also runs on the first check made
                a full window after the previous sweep, so idle keys are freed
                one window after they go quiet.
        """
        self.store: WindowStore = store if store is not None else InMemoryWindowStore()
        self._now = now_fn or time.monotonic
        self._sweep_every = max(0, int(sweep_every))
        self._checks = 0
        self._last_sweep = self._now()

    async def check(self, key: str, limit: int, window_seconds: float) -> RateLimitResult:
        """Record one attempt for `key` and report whether it is allowed."""
        limit = int(limit)
        window_seconds = float(window_seconds)
        if limit <= 0 or window_seconds <= 0:
            return RateLimitResult(allowed=True, remaining=max(0, limit))

        now = self._now()
        try:
            previous, oldest = await self.store.record(key, now, window_seconds)
            await self._maybe_sweep(now, window_seconds)
        except RateLimiterBackendError as exc:
            logger.warning("rate limiter backend unavailable; failing open for key=%s: %s", key, exc)
            get_metrics().rate_limiter_failures_total.add(1)
            return RateLimitResult(allowed=True, remaining=limit)

        if previous < limit:
            return RateLimitResult(allowed=True, remaining=max(0, limit - previous - 1))
        return RateLimitResult(
            allowed=False,
            remaining=0,
            retry_in=max(0.0, (oldest + window_seconds) - now),
        )

    async def consume(
        self,
        key: str,
        limit: int,
        window_seconds: float,
        *,
        scope: str,
    ) -> RateLimitResult:
        """Like check() but raise RateLimitError when the attempt is denied.

        Raises:
            RateLimitError: If the rate limit has been exceeded.
        """
        result = await self.check(key, limit, window_seconds)
        if not result.allowed:
            get_metrics().rate_limit_violations_total.add(1, {"scope": scope})
            logger.info("rate limited: scope=%s key=%s", scope, key)
            raise RateLimitError(
                retry_in=result.retry_in,
                limit=limit,
                window_seconds=window_seconds,
            )
        return result

    async def _maybe_sweep(self, now: float, window_seconds: float) -> None:
        self._checks += 1
        by_count = bool(self._sweep_every) and self._checks % self._sweep_every == 0
        if by_count or now - self._last_sweep >= window_seconds:
            self._last_sweep = now
            await self.store.sweep(now)


__all__ = [
    "InMemoryWindowStore",
    "RateLimitResult",
    "SlidingWindowRateLimiter",
    "WindowStore",
]
