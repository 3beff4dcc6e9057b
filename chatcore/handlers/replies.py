"""Background assistant replies for visitor messages.

Each visitor message schedules one reply task on the event loop. The task
runs detached from the sender's message loop so a slow completion API never
blocks the sender or any other session:

    TYPING_START -> generate (bounded by GEN_TIMEOUT_S) -> TYPING_STOP
                 -> AI_RESPONSE (only for non-empty text) -> touch session

TYPING_STOP is sent from a finally block, so every TYPING_START is paired
with exactly one TYPING_STOP whatever the generator does. Generator failures
are logged, counted and reported to Sentry, never sent to the visitor.
"""

from __future__ import annotations

import time
import asyncio
import logging

from .registry import ConnectionRegistry
from ..chat.models import ChatMessage, MessageRole
from ..errors import ChatError, GeneratorError, classify_error
from ..logging import log_context
from ..generator.base import ResponseGenerator
from ..directory.base import SessionDirectory
from ..chat.persona import build_generation_history
from ..telemetry.sentry import capture_error
from ..telemetry.traces import generation_span
from ..telemetry.instruments import get_metrics
from ..config import CHAT_HISTORY_WINDOW, GEN_TIMEOUT_S
from .websocket.envelopes import OutboundType, message_envelope, typing_envelope

logger = logging.getLogger(__name__)


class ReplyDispatcher:
    """Owns the set of in-flight reply tasks."""

    def __init__(
        self,
        *,
        directory: SessionDirectory,
        registry: ConnectionRegistry,
        generator: ResponseGenerator,
        history_window: int = CHAT_HISTORY_WINDOW,
        timeout_s: float = GEN_TIMEOUT_S,
    ) -> None:
        self._directory = directory
        self._registry = registry
        self._generator = generator
        self._history_window = max(1, int(history_window))
        self._timeout_s = float(timeout_s)
        self._tasks: set[asyncio.Task[None]] = set()

    @property
    def pending(self) -> int:
        return len(self._tasks)

    def schedule(self, session_id: str) -> asyncio.Task[None]:
        """Start a reply task for the latest message in `session_id`."""
        task = asyncio.create_task(self._run(session_id), name=f"reply:{session_id}")
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def drain(self) -> None:
        """Wait for every in-flight reply task to finish."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def shutdown(self) -> None:
        """Cancel in-flight reply tasks and wait for them to unwind."""
        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        self._tasks.clear()

    async def _run(self, session_id: str) -> None:
        with log_context(session_id=session_id):
            try:
                await self.reply(session_id)
            except ChatError as exc:
                # Session vanished or closed while the reply was in flight
                logger.info("reply dropped: %s", exc.message)
            except Exception as exc:  # noqa: BLE001
                logger.exception("reply task failed")
                capture_error(exc, session_id=session_id)

    async def reply(self, session_id: str) -> ChatMessage | None:
        """Generate and broadcast one assistant reply for `session_id`.

        Returns the persisted reply, or None when the generator produced no text.
        """
        await self._registry.broadcast(
            session_id,
            typing_envelope(OutboundType.TYPING_START, is_admin=False),
        )
        try:
            text = await self._generate(session_id)
        finally:
            await self._registry.broadcast(
                session_id,
                typing_envelope(OutboundType.TYPING_STOP, is_admin=False),
            )

        message = None
        if text:
            message = await self._registry.publish(
                session_id,
                lambda: self._directory.append_message(session_id, MessageRole.ASSISTANT, text),
                lambda stored: message_envelope(stored, OutboundType.AI_RESPONSE),
            )
            get_metrics().messages_total.add(1, {"role": MessageRole.ASSISTANT.value})
        await self._directory.update_session_timestamp(session_id)
        return message

    async def _generate(self, session_id: str) -> str:
        """Return reply text, or "" when the generator fails or times out."""
        metrics = get_metrics()
        messages = await self._directory.list_messages(session_id, limit=self._history_window)
        history = build_generation_history(messages)

        start = time.perf_counter()
        metrics.active_generations.add(1)
        try:
            with generation_span(session_id=session_id, history_len=len(messages)):
                text = await asyncio.wait_for(self._generator.generate(history), timeout=self._timeout_s)
        except TimeoutError as exc:
            logger.warning("generation timed out after %.1fs", self._timeout_s)
            metrics.generation_failures_total.add(1, {"reason": classify_error(exc)})
            capture_error(exc, session_id=session_id)
            return ""
        except GeneratorError as exc:
            logger.warning("generation failed: %s", exc)
            metrics.generation_failures_total.add(1, {"reason": classify_error(exc)})
            capture_error(exc, session_id=session_id)
            return ""
        except Exception as exc:  # noqa: BLE001
            logger.exception("generation raised unexpectedly")
            metrics.generation_failures_total.add(1, {"reason": classify_error(exc)})
            capture_error(exc, session_id=session_id)
            return ""
        finally:
            metrics.active_generations.add(-1)
            metrics.generation_latency.record(time.perf_counter() - start)

        return (text or "").strip()


__all__ = ["ReplyDispatcher"]
