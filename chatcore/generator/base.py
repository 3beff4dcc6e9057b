"""Response Generator collaborator interface."""

from __future__ import annotations

from typing import Protocol


class ResponseGenerator(Protocol):
    """Produces assistant reply text for an oldest-first chat history.

    Implementations raise GeneratorError on failure. An empty string means
    "no reply".
    """

    async def generate(self, history: list[dict[str, str]]) -> str: ...

    async def aclose(self) -> None: ...


class NullGenerator:
    """Generator used when no completion API is configured; never replies."""

    async def generate(self, history: list[dict[str, str]]) -> str:
        return ""

    async def aclose(self) -> None:
        return None


__all__ = ["ResponseGenerator", "NullGenerator"]
