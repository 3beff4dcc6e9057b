"""OpenAI-compatible chat completion client for assistant replies.

Calls POST {base_url}/chat/completions with the persona-prefixed history and
returns choices[0].message.content. One httpx.AsyncClient is shared for the
life of the process so connections are pooled across sessions.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from ..errors import GeneratorError
from ..config import AI_API_URL, AI_MODEL, AI_MAX_TOKENS, AI_TEMPERATURE, AI_HTTP_TIMEOUT_S

logger = logging.getLogger(__name__)


class OpenAICompatibleGenerator:
    """Response generator backed by an OpenAI-compatible HTTP API."""

    def __init__(
        self,
        *,
        api_key: str,
        base_url: str = AI_API_URL,
        model: str = AI_MODEL,
        max_tokens: int = AI_MAX_TOKENS,
        temperature: float = AI_TEMPERATURE,
        timeout: float = AI_HTTP_TIMEOUT_S,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.model = model
        self.max_tokens = max_tokens
        self.temperature = temperature
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            timeout=timeout,
            headers={"Authorization": f"Bearer {api_key}"},
            transport=transport,
        )

    def _build_payload(self, history: list[dict[str, str]]) -> dict[str, Any]:
        return {
            "model": self.model,
            "messages": history,
            "max_tokens": self.max_tokens,
            "temperature": self.temperature,
        }

    async def generate(self, history: list[dict[str, str]]) -> str:
        try:
            resp = await self._client.post("/chat/completions", json=self._build_payload(history))
            resp.raise_for_status()
            data = resp.json()
        except httpx.HTTPStatusError as exc:
            logger.error(
                "completion API returned %s: %s",
                exc.response.status_code,
                exc.response.text[:500],
            )
            raise GeneratorError(f"completion API returned {exc.response.status_code}") from exc
        except httpx.HTTPError as exc:
            raise GeneratorError(f"completion API request failed: {exc}") from exc
        except ValueError as exc:
            raise GeneratorError("completion API returned invalid JSON") from exc

        try:
            content = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as exc:
            raise GeneratorError("completion API response missing choices[0].message.content") from exc
        if content is None:
            return ""
        if not isinstance(content, str):
            raise GeneratorError("completion API returned non-text content")
        return content.strip()

    async def aclose(self) -> None:
        await self._client.aclose()


__all__ = ["OpenAICompatibleGenerator"]
