"""Fixed assistant persona and generator history assembly."""

from __future__ import annotations

from collections.abc import Sequence

from .models import ChatMessage

SYSTEM_PROMPT = (
    "You are Marin's AI assistant on their personal website \"Marin's Room\". "
    "You are friendly, helpful, and conversational. You can help visitors learn more "
    "about Marin, answer questions about the website, or just have a pleasant chat.\n\n"
    "Keep your responses concise but warm. If asked about personal details you don't "
    "know, politely explain that you're an AI assistant and suggest they reach out to "
    "Marin directly.\n\n"
    "Never share sensitive information or make up facts about Marin. Be helpful, "
    "positive, and engaging."
)


def build_generation_history(messages: Sequence[ChatMessage]) -> list[dict[str, str]]:
    """Prepend the persona to an oldest-first message window."""
    history = [{"role": "system", "content": SYSTEM_PROMPT}]
    history.extend(message.to_completion() for message in messages)
    return history


__all__ = ["SYSTEM_PROMPT", "build_generation_history"]
