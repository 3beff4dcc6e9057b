"""Completion API settings for assistant replies."""

import os


AI_API_URL = (os.getenv("AI_API_URL", "https://api.openai.com/v1") or "").rstrip("/")
AI_MODEL = os.getenv("AI_MODEL", "gpt-4o-mini")
AI_MAX_TOKENS = int(os.getenv("AI_MAX_TOKENS", "500"))
AI_TEMPERATURE = float(os.getenv("AI_TEMPERATURE", "0.7"))


__all__ = [
    "AI_API_URL",
    "AI_MODEL",
    "AI_MAX_TOKENS",
    "AI_TEMPERATURE",
]
