"""Response Generator interface and implementations."""

from .base import NullGenerator, ResponseGenerator
from .client import OpenAICompatibleGenerator

__all__ = ["NullGenerator", "OpenAICompatibleGenerator", "ResponseGenerator"]
