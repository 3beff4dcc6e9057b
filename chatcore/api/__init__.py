"""HTTP surface: chat session routes and error rendering."""

from .errors import install_exception_handlers
from .sessions import router as sessions_router

__all__ = ["install_exception_handlers", "sessions_router"]
