"""Runtime dependency wiring for eager startup initialization."""

from .dependencies import RuntimeDeps
from .bootstrap import build_generator, build_runtime_deps

__all__ = [
    "build_generator",
    "build_runtime_deps",
    "RuntimeDeps",
]
