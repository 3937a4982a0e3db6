"""
Redis HTTP Cache - Key/Value Backends

Exports the backend interface, the in-process backend and the factory.

Redis backend is lazy-loaded via factory.py to avoid import overhead.
"""

from .factory import create_backend, register_backend, reset_backend_factory
from .interface import KeyValueBackend
from .memory import MemoryBackend

__all__ = [
    "KeyValueBackend",
    "MemoryBackend",
    "create_backend",
    "register_backend",
    "reset_backend_factory",
]
