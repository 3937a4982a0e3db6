"""
Redis HTTP Cache - Stores

Entity and meta stores plus the registry that resolves them from URIs.
"""

from .base import BackendStore, hexdigest
from .entity import EntityStore
from .meta import MetaStore
from .registry import StoreKind, register_store, resolve_store

__all__ = [
    "BackendStore",
    "EntityStore",
    "MetaStore",
    "StoreKind",
    "hexdigest",
    "register_store",
    "resolve_store",
]
