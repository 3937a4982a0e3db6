"""
Redis HTTP Cache

Redis-backed entity and meta stores for HTTP caching frameworks:
content-addressed response bodies and hashed-key variant metadata.

Usage:
    from redis_http_cache import EntityStore, MetaStore

    entities = EntityStore.resolve("redis://127.0.0.1:6379/0/entitystore")
    meta = MetaStore.resolve("redis://127.0.0.1:6379/0/metastore")
"""

__version__ = "1.0.0"

from .config import ConnectionOptions, StoreDriver, build_options
from .errors import ConfigurationError, MalformedURIError, RedisHttpCacheError, SerializationError
from .logging_config import configure_logging
from .stores import EntityStore, MetaStore, StoreKind, resolve_store

__all__ = [
    "EntityStore",
    "MetaStore",
    "StoreKind",
    "resolve_store",
    "build_options",
    "ConnectionOptions",
    "StoreDriver",
    "configure_logging",
    "RedisHttpCacheError",
    "ConfigurationError",
    "MalformedURIError",
    "SerializationError",
]
