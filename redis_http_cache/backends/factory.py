"""
Redis HTTP Cache - Backend Factory

Builds the key/value backend a store talks to from its ConnectionOptions.
Backends are selected through an explicit driver registry:

    redis    -> RedisBackend with the pure-Python RESP parser (default)
    hiredis  -> RedisBackend with the hiredis parser
    memory   -> MemoryBackend (in-process, opt-in)

Memory backends built for the same endpoint (scheme, host, port and db) share
one keyspace, the way two Redis clients share one server.

Examples:
    from redis_http_cache.config import build_options
    from redis_http_cache.backends.factory import create_backend

    backend = create_backend(build_options("redis://127.0.0.1:6379/0/metastore"))
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from ..config import ConnectionOptions, StoreDriver
from ..errors import ConfigurationError
from .interface import KeyValueBackend
from .memory import Keyspace, MemoryBackend

logger = logging.getLogger(__name__)

BackendFactory = Callable[[ConnectionOptions], KeyValueBackend]

# In-process keyspaces, one per endpoint
_memory_keyspaces: dict[str, Keyspace] = {}


def _create_memory_backend(options: ConnectionOptions) -> KeyValueBackend:
    """Construct a memory backend on the endpoint's shared keyspace."""
    keyspace = _memory_keyspaces.setdefault(options.redis_url, {})
    return MemoryBackend(
        namespace=options.namespace,
        default_ttl=options.expires_in,
        keyspace=keyspace,
    )


def _build_redis_backend(options: ConnectionOptions, parser_class: type[Any]) -> KeyValueBackend:
    """Construct a redis backend with lazy import."""
    try:
        from .redis import RedisBackend
    except ImportError as e:
        logger.error(
            "Redis driver selected but redis client is not installed",
            extra={"package": "redis>=5.0.1", "error": str(e)},
        )
        raise ConfigurationError(
            "Redis driver selected but redis client is unavailable. Install with: pip install 'redis>=5.0.1'",
            details={"package": "redis>=5.0.1", "error": str(e), "driver": options.driver.value},
        ) from e

    return RedisBackend(
        redis_url=options.redis_url,
        namespace=options.namespace,
        default_ttl=options.expires_in,
        max_connections=options.max_connections,
        socket_timeout=options.socket_timeout,
        parser_class=parser_class,
    )


def _create_redis_backend(options: ConnectionOptions) -> KeyValueBackend:
    """Construct a redis backend on redis-py's pure-Python parser, even when hiredis is installed."""
    from redis._parsers import _AsyncRESP2Parser, _AsyncRESP3Parser

    parser_class = _AsyncRESP3Parser if options.resp_protocol == 3 else _AsyncRESP2Parser
    return _build_redis_backend(options, parser_class)


def _create_hiredis_backend(options: ConnectionOptions) -> KeyValueBackend:
    """Construct a redis backend on the hiredis parser."""
    from redis._parsers import _AsyncHiredisParser
    from redis.utils import HIREDIS_AVAILABLE

    if not HIREDIS_AVAILABLE:
        raise ConfigurationError(
            "hiredis driver selected but hiredis is not installed. Install with: pip install 'redis[hiredis]'",
            details={"package": "hiredis", "driver": options.driver.value},
        )
    return _build_redis_backend(options, _AsyncHiredisParser)


_backend_factories: dict[StoreDriver, BackendFactory] = {
    StoreDriver.REDIS: _create_redis_backend,
    StoreDriver.HIREDIS: _create_hiredis_backend,
    StoreDriver.MEMORY: _create_memory_backend,
}


def register_backend(driver: StoreDriver, factory: BackendFactory) -> None:
    """Add or replace the backend factory for a driver."""
    _backend_factories[driver] = factory
    logger.debug("Registered backend factory for driver: %s", driver.value)


def create_backend(options: ConnectionOptions) -> KeyValueBackend:
    """
    Create the key/value backend described by options.

    Args:
        options: Connection options from build_options()

    Returns:
        Configured backend instance

    Raises:
        ConfigurationError: If the driver is unknown or its client is unavailable
    """
    factory = _backend_factories.get(options.driver)
    if factory is None:
        raise ConfigurationError(
            f"Unknown store driver: {options.driver.value}",
            details={"driver": options.driver.value, "supported": [d.value for d in _backend_factories]},
        )

    backend = factory(options)
    logger.info(
        "Created %s backend for namespace '%s'",
        options.driver.value,
        options.namespace,
        extra={"driver": options.driver.value, "namespace": options.namespace, "endpoint": options.redis_url},
    )
    return backend


def reset_backend_factory() -> None:
    """
    Drop every shared in-process keyspace.

    Warning: Only use this in testing contexts.
    """
    count = len(_memory_keyspaces)
    _memory_keyspaces.clear()
    logger.debug("Reset backend factory, dropped %d memory keyspace(s)", count)
