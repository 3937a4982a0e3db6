"""
Redis HTTP Cache - Store Registry

Maps (store kind, URI scheme) to a store factory, so a caching framework can
turn a configured URI such as "redis://cache:6379/0/metastore" into a store
without knowing the store classes.

Usage:
    from redis_http_cache.stores import StoreKind, resolve_store

    meta = resolve_store(StoreKind.META, "redis://127.0.0.1:6379/0/metastore")
    entity = resolve_store("entitystore", "redis://127.0.0.1:6379/0/entitystore")
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from enum import Enum
from urllib.parse import urlsplit

from ..config import SUPPORTED_SCHEMES
from ..errors import ConfigurationError, MalformedURIError
from .base import BackendStore
from .entity import EntityStore
from .meta import MetaStore

logger = logging.getLogger(__name__)

StoreFactory = Callable[[str], BackendStore]


class StoreKind(str, Enum):
    """Store types a caching framework asks for."""

    ENTITY = "entitystore"
    META = "metastore"


_store_factories: dict[tuple[StoreKind, str], StoreFactory] = {}


def register_store(kind: StoreKind | str, scheme: str, factory: StoreFactory) -> None:
    """Add or replace the factory used for kind and scheme."""
    _store_factories[(StoreKind(kind), scheme.lower())] = factory
    logger.debug("Registered %s factory for scheme '%s'", StoreKind(kind).value, scheme)


def resolve_store(kind: StoreKind | str, uri: str) -> BackendStore:
    """
    Build the store registered for kind and the scheme of uri.

    Raises:
        ConfigurationError: If kind is unknown or no factory handles the scheme
        MalformedURIError: If uri cannot be parsed
    """
    try:
        kind = StoreKind(kind)
    except ValueError as e:
        raise ConfigurationError(
            f"Unknown store kind: {kind}",
            details={"kind": str(kind), "supported": [k.value for k in StoreKind]},
        ) from e

    try:
        scheme = urlsplit(str(uri)).scheme.lower()
    except ValueError as e:
        raise MalformedURIError(str(uri), str(e)) from e

    factory = _store_factories.get((kind, scheme))
    if factory is None:
        raise ConfigurationError(
            f"No {kind.value} registered for scheme '{scheme}'",
            details={"kind": kind.value, "scheme": scheme},
        )
    return factory(str(uri))


for _scheme in SUPPORTED_SCHEMES:
    register_store(StoreKind.ENTITY, _scheme, EntityStore.resolve)
    register_store(StoreKind.META, _scheme, MetaStore.resolve)
