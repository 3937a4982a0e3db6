"""
Redis HTTP Cache - Connection Option Builder

Derives ConnectionOptions from a store URI and environment variables.
The environment is read once here, at construction time, and never again
by the stores.

URI layout:
    scheme://host[:port][/db][/namespace][?query]

The query string is handed to redis-py unchanged (ssl_cert_reqs, protocol, ...).
Unix socket URIs are not supported: the path is needed for db and namespace.

Environment:
    RHC_DRIVER           redis (default) | hiredis | memory
    RHC_EXPIRES_IN       default TTL in seconds (default 300)
    RHC_MAX_CONNECTIONS  Redis connection pool size (default 10)
    RHC_SOCKET_TIMEOUT   Redis socket timeout in seconds (default 5)
"""

import logging
import os
from collections.abc import Mapping
from pathlib import Path
from urllib.parse import urlsplit

from dotenv import load_dotenv
from pydantic import ValidationError

from ..errors import ConfigurationError, MalformedURIError
from .schemas import DEFAULT_EXPIRES_IN, DEFAULT_NAMESPACE, ConnectionOptions, StoreDriver

logger = logging.getLogger(__name__)

SUPPORTED_SCHEMES = ("redis", "rediss")


def _int_from_env(environ: Mapping[str, str], name: str, default: int) -> int:
    raw = environ.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ConfigurationError(
            f"{name} must be an integer, got {raw!r}",
            details={"env": name, "value": raw},
        ) from e


def _float_from_env(environ: Mapping[str, str], name: str, default: float) -> float:
    raw = environ.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError as e:
        raise ConfigurationError(
            f"{name} must be a number, got {raw!r}",
            details={"env": name, "value": raw},
        ) from e


def _driver_from_env(environ: Mapping[str, str]) -> StoreDriver:
    raw = (environ.get("RHC_DRIVER") or StoreDriver.REDIS.value).strip().lower()
    try:
        return StoreDriver(raw)
    except ValueError as e:
        raise ConfigurationError(
            f"Unknown store driver: {raw}",
            details={"env": "RHC_DRIVER", "value": raw, "supported": [d.value for d in StoreDriver]},
        ) from e


def _split_path(uri: str, path: str) -> tuple[int, str]:
    """Return (db, namespace) from the URI path segments."""
    segments = [s for s in path.split("/") if s]
    namespace = segments[-1] if segments else DEFAULT_NAMESPACE

    db = 0
    if segments and segments[0].isdigit():
        db = int(segments[0])
    elif len(segments) > 1:
        raise MalformedURIError(uri, f"database selector '{segments[0]}' is not a number")

    return db, namespace


def build_options(
    uri: str,
    environ: Mapping[str, str] | None = None,
    env_file: str | None = None,
) -> ConnectionOptions:
    """
    Build connection options for a store URI.

    Args:
        uri: Store URI, e.g. redis://127.0.0.1:6380/0/entitystore
        environ: Environment mapping (defaults to os.environ)
        env_file: Optional .env file loaded before reading the environment

    Returns:
        Frozen ConnectionOptions

    Raises:
        MalformedURIError: If the URI cannot be parsed
        ConfigurationError: If an environment override is invalid
    """
    uri = str(uri)

    if env_file:
        env_path = Path(env_file)
        if env_path.exists():
            logger.info("Loading environment from %s", env_path)
            load_dotenv(env_path, override=False)
        else:
            logger.debug("Environment file %s not found, skipping", env_path)

    if environ is None:
        environ = os.environ

    try:
        parts = urlsplit(uri)
        # Accessing .port validates it
        parts.port  # noqa: B018
    except ValueError as e:
        raise MalformedURIError(uri, str(e)) from e

    if parts.scheme == "unix":
        raise MalformedURIError(uri, "unix socket URIs are not supported, use redis:// or rediss://")
    if parts.scheme not in SUPPORTED_SCHEMES:
        raise MalformedURIError(uri, f"unsupported scheme '{parts.scheme}'")
    if not parts.hostname:
        raise MalformedURIError(uri, "missing host")

    db, namespace = _split_path(uri, parts.path)

    try:
        options = ConnectionOptions(
            endpoint=uri,
            namespace=namespace,
            expires_in=_int_from_env(environ, "RHC_EXPIRES_IN", DEFAULT_EXPIRES_IN),
            driver=_driver_from_env(environ),
            db=db,
            max_connections=_int_from_env(environ, "RHC_MAX_CONNECTIONS", 10),
            socket_timeout=_float_from_env(environ, "RHC_SOCKET_TIMEOUT", 5.0),
        )
    except ValidationError as e:
        logger.error(
            "Connection options validation failed: %s",
            e,
            extra={"uri": uri, "validation_errors": e.errors()},
        )
        raise ConfigurationError(
            "Connection options validation failed. Check the store URI and environment variables.",
            details={"uri": uri, "validation_errors": e.errors()},
        ) from e

    logger.debug(
        "Built connection options for %s",
        uri,
        extra={"namespace": options.namespace, "driver": options.driver.value, "expires_in": options.expires_in},
    )
    return options
