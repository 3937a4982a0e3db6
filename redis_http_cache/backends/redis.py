"""
Redis HTTP Cache - Redis Backend

Asynchronous Redis key/value backend with:
- Raw bytes values (decode_responses=False)
- Per-key TTL via SET ... EX
- Namespace prefixing so entity and meta stores can share one database

Requires: redis>=5.0 with asyncio support

Transport errors are logged and reported as None/False. Nothing is retried.

Example:
    backend = RedisBackend(redis_url="redis://localhost:6379/0", namespace="entitystore", default_ttl=300)
    await backend.set("90a4c84d...", b"she rode to the sea;")
    body = await backend.get("90a4c84d...")
"""

from __future__ import annotations

import logging
from typing import Any

from .interface import KeyValueBackend

logger = logging.getLogger(__name__)

try:
    # redis-py asyncio client (v4+)
    from redis.asyncio import Redis
except ImportError as e:  # pragma: no cover
    raise ImportError(
        "Redis async client is required but not installed. "
        "Install with: pip install 'redis>=5.0.0' or add 'redis' to your dependencies."
    ) from e


class RedisBackend(KeyValueBackend):
    """
    Redis key/value backend.

    Notes:
    - Keys are prefixed with the configured namespace.
    - Values are stored and returned as bytes.
    - TTL is applied via Redis EX seconds (None -> default_ttl, 0 -> no expiry).
    - One client (and its connection pool) is shared by every call.
    """

    def __init__(
        self,
        redis_url: str,
        namespace: str = "cache",
        default_ttl: int = 300,
        max_connections: int = 10,
        socket_timeout: float = 5.0,
        parser_class: type[Any] | None = None,
    ) -> None:
        """
        Initialize Redis backend.

        Args:
            redis_url: Connection URL, e.g., redis://localhost:6379/0 or rediss:// for TLS
            namespace: Prefix for all keys
            default_ttl: Default TTL in seconds (0 => no expiry)
            max_connections: Connection pool size
            socket_timeout: Socket timeout in seconds
            parser_class: RESP parser class for each pool connection (None -> redis-py picks)
        """
        if not redis_url:
            raise ValueError("redis_url is required")

        self.namespace = namespace.strip() or "cache"
        self.default_ttl = max(0, int(default_ttl))
        self._hits = 0
        self._misses = 0
        self._sets = 0
        self._deletes = 0

        connection_kwargs: dict[str, Any] = {}
        if parser_class is not None:
            connection_kwargs["parser_class"] = parser_class

        # Lazy connection; connects on first command
        self._client = Redis.from_url(
            url=redis_url,
            decode_responses=False,
            max_connections=max_connections,
            socket_timeout=socket_timeout,
            **connection_kwargs,
        )

    async def get(self, key: str) -> bytes | None:
        """Retrieve a value by key."""
        try:
            data = await self._client.get(self._make_key(key))
        except Exception as e:
            logger.error(
                f"Failed to get key '{key}' from Redis: {e}",
                extra={"key": key, "namespace": self.namespace, "error": str(e)},
                exc_info=True,
            )
            self._misses += 1
            return None

        if data is None:
            self._misses += 1
            return None

        self._hits += 1
        return data

    async def set(self, key: str, value: bytes, ttl: int | None = None) -> bool:
        """Store a value with optional TTL."""
        ex = self._ttl_seconds(ttl)
        try:
            res = await self._client.set(name=self._make_key(key), value=value, ex=ex)
        except Exception as e:
            logger.error(
                f"Failed to set key '{key}' in Redis: {e}",
                extra={"key": key, "namespace": self.namespace, "ttl": ex, "error": str(e)},
                exc_info=True,
            )
            return False

        success = bool(res)
        if success:
            self._sets += 1
        return success

    async def delete(self, key: str) -> bool:
        """Delete a single key."""
        try:
            deleted = await self._client.delete(self._make_key(key))
        except Exception as e:
            logger.error(
                f"Failed to delete key '{key}' from Redis: {e}",
                extra={"key": key, "namespace": self.namespace, "error": str(e)},
                exc_info=True,
            )
            return False

        if deleted:
            self._deletes += 1
        return bool(deleted)

    async def exists(self, key: str) -> bool:
        """Check if a key exists."""
        try:
            return bool(await self._client.exists(self._make_key(key)))
        except Exception as e:
            logger.error(
                f"Failed to check existence of key '{key}' in Redis: {e}",
                extra={"key": key, "namespace": self.namespace, "error": str(e)},
                exc_info=True,
            )
            return False

    async def clear(self) -> bool:
        """
        Clear all entries under the namespace.

        Implementation: SCAN match "<namespace>:*" and DEL in batches.
        """
        try:
            pattern = f"{self.namespace}:*"
            cursor = 0
            total_deleted = 0

            while True:
                cursor, keys = await self._client.scan(cursor=cursor, match=pattern, count=1000)
                if keys:
                    total_deleted += await self._client.delete(*keys)
                if cursor == 0:
                    break

            self._deletes += total_deleted
            logger.info(f"Cleared {total_deleted} keys from namespace '{self.namespace}'")
            return True
        except Exception as e:
            logger.error(
                f"Failed to clear namespace '{self.namespace}': {e}",
                extra={"namespace": self.namespace, "error": str(e)},
                exc_info=True,
            )
            return False

    async def get_stats(self) -> dict[str, Any]:
        """Return counters plus basic Redis server info."""
        total_requests = self._hits + self._misses
        stats: dict[str, Any] = {
            "backend": "redis",
            "namespace": self.namespace,
            "default_ttl": self.default_ttl,
            "hits": self._hits,
            "misses": self._misses,
            "hit_rate": round((self._hits / total_requests) * 100, 2) if total_requests else 0.0,
            "sets": self._sets,
            "deletes": self._deletes,
            "connected": False,
        }

        try:
            stats["connected"] = bool(await self._client.ping())
            info = await self._client.info(section="server")
            stats["redis_version"] = info.get("redis_version")
        except Exception as e:
            # INFO may be restricted; keep the counters
            logger.warning(f"Failed to get Redis INFO (restricted or unavailable): {e}", extra={"error": str(e)})

        return stats

    async def close(self) -> None:
        """Close the Redis client and release its connection pool."""
        try:
            await self._client.aclose()
            logger.info(f"Closed Redis backend for namespace '{self.namespace}'")
        except Exception as e:
            logger.error(
                f"Error closing Redis client: {e}", extra={"namespace": self.namespace, "error": str(e)}, exc_info=True
            )
