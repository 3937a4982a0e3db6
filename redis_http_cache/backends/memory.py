"""
Redis HTTP Cache - Memory Backend

Portable in-process key/value backend with lazy TTL expiry.

Backends that share a keyspace behave like clients of one Redis server:
entries are separated only by their namespace prefix.
"""

import asyncio
import logging
import time
from typing import Any

from .interface import KeyValueBackend

logger = logging.getLogger(__name__)

# Keyspace storage: namespaced key -> (value, expiry_time)
Keyspace = dict[str, tuple[bytes, float | None]]


class MemoryBackend(KeyValueBackend):
    """
    In-memory key/value backend.

    Features:
    - Per-key TTL with lazy expiry on access
    - Optional shared keyspace across backend instances
    - Namespace-scoped clear()
    """

    def __init__(
        self,
        namespace: str = "cache",
        default_ttl: int = 300,
        keyspace: Keyspace | None = None,
    ):
        """
        Initialize memory backend.

        Args:
            namespace: Key prefix
            default_ttl: Default TTL in seconds (0 = no expiry)
            keyspace: Dict shared with other backends on the same endpoint
        """
        self.namespace = namespace
        self.default_ttl = default_ttl
        self._data: Keyspace = keyspace if keyspace is not None else {}

        self._hits = 0
        self._misses = 0
        self._sets = 0
        self._deletes = 0

        self._lock = asyncio.Lock()

    @staticmethod
    def _is_expired(expiry: float | None) -> bool:
        if expiry is None:
            return False
        return time.time() > expiry

    def _live_entry(self, ns_key: str) -> bytes | None:
        """Return the stored value, dropping it first if it has expired."""
        entry = self._data.get(ns_key)
        if entry is None:
            return None
        value, expiry = entry
        if self._is_expired(expiry):
            del self._data[ns_key]
            return None
        return value

    async def get(self, key: str) -> bytes | None:
        """Retrieve value from the keyspace."""
        async with self._lock:
            value = self._live_entry(self._make_key(key))
            if value is None:
                self._misses += 1
                return None
            self._hits += 1
            return value

    async def set(self, key: str, value: bytes, ttl: int | None = None) -> bool:
        """Store value in the keyspace."""
        ex = self._ttl_seconds(ttl)
        expiry = time.time() + ex if ex else None

        async with self._lock:
            self._data[self._make_key(key)] = (bytes(value), expiry)
            self._sets += 1
        return True

    async def delete(self, key: str) -> bool:
        """Delete key from the keyspace."""
        async with self._lock:
            ns_key = self._make_key(key)
            if self._live_entry(ns_key) is None:
                return False
            del self._data[ns_key]
            self._deletes += 1
            return True

    async def exists(self, key: str) -> bool:
        """Check if key exists and is not expired."""
        async with self._lock:
            return self._live_entry(self._make_key(key)) is not None

    async def clear(self) -> bool:
        """Remove every entry under this namespace."""
        prefix = f"{self.namespace}:"
        async with self._lock:
            doomed = [k for k in self._data if k.startswith(prefix)]
            for k in doomed:
                del self._data[k]
            self._deletes += len(doomed)
        logger.info(f"Cleared {len(doomed)} keys from memory namespace '{self.namespace}'")
        return True

    async def get_stats(self) -> dict[str, Any]:
        """Get backend statistics."""
        async with self._lock:
            total_requests = self._hits + self._misses
            hit_rate = (self._hits / total_requests * 100) if total_requests > 0 else 0.0
            prefix = f"{self.namespace}:"

            return {
                "backend": "memory",
                "namespace": self.namespace,
                "default_ttl": self.default_ttl,
                "size": sum(1 for k in self._data if k.startswith(prefix)),
                "hits": self._hits,
                "misses": self._misses,
                "hit_rate": round(hit_rate, 2),
                "sets": self._sets,
                "deletes": self._deletes,
            }

    async def close(self) -> None:
        """Memory backend holds no connections; data stays in the shared keyspace."""
        logger.debug(f"Memory backend closed for namespace '{self.namespace}'")
