"""
Redis HTTP Cache - Key/Value Backend Interface

Defines the abstract interface the entity and meta stores talk to.
Values are raw bytes; encoding is the stores' concern.
"""

from abc import ABC, abstractmethod
from typing import Any


class KeyValueBackend(ABC):
    """
    Abstract base class for key/value backends.

    Implementations prefix every key with their namespace and apply a
    default TTL to writes that do not carry one.
    """

    namespace: str
    default_ttl: int

    def _make_key(self, key: str) -> str:
        """Create namespaced key."""
        return f"{self.namespace}:{key}"

    def _ttl_seconds(self, ttl: int | None) -> int | None:
        """
        Normalize TTL:
        - None -> default_ttl
        - 0 or negative -> no expiry (return None)
        - positive -> provided ttl
        """
        if ttl is None:
            ttl = self.default_ttl
        ttl = int(ttl)
        return ttl if ttl > 0 else None

    @abstractmethod
    async def get(self, key: str) -> bytes | None:
        """
        Retrieve a value.

        Args:
            key: Un-namespaced key

        Returns:
            Stored bytes if found and not expired, None otherwise
        """
        pass

    @abstractmethod
    async def set(self, key: str, value: bytes, ttl: int | None = None) -> bool:
        """
        Store a value, replacing any previous one.

        Args:
            key: Un-namespaced key
            value: Bytes to store
            ttl: Time-to-live in seconds (None = use default, 0 = no expiry)

        Returns:
            True if the backend confirmed the write, False otherwise
        """
        pass

    @abstractmethod
    async def delete(self, key: str) -> bool:
        """
        Delete a key.

        Returns:
            True if key was deleted, False if it didn't exist or the call failed
        """
        pass

    @abstractmethod
    async def exists(self, key: str) -> bool:
        """Check if a key exists and is not expired."""
        pass

    @abstractmethod
    async def clear(self) -> bool:
        """Remove every key under this backend's namespace."""
        pass

    @abstractmethod
    async def get_stats(self) -> dict[str, Any]:
        """Return hit/miss/set/delete counters and backend details."""
        pass

    @abstractmethod
    async def close(self) -> None:
        """Release connections held by the backend."""
        pass
