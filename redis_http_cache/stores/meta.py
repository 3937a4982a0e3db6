"""
Redis HTTP Cache - Meta Store

Stores, per cache key, the list of (request headers, response headers)
variants the caching framework negotiated for it. The list is opaque here:
it is JSON-encoded on write and decoded on read.

Backend keys are SHA1(cache_key), so full URLs, query strings and very long
keys all map to 40-character keys.

Concurrent writes for the same cache key are last-write-wins. Each write is
a single SET, so the stored value is always one complete list, but there is
no compare-and-swap between a read and the following write.
"""

import json
import logging
from collections.abc import Sequence
from typing import Any

from ..errors import SerializationError
from .base import BackendStore, hexdigest

logger = logging.getLogger(__name__)

Variant = tuple[Any, Any]


class MetaStore(BackendStore):
    """Variant-list storage keyed by hashed cache key."""

    @staticmethod
    def backend_key(cache_key: str) -> str:
        """Return the key used in the backend for cache_key."""
        return hexdigest(cache_key)

    @staticmethod
    def _encode(key: str, variants: Sequence[Variant]) -> bytes:
        try:
            return json.dumps(list(variants), ensure_ascii=False, separators=(",", ":")).encode("utf-8")
        except (TypeError, ValueError) as e:
            raise SerializationError(key, str(e)) from e

    @staticmethod
    def _decode(data: bytes) -> list[Variant]:
        decoded = json.loads(data.decode("utf-8"))
        return [tuple(v) if isinstance(v, list) else v for v in decoded]

    async def read(self, cache_key: str) -> list[Variant]:
        """Return the stored variants, or an empty list if none are stored."""
        key = self.backend_key(cache_key)
        data = await self.backend.get(key)
        if data is None:
            return []

        try:
            return self._decode(data)
        except (ValueError, UnicodeDecodeError, TypeError) as e:
            logger.warning(
                f"Failed to decode variants for cache key, treating as empty: {e}",
                extra={"backend_key": key, "namespace": self.backend.namespace, "error": str(e)},
            )
            return []

    async def write(self, cache_key: str, variants: Sequence[Variant], ttl: int | None = None) -> bool:
        """
        Replace the variants stored for cache_key.

        Args:
            cache_key: Canonical request cache key
            variants: Complete list of (request_headers, response_headers) pairs
            ttl: TTL override in seconds (None = store default)

        Returns:
            True if stored; False if the list could not be encoded or the backend failed
        """
        key = self.backend_key(cache_key)
        try:
            payload = self._encode(key, variants)
        except SerializationError as e:
            logger.error(
                e.message,
                extra={"backend_key": key, "namespace": self.backend.namespace, "error": e.to_dict()},
            )
            return False

        return await self.backend.set(key, payload, ttl=ttl)

    async def purge(self, cache_key: str) -> None:
        """Delete all variants for cache_key; a missing key is not an error."""
        await self.backend.delete(self.backend_key(cache_key))
        return None
