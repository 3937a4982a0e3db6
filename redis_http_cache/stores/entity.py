"""
Redis HTTP Cache - Entity Store

Content-addressed storage for response bodies. A body is buffered in full,
keyed by the SHA-1 hex digest of its bytes and written with a single SET,
so identical bodies always land on the same key and a write either happens
completely or not at all.
"""

import logging
from collections.abc import Iterable, Iterator

from .base import BackendStore, hexdigest

logger = logging.getLogger(__name__)

Chunk = bytes | bytearray | memoryview | str


def _iter_body(body: Iterable[Chunk] | bytes) -> Iterator[bytes]:
    if isinstance(body, (bytes, bytearray, memoryview)):
        yield bytes(body)
        return
    for part in body:
        if isinstance(part, str):
            part = part.encode("utf-8")
        yield bytes(part)


class EntityStore(BackendStore):
    """
    Blob storage keyed by content digest.

    Example:
        store = EntityStore.resolve("redis://127.0.0.1:6379/0/entitystore")
        digest, size = await store.write([b"she rode to the sea;"])
        body = await store.read(digest)
    """

    async def exists(self, digest: str) -> bool:
        """Return True if a body with this digest is stored and not expired."""
        return await self.backend.exists(digest)

    async def read(self, digest: str) -> bytes | None:
        """Return the stored body, or None when missing or expired."""
        return await self.backend.get(digest)

    async def open(self, digest: str) -> Iterator[bytes] | None:
        """
        Return the body as a single-chunk iterator, or None when missing.

        The body is read in full before the iterator is returned.
        """
        data = await self.read(digest)
        if data is None:
            return None
        return iter((data,))

    async def write(self, body: Iterable[Chunk] | bytes, ttl: int = 0) -> tuple[str, int] | None:
        """
        Store a body and return (digest, size).

        Args:
            body: Iterable of byte chunks, consumed exactly once
            ttl: Explicit TTL in seconds; 0 keeps the store's default expiry

        Returns:
            (digest, size) once the backend confirms the write, None if it fails
        """
        buf = bytearray()
        for part in _iter_body(body):
            buf.extend(part)

        data = bytes(buf)
        digest = hexdigest(data)
        size = len(data)

        ok = await self.backend.set(digest, data, ttl=ttl or None)
        if not ok:
            logger.error(
                "Entity write failed for %s",
                digest,
                extra={"digest": digest, "size": size, "namespace": self.backend.namespace},
            )
            return None

        logger.debug("Stored entity %s (%d bytes)", digest, size)
        return digest, size

    async def purge(self, digest: str) -> None:
        """Delete the body; a missing digest is not an error."""
        await self.backend.delete(digest)
        return None
