"""
Redis HTTP Cache - Store Base

Shared construction for the entity and meta stores: both resolve a URI into
ConnectionOptions and talk to one key/value backend for their lifetime.
"""

import hashlib
import logging
from typing import TypeVar

from ..backends import KeyValueBackend, create_backend
from ..config import ConnectionOptions, build_options

logger = logging.getLogger(__name__)

StoreT = TypeVar("StoreT", bound="BackendStore")


def hexdigest(data: bytes | str) -> str:
    """Return the lowercase 40-character SHA-1 hex digest of data."""
    if isinstance(data, str):
        data = data.encode("utf-8")
    return hashlib.sha1(data).hexdigest()


class BackendStore:
    """Base class for stores backed by a KeyValueBackend."""

    def __init__(
        self,
        options: ConnectionOptions | None = None,
        backend: KeyValueBackend | None = None,
    ):
        """
        Args:
            options: Connection options; a backend is created from them
            backend: Existing backend to use instead (options are then optional)
        """
        if backend is None:
            if options is None:
                raise ValueError("options or backend is required")
            backend = create_backend(options)

        self.options = options
        self.backend = backend

    @classmethod
    def resolve(cls: type[StoreT], uri: str) -> StoreT:
        """Build a store for uri through the connection option builder."""
        return cls(build_options(str(uri)))

    async def close(self) -> None:
        """Release the backend connection."""
        await self.backend.close()

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(namespace={self.backend.namespace!r})"
