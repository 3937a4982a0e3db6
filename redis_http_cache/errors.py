"""
Redis HTTP Cache - Core Error Types

Defines the exception hierarchy for the entity and meta stores.
All exceptions inherit from RedisHttpCacheError for consistent error handling.

Only configuration problems are raised to callers. Backend and codec failures
are logged and reported as failure results by the stores.
"""

from typing import Any


class RedisHttpCacheError(Exception):
    """Base exception for all redis-http-cache errors."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for structured logging."""
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
        }


class ConfigurationError(RedisHttpCacheError):
    """Raised when store configuration is invalid or missing."""

    pass


class MalformedURIError(ConfigurationError):
    """Raised when a store URI cannot be parsed."""

    def __init__(self, uri: str, reason: str):
        message = f"Malformed store URI '{uri}': {reason}"
        super().__init__(message, {"uri": uri, "reason": reason})
        self.uri = uri
        self.reason = reason


class CacheError(RedisHttpCacheError):
    """Base exception for key/value backend errors."""

    pass


class SerializationError(CacheError):
    """Raised when a value cannot be encoded for or decoded from the backend."""

    def __init__(self, key: str, reason: str):
        message = f"Failed to serialize value for key '{key}': {reason}"
        super().__init__(message, {"key": key, "reason": reason})
