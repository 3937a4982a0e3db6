"""
Redis HTTP Cache - Configuration Schemas

Typed connection options built from a store URI plus environment overrides.
Options are frozen: a store keeps the namespace and TTL it was built with.
"""

from enum import Enum
from urllib.parse import parse_qs, urlsplit

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_NAMESPACE = "cache"
DEFAULT_EXPIRES_IN = 300


class StoreDriver(str, Enum):
    """Supported key/value transport drivers."""

    REDIS = "redis"  # redis-py with its pure-Python RESP parser
    HIREDIS = "hiredis"  # redis-py with the hiredis C parser
    MEMORY = "memory"  # In-process keyspace, opt-in for tests and local runs


class LogLevel(str, Enum):
    """Log levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class ConnectionOptions(BaseModel):
    """Connection options for one entity or meta store instance."""

    endpoint: str = Field(description="Store URI as given, e.g. redis://host:6379/0/metastore")
    namespace: str = Field(default=DEFAULT_NAMESPACE, min_length=1, description="Key prefix for every entry")
    expires_in: int = Field(default=DEFAULT_EXPIRES_IN, ge=0, description="Default TTL in seconds")
    driver: StoreDriver = Field(default=StoreDriver.REDIS, description="Key/value transport driver")
    db: int = Field(default=0, ge=0, description="Redis logical database")

    # Redis-specific settings (ignored by the memory driver)
    max_connections: int = Field(default=10, ge=1, description="Redis connection pool size")
    socket_timeout: float = Field(default=5.0, gt=0, description="Redis socket timeout in seconds")

    model_config = ConfigDict(frozen=True)

    @property
    def redis_url(self) -> str:
        """Connection URL for the transport, without the namespace segment."""
        parts = urlsplit(self.endpoint)
        url = f"{parts.scheme}://{parts.netloc}/{self.db}"
        if parts.query:
            url = f"{url}?{parts.query}"
        return url

    @property
    def resp_protocol(self) -> int:
        """RESP protocol version requested by the URI query (?protocol=3), else 2."""
        values = parse_qs(urlsplit(self.endpoint).query).get("protocol")
        return 3 if values and values[-1] == "3" else 2
