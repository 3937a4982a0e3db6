"""
Redis HTTP Cache - Backend Factory Tests

Tests driver selection, the driver registry and shared memory keyspaces.
"""

from typing import Any

import pytest

from redis_http_cache.backends import KeyValueBackend, MemoryBackend, create_backend, register_backend
from redis_http_cache.backends import factory as factory_module
from redis_http_cache.config import ConnectionOptions, StoreDriver, build_options
from redis_http_cache.errors import ConfigurationError
from redis_http_cache.stores import EntityStore


class TestCreateBackend:
    """Test suite for create_backend()."""

    def test_redis_is_default(self) -> None:
        """Test that the default driver builds a RedisBackend without connecting."""
        from redis_http_cache.backends.redis import RedisBackend

        backend = create_backend(build_options("redis://127.0.0.1:6379/0/entitystore"))

        assert isinstance(backend, RedisBackend)
        assert not isinstance(backend, MemoryBackend)
        assert backend.namespace == "entitystore"
        assert backend.default_ttl == 300

    def test_memory_is_opt_in(self, memory_driver: None) -> None:
        """Test that RHC_DRIVER=memory builds an in-process backend."""
        backend = create_backend(build_options("redis://127.0.0.1:6380/0/entitystore"))

        assert isinstance(backend, MemoryBackend)
        assert backend.namespace == "entitystore"

    def test_options_flow_into_backend(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that TTL overrides reach the backend."""
        monkeypatch.setenv("RHC_EXPIRES_IN", "60")

        backend = create_backend(build_options("redis://127.0.0.1:6380/0/metastore"))
        assert backend.default_ttl == 60

    async def test_same_endpoint_shares_keyspace(self, memory_driver: None) -> None:
        """Test that backends on one endpoint see one keyspace."""
        first = create_backend(build_options("redis://127.0.0.1:6380/0/shared"))
        second = create_backend(build_options("redis://127.0.0.1:6380/0/shared"))

        await first.set("key", b"value")
        assert await second.get("key") == b"value"

    async def test_different_db_is_separate(self, memory_driver: None) -> None:
        """Test that another database selector gets its own keyspace."""
        db0 = create_backend(build_options("redis://127.0.0.1:6380/0/shared"))
        db1 = create_backend(build_options("redis://127.0.0.1:6380/1/shared"))

        await db0.set("key", b"value")
        assert await db1.get("key") is None

    def test_redis_driver(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that the redis driver builds a RedisBackend without connecting."""
        from redis_http_cache.backends.redis import RedisBackend

        monkeypatch.setenv("RHC_DRIVER", "redis")
        backend = create_backend(build_options("redis://127.0.0.1:6380/0/entitystore"))

        assert isinstance(backend, RedisBackend)
        assert backend.namespace == "entitystore"

    def test_hiredis_driver_requires_hiredis(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that the hiredis driver fails fast without hiredis."""
        monkeypatch.setattr("redis.utils.HIREDIS_AVAILABLE", False)
        options = ConnectionOptions(endpoint="redis://127.0.0.1", driver=StoreDriver.HIREDIS)

        with pytest.raises(ConfigurationError, match="hiredis"):
            create_backend(options)

    def test_register_backend(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test replacing the factory for a driver."""
        monkeypatch.setattr(factory_module, "_backend_factories", dict(factory_module._backend_factories))
        sentinel = MemoryBackend(namespace="custom")

        def build(options: ConnectionOptions) -> KeyValueBackend:
            return sentinel

        register_backend(StoreDriver.REDIS, build)
        options = ConnectionOptions(endpoint="redis://127.0.0.1", driver=StoreDriver.REDIS)

        assert create_backend(options) is sentinel

    def test_unregistered_driver(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that a driver without a factory is a configuration error."""
        monkeypatch.setattr(factory_module, "_backend_factories", {})

        with pytest.raises(ConfigurationError, match="Unknown store driver"):
            create_backend(build_options("redis://127.0.0.1"))


class TestResponseParser:
    """Test suite for the RESP parser each Redis driver installs."""

    @staticmethod
    def _connection(backend: KeyValueBackend) -> Any:
        pool = backend._client.connection_pool  # type: ignore[attr-defined]
        return pool.connection_class(**pool.connection_kwargs)

    def test_redis_driver_uses_pure_python_parser(self) -> None:
        """Test that the redis driver never picks hiredis, installed or not."""
        from redis._parsers import _AsyncHiredisParser, _AsyncRESP2Parser

        backend = create_backend(build_options("redis://127.0.0.1:6379/0/entitystore"))
        connection = self._connection(backend)

        assert isinstance(connection._parser, _AsyncRESP2Parser)
        assert not isinstance(connection._parser, _AsyncHiredisParser)

    def test_redis_driver_resp3_parser(self) -> None:
        """Test that ?protocol=3 selects the RESP3 parser."""
        from redis._parsers import _AsyncRESP3Parser

        backend = create_backend(build_options("redis://127.0.0.1:6379/0/entitystore?protocol=3"))

        assert isinstance(self._connection(backend)._parser, _AsyncRESP3Parser)

    def test_hiredis_driver_uses_hiredis_parser(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that the hiredis driver installs the hiredis parser."""
        from redis._parsers import _AsyncHiredisParser
        from redis.utils import HIREDIS_AVAILABLE

        if not HIREDIS_AVAILABLE:
            pytest.skip("hiredis not installed")

        monkeypatch.setenv("RHC_DRIVER", "hiredis")
        backend = create_backend(build_options("redis://127.0.0.1:6379/0/entitystore"))

        assert isinstance(self._connection(backend)._parser, _AsyncHiredisParser)


class TestDefaultDriverStores:
    """Test suite for stores resolved on the default driver."""

    async def test_resolve_uses_redis_transport(self) -> None:
        """Test that a bare resolve() talks to Redis, not an in-process keyspace."""
        from redis_http_cache.backends.redis import RedisBackend

        store = EntityStore.resolve("redis://127.0.0.1:6379/0/entitystore")
        try:
            assert isinstance(store.backend, RedisBackend)
            assert not isinstance(store.backend, MemoryBackend)
        finally:
            await store.close()

    async def test_entity_write_reports_failure(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that a write to an unreachable endpoint returns None."""
        monkeypatch.setenv("RHC_SOCKET_TIMEOUT", "1")
        store = EntityStore.resolve("redis://127.0.0.1:1/0/entitystore")

        try:
            assert await store.write([b"she rode to the sea;"]) is None
            assert await store.read("90a4c84d51a277f3dafc34693ca264531b9f51b6") is None
        finally:
            await store.close()
