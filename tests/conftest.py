"""
Redis HTTP Cache - Test Configuration and Shared Fixtures

Provides pytest configuration and shared fixtures for unit and integration tests.
"""

import os
from collections.abc import AsyncGenerator, Generator

import pytest
from redis.asyncio import Redis

ENV_VARS = ("RHC_DRIVER", "RHC_EXPIRES_IN", "RHC_MAX_CONNECTIONS", "RHC_SOCKET_TIMEOUT")


# Redis availability checker
def is_redis_available() -> bool:
    """Check if Redis server is available for testing."""
    import socket

    try:
        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        sock.settimeout(1)
        result = sock.connect_ex(("localhost", 6379))
        sock.close()
        return result == 0
    except Exception:
        return False


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Start every test without store overrides in the environment."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture(autouse=True)
def reset_backend_factory() -> Generator[None, None, None]:
    """Drop shared in-process keyspaces after each test to prevent state leakage."""
    yield
    from redis_http_cache.backends.factory import reset_backend_factory

    reset_backend_factory()


@pytest.fixture
def test_redis_url() -> str:
    """Get Redis URL for testing (database 15 for isolation)."""
    return os.environ.get("TEST_REDIS_URL", "redis://localhost:6379/15")


@pytest.fixture
async def redis_client(test_redis_url: str) -> AsyncGenerator[Redis, None]:
    """
    Create a Redis client for testing.

    Automatically skips tests if Redis is not available.
    Clears the test database before and after each test.
    """
    client: Redis = Redis.from_url(test_redis_url, decode_responses=False)

    try:
        await client.ping()
    except Exception as e:
        await client.aclose()
        pytest.skip(f"Redis not available for testing: {e}")

    await client.flushdb()

    yield client

    try:
        await client.flushdb()
    finally:
        await client.aclose()


@pytest.fixture
def mock_env_redis(monkeypatch: pytest.MonkeyPatch) -> None:
    """Select the Redis driver for stores resolved during the test."""
    if not is_redis_available():
        pytest.skip("Redis not available")
    monkeypatch.setenv("RHC_DRIVER", "redis")
    monkeypatch.setenv("RHC_SOCKET_TIMEOUT", "2")


@pytest.fixture
def memory_driver(clean_env: None, monkeypatch: pytest.MonkeyPatch) -> None:
    """Select the in-process driver for stores resolved during the test."""
    monkeypatch.setenv("RHC_DRIVER", "memory")


@pytest.fixture
def memory_uri() -> str:
    """Store URI used together with the memory_driver fixture."""
    return "redis://127.0.0.1:6380/0"
