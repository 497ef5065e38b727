"""Integration test fixtures.

Provides fixtures for integration testing with real Redis and PostgreSQL
via testcontainers.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any
from unittest.mock import MagicMock, patch

import pytest
from redis.asyncio import Redis
from testcontainers.postgres import PostgresContainer
from testcontainers.redis import RedisContainer

import app.database.connection as db_module
from app.database.connection import close_database_pool, init_database_pool


if TYPE_CHECKING:
    from collections.abc import AsyncGenerator, Generator

    from asyncpg import Pool


pytestmark = pytest.mark.integration


@pytest.fixture(scope="session")
def redis_container() -> Generator[RedisContainer]:
    """Start a Redis container for the test session."""
    with RedisContainer("redis:7-alpine") as redis:
        yield redis


@pytest.fixture(scope="session")
def redis_url(redis_container: RedisContainer) -> str:
    """Get the Redis URL from the container."""
    host = redis_container.get_container_host_ip()
    port = redis_container.get_exposed_port(6379)
    return f"redis://{host}:{port}"


@pytest.fixture
async def redis_client(redis_url: str) -> AsyncGenerator[Redis[Any]]:
    """Real Redis client with decoded responses, flushed after each test."""
    client: Redis[Any] = Redis.from_url(redis_url, decode_responses=True)
    try:
        yield client
    finally:
        await client.flushdb()
        await client.aclose()


@pytest.fixture(scope="session")
def postgres_container() -> Generator[PostgresContainer]:
    """Start a PostgreSQL container for the test session."""
    with PostgresContainer("postgres:16-alpine") as postgres:
        yield postgres


@pytest.fixture(scope="session")
def postgres_config(postgres_container: PostgresContainer) -> dict[str, str | int]:
    """Get PostgreSQL connection config from container."""
    return {
        "host": postgres_container.get_container_host_ip(),
        "port": int(postgres_container.get_exposed_port(5432)),
        "user": "test",
        "password": "test",
        "database": "test",
    }


@pytest.fixture
async def db_pool(postgres_config: dict[str, str | int]) -> AsyncGenerator[Pool]:
    """Initialize the global database pool against the container."""
    mock_settings = MagicMock()
    mock_settings.app.name = "recipe-view-ranking-tests"
    mock_settings.database.host = postgres_config["host"]
    mock_settings.database.port = postgres_config["port"]
    mock_settings.database.name = postgres_config["database"]
    mock_settings.database.user = postgres_config["user"]
    mock_settings.database.min_pool_size = 1
    mock_settings.database.max_pool_size = 5
    mock_settings.database.command_timeout = 30.0
    mock_settings.database.ssl = False
    mock_settings.DATABASE_PASSWORD = postgres_config["password"]

    with patch("app.database.connection.get_settings", return_value=mock_settings):
        await init_database_pool()
        pool = db_module._pool
        assert pool is not None

        yield pool

        await close_database_pool()
