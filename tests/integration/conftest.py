import os

import pytest
import redis

from filegate.infrastructure import RedisPrincipalRepository, RedisRepository


@pytest.fixture
def redis_client():
    """
    Yields a clean Redis client for integration testing.

    Uses a dedicated database so the flush does not touch application data.
    """
    host = os.getenv("REDIS_HOST", "localhost")
    port = int(os.getenv("REDIS_PORT", 6379))
    db = int(os.getenv("REDIS_TEST_DB", 15))

    client = redis.Redis(host=host, port=port, db=db, decode_responses=False)

    try:
        client.ping()
    except redis.ConnectionError:
        pytest.skip("Redis service not available. Skipping integration tests.")

    client.flushdb()

    yield client

    client.flushdb()
    client.close()


@pytest.fixture
def redis_repository(redis_client):
    return RedisRepository(redis_client, key_prefix="test")


@pytest.fixture
def principal_repository(redis_repository):
    return RedisPrincipalRepository(redis_repository, lock_timeout=5, lock_wait=5)
