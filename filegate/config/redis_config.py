"""
Redis Configuration

Settings for the Redis instance that holds the identity store and the
audit trail, and the factory that builds both on one connection pool.
"""

import os
from dataclasses import dataclass
from typing import Optional

import redis

from filegate.infrastructure.event_handlers import AuditTrailHandler
from filegate.infrastructure.redis_principal_repository import RedisPrincipalRepository
from filegate.infrastructure.redis_repository import RedisConnectionManager, RedisRepository


class RedisConfig:
    """
    Redis settings read from the environment.

    ``REDIS_URL`` (redis://[:password@]host:port/db) takes precedence over
    the individual host, port, db and password variables.
    """

    def __init__(self):
        url = os.getenv("REDIS_URL")
        params = redis.connection.parse_url(url) if url else {}

        self.host = params.get("host", os.getenv("REDIS_HOST", "localhost"))
        self.port = int(params.get("port", os.getenv("REDIS_PORT", 6379)))
        self.db = int(params.get("db", os.getenv("REDIS_DB", 0)))
        self.password = params.get("password", os.getenv("REDIS_PASSWORD"))
        self.max_connections = int(os.getenv("REDIS_MAX_CONNECTIONS", 20))

        # Principal documents are shared with the identity system
        self.key_prefix = os.getenv("REDIS_KEY_PREFIX", "")
        self.ledger_lock_timeout = int(os.getenv("LEDGER_LOCK_TIMEOUT", 30))
        self.ledger_lock_wait = int(os.getenv("LEDGER_LOCK_WAIT", 10))
        self.audit_key = os.getenv("AUDIT_LIST_KEY", "oplog")
        self.audit_max_length = int(os.getenv("AUDIT_MAX_LENGTH", 10000))


@dataclass
class RedisStores:
    """Redis-backed stores the services are wired to."""
    repository: RedisRepository
    principals: RedisPrincipalRepository
    audit: AuditTrailHandler


_manager: Optional[RedisConnectionManager] = None


def connect_stores(config: Optional[RedisConfig] = None) -> RedisStores:
    """
    Open the connection pool and build the identity store and audit trail on it.

    The pool is kept for redis_health_check(). Nothing is sent to Redis
    until the first command, so this succeeds while Redis is down.

    Args:
        config: Redis settings, read from the environment if None

    Returns:
        RedisStores sharing one RedisRepository
    """
    global _manager

    config = config or RedisConfig()
    _manager = RedisConnectionManager(
        host=config.host,
        port=config.port,
        db=config.db,
        max_connections=config.max_connections,
        password=config.password or None,
    )

    repository = RedisRepository(_manager.client, config.key_prefix)
    return RedisStores(
        repository=repository,
        principals=RedisPrincipalRepository(
            repository,
            lock_timeout=config.ledger_lock_timeout,
            lock_wait=config.ledger_lock_wait,
        ),
        audit=AuditTrailHandler(
            repository, key=config.audit_key, max_length=config.audit_max_length
        ),
    )


def redis_health_check() -> bool:
    """Ping Redis through the pool opened by connect_stores()."""
    return _manager is not None and _manager.health_check()
