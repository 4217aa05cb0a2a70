"""
Redis Repository Base Class

Provides atomic JSON operations and distributed locking for the identity
store and the audit trail.
"""

import json
import logging
from contextlib import contextmanager
from typing import Any, Dict, List, Optional

import redis
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import LockError, WatchError

logger = logging.getLogger(__name__)


class RedisRepository:
    """Base Redis repository with atomic operations and distributed locking."""

    def __init__(self, redis_client: redis.Redis, key_prefix: str = ""):
        self.redis = redis_client
        self.key_prefix = key_prefix

    def _make_key(self, key: str) -> str:
        """Create a prefixed key for Redis storage."""
        return f"{self.key_prefix}:{key}" if self.key_prefix else key

    def set_json(self, key: str, data: Dict[str, Any], ttl: Optional[int] = None) -> bool:
        """
        Atomically set JSON data with optional TTL.

        Args:
            key: Redis key
            data: Dictionary to store as JSON
            ttl: Time to live in seconds

        Returns:
            True if successful, False otherwise
        """
        try:
            redis_key = self._make_key(key)
            json_data = json.dumps(data)

            if ttl:
                return bool(self.redis.setex(redis_key, ttl, json_data))
            return bool(self.redis.set(redis_key, json_data))
        except (RedisConnectionError, TypeError) as e:
            logger.error(f"Error setting JSON data for key {key}: {e}")
            return False

    def get_json(self, key: str) -> Optional[Dict[str, Any]]:
        """
        Get JSON data from Redis.

        Args:
            key: Redis key

        Returns:
            Dictionary if found and valid JSON, None otherwise
        """
        try:
            redis_key = self._make_key(key)
            data = self.redis.get(redis_key)

            if data is None:
                return None

            return json.loads(data.decode('utf-8'))
        except (RedisConnectionError, json.JSONDecodeError) as e:
            logger.error(f"Error getting JSON data for key {key}: {e}")
            return None

    def update_json_fields(self, key: str, fields: Dict[str, Any]) -> bool:
        """
        Atomically overwrite top-level fields of a stored JSON object.

        Uses WATCH/MULTI so the read-merge-write is retried if another
        client changes the key in between.

        Args:
            key: Redis key
            fields: Field name to new value mapping

        Returns:
            True if the object existed and was updated, False otherwise
        """
        redis_key = self._make_key(key)
        updated = []

        def merge(pipe: redis.client.Pipeline) -> None:
            raw = pipe.get(redis_key)
            if raw is None:
                return
            document = json.loads(raw.decode('utf-8'))
            document.update(fields)
            pipe.multi()
            pipe.set(redis_key, json.dumps(document))
            updated.append(True)

        try:
            self.redis.transaction(merge, redis_key)
            return bool(updated)
        except (RedisConnectionError, WatchError, TypeError, json.JSONDecodeError) as e:
            logger.error(f"Error updating JSON fields {list(fields)} for key {key}: {e}")
            return False

    def push_json(self, key: str, data: Dict[str, Any], max_length: int = 10000) -> bool:
        """
        Prepend JSON data to a capped list.

        Args:
            key: Redis list key
            data: Dictionary to store as JSON
            max_length: Number of most recent entries kept

        Returns:
            True if successful, False otherwise
        """
        try:
            redis_key = self._make_key(key)
            pipe = self.redis.pipeline()
            pipe.lpush(redis_key, json.dumps(data))
            pipe.ltrim(redis_key, 0, max_length - 1)
            pipe.execute()
            return True
        except (RedisConnectionError, TypeError) as e:
            logger.error(f"Error pushing JSON data to list {key}: {e}")
            return False

    def exists(self, key: str) -> bool:
        """
        Check if a key exists in Redis.

        Connection errors propagate: callers must not read an outage as a
        missing key.

        Raises:
            redis.exceptions.ConnectionError: If Redis is unreachable
        """
        return bool(self.redis.exists(self._make_key(key)))

    def get_keys_by_pattern(self, pattern: str) -> List[str]:
        """
        Get all keys matching a pattern.

        Args:
            pattern: Redis key pattern (supports wildcards)

        Returns:
            List of matching keys (without prefix)
        """
        try:
            redis_pattern = self._make_key(pattern)
            keys = self.redis.scan_iter(match=redis_pattern)

            # Remove prefix from returned keys
            if self.key_prefix:
                prefix_len = len(self.key_prefix) + 1  # +1 for the colon
                return [key.decode('utf-8')[prefix_len:] for key in keys]
            return [key.decode('utf-8') for key in keys]
        except RedisConnectionError as e:
            logger.error(f"Error getting keys by pattern {pattern}: {e}")
            return []

    @contextmanager
    def distributed_lock(self, lock_name: str, timeout: int = 10, blocking_timeout: int = 5):
        """
        Distributed lock context manager using Redis.

        Args:
            lock_name: Name of the lock
            timeout: Lock timeout in seconds
            blocking_timeout: How long to wait for lock acquisition

        Yields:
            Lock object if acquired successfully

        Raises:
            LockError: If lock cannot be acquired
        """
        lock_key = self._make_key(f"lock:{lock_name}")
        lock = self.redis.lock(lock_key, timeout=timeout, blocking_timeout=blocking_timeout)

        if not lock.acquire(blocking=True, blocking_timeout=blocking_timeout):
            raise LockError(f"Could not acquire lock: {lock_name}")
        try:
            yield lock
        finally:
            try:
                lock.release()
            except LockError:
                # Lock may have expired, which is fine
                pass


class RedisConnectionManager:
    """Manages Redis connection with connection pooling."""

    def __init__(self, host: str = 'localhost', port: int = 6379, db: int = 0,
                 max_connections: int = 20, password: Optional[str] = None,
                 decode_responses: bool = False):
        self.connection_pool = redis.ConnectionPool(
            host=host,
            port=port,
            db=db,
            password=password,
            max_connections=max_connections,
            decode_responses=decode_responses,
            retry_on_timeout=True,
            socket_keepalive=True,
            socket_keepalive_options={}
        )
        self._client = None

    @property
    def client(self) -> redis.Redis:
        """Get Redis client instance with connection pooling."""
        if self._client is None:
            self._client = redis.Redis(connection_pool=self.connection_pool)
        return self._client

    def health_check(self) -> bool:
        """Check if Redis connection is healthy."""
        try:
            return bool(self.client.ping())
        except RedisConnectionError:
            return False

    def close(self):
        """Close the connection pool."""
        if self.connection_pool:
            self.connection_pool.disconnect()
