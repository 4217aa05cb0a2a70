"""Infrastructure layer for Redis and the local object store."""

from .local_object_storage import LocalObjectStorage
from .redis_principal_repository import RedisPrincipalRepository
from .redis_repository import RedisConnectionManager, RedisRepository

__all__ = [
    "RedisRepository",
    "RedisConnectionManager",
    "RedisPrincipalRepository",
    "LocalObjectStorage",
]
