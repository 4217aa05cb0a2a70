"""
Redis Principal Repository Implementation

Concrete Redis-based implementation of the PrincipalRepository interface.
Principals are stored as JSON documents under ``principal:<id>``.
"""

import logging
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional

from redis.exceptions import ConnectionError as RedisConnectionError

from filegate.domain.identity import Principal, PrincipalRepository, PrincipalStoreError

logger = logging.getLogger(__name__)


class RedisPrincipalRepository(PrincipalRepository):
    """
    Redis-based implementation of PrincipalRepository.

    The realm argument is accepted for interface compatibility; privileges
    are system-wide, so every realm resolves to the same document.
    """

    def __init__(self, redis_repository, lock_timeout: int = 30, lock_wait: int = 10):
        """
        Initialize with Redis repository.

        Args:
            redis_repository: RedisRepository instance from infrastructure layer
            lock_timeout: Seconds before a ledger lock expires on its own
            lock_wait: Seconds to wait for a ledger lock
        """
        self.redis_repo = redis_repository
        self.key_prefix = "principal"
        self.lock_timeout = lock_timeout
        self.lock_wait = lock_wait

    def _key(self, principal_id: int) -> str:
        return f"{self.key_prefix}:{int(principal_id)}"

    def save(self, principal: Principal) -> bool:
        """Store a whole principal document, replacing any existing one."""
        return self.redis_repo.set_json(self._key(principal.id), principal.to_dict())

    def get_by_id(self, realm: str, principal_id: int) -> Optional[Principal]:
        data = self.redis_repo.get_json(self._key(principal_id))
        if data is None:
            return None

        try:
            return Principal.from_dict(data)
        except (KeyError, TypeError, ValueError) as e:
            logger.error(f"Error deserializing principal {principal_id} in realm {realm}: {e}")
            return None

    def set_by_id(self, principal_id: int, update: Dict[str, Any]) -> bool:
        return self.redis_repo.update_json_fields(self._key(principal_id), update)

    def exists(self, principal_id: int) -> bool:
        try:
            return self.redis_repo.exists(self._key(principal_id))
        except RedisConnectionError as e:
            raise PrincipalStoreError(
                f"Identity store unreachable checking principal {principal_id}: {e}"
            ) from e

    def list_ids(self) -> List[int]:
        ids = []
        for key in self.redis_repo.get_keys_by_pattern(f"{self.key_prefix}:*"):
            suffix = key[len(self.key_prefix) + 1:]
            if suffix.isdigit():
                ids.append(int(suffix))
        return sorted(ids)

    @contextmanager
    def serialized(self, principal_id: int) -> Iterator[None]:
        with self.redis_repo.distributed_lock(
            self._key(principal_id),
            timeout=self.lock_timeout,
            blocking_timeout=self.lock_wait,
        ):
            yield
