"""
Audit Trail Event Handler

Appends every domain event to a capped Redis list so operators can
review who uploaded, deleted or fetched what.
"""

import logging

from filegate.domain.events import DomainEvent

logger = logging.getLogger(__name__)


class AuditTrailHandler:
    """Records domain events in the Redis-backed audit trail."""

    def __init__(self, redis_repository, key: str = "oplog", max_length: int = 10000):
        self.redis_repo = redis_repository
        self.key = key
        self.max_length = max_length

    def handle(self, event: DomainEvent) -> None:
        entry = {"type": event.audit_type}
        entry.update(event.to_dict())

        if not self.redis_repo.push_json(self.key, entry, max_length=self.max_length):
            logger.warning(
                f"Audit entry dropped: type={event.audit_type}, "
                f"aggregate_id={event.aggregate_id}"
            )
