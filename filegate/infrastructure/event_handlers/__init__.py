"""Infrastructure handlers subscribed to domain events."""

from .audit_handler import AuditTrailHandler
from .logging_handler import LoggingEventHandler

__all__ = ["AuditTrailHandler", "LoggingEventHandler"]
