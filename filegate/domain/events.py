"""
Domain Events

Immutable records of significant state changes in the domain.
Events decouple side effects (logging, audit trail) from core business logic.
"""

from abc import ABC
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Tuple


@dataclass(frozen=True)
class DomainEvent(ABC):
    """
    Base class for all domain events.

    Attributes:
        aggregate_id: ID of the principal whose ledger or files are concerned
        occurred_at: Timestamp when the event occurred
    """
    aggregate_id: str
    occurred_at: datetime

    # Operation name recorded in the audit trail
    audit_type = "event"

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert event to dictionary for serialization.

        Returns:
            Dictionary representation of the event
        """
        return {
            "event_type": self.__class__.__name__,
            "aggregate_id": self.aggregate_id,
            "occurred_at": self.occurred_at.isoformat(),
        }


@dataclass(frozen=True)
class FileUploadedEvent(DomainEvent):
    """
    Event emitted when an upload has been stored and recorded.

    Attributes:
        aggregate_id: Owner principal ID
        target: Storage path of the new object
        filename: Ledger name of the file
        size: Object size in bytes
    """
    target: str
    filename: str
    size: int

    audit_type = "file.upload"

    def to_dict(self) -> Dict[str, Any]:
        base_dict = super().to_dict()
        base_dict.update({
            "target": self.target,
            "filename": self.filename,
            "size": self.size,
        })
        return base_dict


@dataclass(frozen=True)
class FilesDeletedEvent(DomainEvent):
    """
    Event emitted when files were removed from a principal's ledger.

    Attributes:
        aggregate_id: Owner principal ID
        filenames: Names removed from the ledger
    """
    filenames: Tuple[str, ...] = field(default_factory=tuple)

    audit_type = "file.delete"

    def to_dict(self) -> Dict[str, Any]:
        base_dict = super().to_dict()
        base_dict["filenames"] = list(self.filenames)
        return base_dict


@dataclass(frozen=True)
class ObjectDeletionFailedEvent(DomainEvent):
    """
    Event emitted when the storage engine failed to delete objects whose
    ledger entries were already removed.

    Attributes:
        aggregate_id: Owner principal ID
        paths: Storage paths possibly left behind
        error_message: Storage error description
    """
    paths: Tuple[str, ...] = field(default_factory=tuple)
    error_message: str = ""

    audit_type = "file.delete.orphaned"

    def to_dict(self) -> Dict[str, Any]:
        base_dict = super().to_dict()
        base_dict.update({
            "paths": list(self.paths),
            "error_message": self.error_message,
        })
        return base_dict


@dataclass(frozen=True)
class FileDownloadAuthorizedEvent(DomainEvent):
    """
    Event emitted when a download link for a principal's file is issued.

    Attributes:
        aggregate_id: Owner principal ID
        requester_id: Principal the link was issued to
        target: Storage path of the object
        size: Object size in bytes (0 if unknown)
    """
    requester_id: int
    target: str
    size: int

    audit_type = "download.file.user"

    def to_dict(self) -> Dict[str, Any]:
        base_dict = super().to_dict()
        base_dict.update({
            "requester_id": self.requester_id,
            "target": self.target,
            "size": self.size,
        })
        return base_dict
