"""
File Storage Entities

Domain entities for the per-principal file ledger.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from .value_objects import ObjectMeta


@dataclass
class FileRecord:
    """
    Ledger entry describing one stored object owned by a principal.

    The record mirrors the metadata reported by the storage engine at
    upload time; it is never refreshed afterwards.
    """
    name: str
    size: int
    last_modified: Optional[datetime] = None
    etag: Optional[str] = None

    @classmethod
    def from_meta(cls, name: str, meta: ObjectMeta) -> 'FileRecord':
        """
        Create a record from storage metadata.

        Args:
            name: File name within the principal's namespace
            meta: Metadata returned by the storage engine

        Returns:
            New FileRecord instance
        """
        return cls(
            name=name,
            size=meta.size,
            last_modified=meta.last_modified,
            etag=meta.etag,
        )

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "_id": self.name,
            "name": self.name,
            "size": self.size,
            "lastModified": self.last_modified.isoformat() if self.last_modified else None,
            "etag": self.etag,
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'FileRecord':
        """Create FileRecord from dictionary."""
        last_modified = data.get("lastModified")
        return cls(
            name=data.get("name") or data["_id"],
            size=int(data.get("size") or 0),
            last_modified=datetime.fromisoformat(last_modified) if last_modified else None,
            etag=data.get("etag"),
        )
