"""
Identity Entities

Principals as seen by the file subsystem.
"""

from dataclasses import dataclass, field
from typing import List

from filegate.domain.file_storage.entities import FileRecord

from .value_objects import Privilege

ANONYMOUS_ID = 0


@dataclass
class Principal:
    """
    An authenticated identity with privileges and a file ledger.

    The identity store owns the record; the file workflows only read it
    and overwrite the ``_files`` field as a whole.
    """
    id: int
    uname: str = ""
    priv: Privilege = Privilege.NONE
    files: List[FileRecord] = field(default_factory=list)

    @classmethod
    def anonymous(cls) -> 'Principal':
        """Principal used for requests that carry no identity."""
        return cls(id=ANONYMOUS_ID, uname="Guest")

    @property
    def is_anonymous(self) -> bool:
        return self.id == ANONYMOUS_ID

    def has_priv(self, priv: Privilege) -> bool:
        """Check whether every bit of ``priv`` is granted."""
        return (self.priv & priv) == priv

    def find_file(self, name: str):
        for record in self.files:
            if record.name == name:
                return record
        return None

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "_id": self.id,
            "uname": self.uname,
            "priv": int(self.priv),
            "_files": [record.to_dict() for record in self.files],
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'Principal':
        """Create Principal from dictionary."""
        return cls(
            id=int(data["_id"]),
            uname=data.get("uname", ""),
            priv=Privilege(int(data.get("priv", 0))),
            files=[FileRecord.from_dict(item) for item in data.get("_files") or []],
        )
