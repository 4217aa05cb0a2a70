"""
File Storage Domain

Handles the per-principal file ledger, quotas and the object storage contract.
"""

from .entities import FileRecord
from .quota import QuotaLedger, QuotaPolicy
from .storage_repository import IObjectStorage, ObjectDeletionError
from .value_objects import (
    FileName,
    ObjectMeta,
    UploadedContent,
    user_object_path,
    user_prefix,
)

__all__ = [
    "FileName",
    "FileRecord",
    "IObjectStorage",
    "ObjectDeletionError",
    "ObjectMeta",
    "QuotaLedger",
    "QuotaPolicy",
    "UploadedContent",
    "user_object_path",
    "user_prefix",
]
