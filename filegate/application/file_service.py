"""
File Service

Application service orchestrating the quota-enforced upload and delete
workflows on a principal's file ledger.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable, Iterator, List, Optional

from filegate.domain.access import SYSTEM_REALM
from filegate.domain.errors import (
    ConflictError,
    DomainError,
    ErrorCategory,
    ForbiddenError,
    UploadFailedError,
    ValidationError,
)
from filegate.domain.events import (
    FilesDeletedEvent,
    FileUploadedEvent,
    ObjectDeletionFailedEvent,
)
from filegate.domain.file_storage import (
    FileName,
    FileRecord,
    IObjectStorage,
    ObjectDeletionError,
    QuotaLedger,
    UploadedContent,
    user_object_path,
)
from filegate.domain.identity import Principal, PrincipalRepository, Privilege

from .event_publisher import EventPublisher

logger = logging.getLogger(__name__)

CONSISTENCY_OVERWRITE = "overwrite"
CONSISTENCY_SERIALIZED = "serialized"


@dataclass
class DeleteResult:
    """
    Outcome of a bulk delete.

    Attributes:
        deleted: Names removed from the ledger
        orphaned: Storage paths the engine failed to delete
    """
    deleted: List[str] = field(default_factory=list)
    orphaned: List[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {"deleted": self.deleted, "orphaned": self.orphaned}


class FileService:
    """
    Application service for a principal's stored files.

    Upload and delete both overwrite the principal's whole ``_files``
    collection. With ``consistency="overwrite"`` the collection read at
    the start of the request is used, so two concurrent mutations for the
    same principal may lose an update. With ``consistency="serialized"``
    the read-compute-write runs inside the identity store's per-principal
    serialisation point on a freshly read collection.
    """

    def __init__(
        self,
        principal_repository: PrincipalRepository,
        storage: IObjectStorage,
        quota_ledger: QuotaLedger,
        event_publisher: Optional[EventPublisher] = None,
        consistency: str = CONSISTENCY_OVERWRITE,
        delete_workers: int = 2,
    ):
        """
        Initialize File Service with dependencies.

        Args:
            principal_repository: Identity store holding the file ledgers
            storage: Object storage engine
            quota_ledger: Quota checks and ledger arithmetic
            event_publisher: Optional publisher for domain events
            consistency: 'overwrite' or 'serialized'
            delete_workers: Thread pool size for the concurrent delete
        """
        if consistency not in (CONSISTENCY_OVERWRITE, CONSISTENCY_SERIALIZED):
            raise ValueError(f"Unknown ledger consistency mode: {consistency}")
        self.principal_repo = principal_repository
        self.storage = storage
        self.quota_ledger = quota_ledger
        self.event_publisher = event_publisher
        self.consistency = consistency
        self.delete_workers = max(2, delete_workers)

    def list_files(self, principal: Principal) -> List[FileRecord]:
        """
        List a principal's files sorted by name.

        Principals without files must hold the file privilege to see the
        (empty) listing.

        Raises:
            ForbiddenError: If the principal has no files and no privilege
        """
        if not principal.files and not principal.has_priv(Privilege.CREATE_FILE):
            raise ForbiddenError(
                "Missing file privilege", ErrorCategory.PERMISSION_DENIED
            )
        return sorted(principal.files, key=lambda record: record.name)

    def upload(
        self,
        principal: Principal,
        content: Optional[UploadedContent],
        filename: Optional[str] = None,
    ) -> FileRecord:
        """
        Store an uploaded file and record it in the principal's ledger.

        Workflow:
        1. Require the file privilege
        2. Check the file count quota
        3. Require upload content
        4. Derive and validate the file name
        5. Reject duplicate names
        6. Check the aggregate size quota
        7. Store the object and read back its metadata
        8. Append the record and overwrite the ledger

        Args:
            principal: Uploading principal
            content: Temporary local file holding the upload
            filename: Optional explicit name

        Returns:
            The new FileRecord

        Raises:
            ForbiddenError: Missing privilege or quota exceeded
            ValidationError: Missing content or bad file name
            ConflictError: A file with the same name exists
            UploadFailedError: The object could not be stored or confirmed
        """
        if not principal.has_priv(Privilege.CREATE_FILE):
            raise ForbiddenError(
                "Missing file privilege", ErrorCategory.PERMISSION_DENIED
            )

        with self._ledger_scope(principal):
            self.quota_ledger.check_count(principal)
            if content is None:
                raise ValidationError(
                    "file", "No file uploaded", ErrorCategory.FILE_MISSING
                )
            name = FileName.derive(filename, content.original_filename).value
            if principal.find_file(name) is not None:
                raise ConflictError(f"File exists: {name}")
            self.quota_ledger.check_size(principal, content.size)

            target = user_object_path(principal.id, name)
            try:
                self.storage.put(target, content.path, principal.id)
            except (IOError, OSError, ValueError) as e:
                raise UploadFailedError(f"Failed to store {target}: {e}", original_error=e) from e

            meta = self.storage.get_meta(target)
            if meta is None:
                raise UploadFailedError(f"Upload failed: no metadata for {target}")

            record = FileRecord.from_meta(name, meta)
            files = QuotaLedger.with_record(principal.files, record)
            self._write_ledger(principal.id, files)
            principal.files = files

        logger.info(f"Stored {target} ({record.size} bytes) for principal {principal.id}")
        self._publish(
            FileUploadedEvent(
                aggregate_id=str(principal.id),
                occurred_at=datetime.utcnow(),
                target=target,
                filename=name,
                size=record.size,
            )
        )
        return record

    def delete(self, principal: Principal, filenames: Iterable[str]) -> DeleteResult:
        """
        Remove named files from storage and from the ledger.

        The storage delete and the ledger overwrite run concurrently and
        independently: a storage failure does not stop the ledger from
        dropping the named entries. The paths left behind are reported as
        orphaned and reclaimed later by the orphan sweep.

        Args:
            principal: Owning principal
            filenames: Names to remove

        Returns:
            DeleteResult with removed names and orphaned paths

        Raises:
            ValidationError: A name contains a path separator or ``..``
            DomainError: If the ledger could not be written
        """
        # Paths are concatenated; a bad name would escape user/<id>/
        names = list(dict.fromkeys(FileName(name).value for name in filenames))
        paths = [user_object_path(principal.id, name) for name in names]

        with self._ledger_scope(principal):
            remaining = QuotaLedger.without(principal.files, names)
            requested = set(names)
            deleted = [r.name for r in principal.files if r.name in requested]

            with ThreadPoolExecutor(max_workers=self.delete_workers) as executor:
                storage_future = executor.submit(self.storage.delete, paths, principal.id)
                ledger_future = executor.submit(self._write_ledger, principal.id, remaining)
                storage_error = storage_future.exception()
                ledger_future.result()

            principal.files = remaining

        result = DeleteResult(deleted=deleted)
        if storage_error is not None:
            result.orphaned = (
                storage_error.paths
                if isinstance(storage_error, ObjectDeletionError)
                else paths
            )
            logger.warning(
                f"Storage delete failed for principal {principal.id}, "
                f"{len(result.orphaned)} object(s) left behind: {storage_error}"
            )
            self._publish(
                ObjectDeletionFailedEvent(
                    aggregate_id=str(principal.id),
                    occurred_at=datetime.utcnow(),
                    paths=tuple(result.orphaned),
                    error_message=str(storage_error),
                )
            )

        self._publish(
            FilesDeletedEvent(
                aggregate_id=str(principal.id),
                occurred_at=datetime.utcnow(),
                filenames=tuple(deleted),
            )
        )
        return result

    @contextmanager
    def _ledger_scope(self, principal: Principal) -> Iterator[Principal]:
        """Scope in which the principal's ledger is read, checked and rewritten."""
        if self.consistency != CONSISTENCY_SERIALIZED:
            yield principal
            return

        with self.principal_repo.serialized(principal.id):
            latest = self.principal_repo.get_by_id(SYSTEM_REALM, principal.id)
            if latest is not None:
                principal.files = latest.files
            yield principal

    def _write_ledger(self, principal_id: int, files: List[FileRecord]) -> None:
        if not self.principal_repo.set_by_id(
            principal_id, {"_files": [record.to_dict() for record in files]}
        ):
            raise DomainError(f"Failed to update file ledger of principal {principal_id}")

    def _publish(self, event) -> None:
        if self.event_publisher is not None:
            self.event_publisher.publish(event)
