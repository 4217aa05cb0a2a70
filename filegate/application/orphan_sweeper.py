"""
Orphan Sweeper

Reclaims stored objects that no principal's ledger refers to any more,
such as objects left behind when a bulk delete rewrote the ledger but
the storage engine failed to remove the objects.
"""

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional

from filegate.domain.access import SYSTEM_REALM
from filegate.domain.file_storage import IObjectStorage, ObjectDeletionError
from filegate.domain.identity import PrincipalRepository, PrincipalStoreError

logger = logging.getLogger(__name__)

USER_ROOT = "user/"


@dataclass
class SweepReport:
    principals_scanned: int = 0
    orphans_removed: int = 0
    errors: List[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "principals_scanned": self.principals_scanned,
            "orphans_removed": self.orphans_removed,
            "errors": self.errors,
        }


class OrphanSweeper:
    """
    Deletes objects under ``user/<id>/`` whose name is absent from the
    owner's ledger, or whose owner no longer exists.

    Objects younger than ``min_age_seconds`` are left alone: an upload
    stores its object before the ledger records it. An owner whose ledger
    cannot be read, or whose absence cannot be confirmed, is skipped and
    reported.
    """

    def __init__(
        self,
        principal_repository: PrincipalRepository,
        storage: IObjectStorage,
        min_age_seconds: int = 3600,
    ):
        self.principal_repository = principal_repository
        self.storage = storage
        self.min_age = timedelta(seconds=min_age_seconds)

    def sweep(self, now: Optional[datetime] = None) -> SweepReport:
        """
        Run one sweep over all user prefixes.

        Args:
            now: Reference time for the age check (defaults to current UTC time)

        Returns:
            SweepReport with counts and per-principal error messages
        """
        if now is None:
            now = datetime.now(timezone.utc)

        report = SweepReport()
        for owner_id, paths in sorted(self._paths_by_owner().items()):
            report.principals_scanned += 1
            orphans = []
            try:
                orphans = self._orphans_of(owner_id, paths, now)
                if orphans:
                    self.storage.delete(orphans, owner_id)
                    report.orphans_removed += len(orphans)
                    logger.info(f"Removed {len(orphans)} orphaned objects of principal {owner_id}")
            except PrincipalStoreError as e:
                report.errors.append(f"principal {owner_id}: {e}")
                logger.warning(f"Skipping orphan sweep for principal {owner_id}: {e}")
            except ObjectDeletionError as e:
                report.orphans_removed += len(orphans) - len(e.paths)
                report.errors.append(f"principal {owner_id}: {e}")
                logger.warning(f"Orphan sweep for principal {owner_id} incomplete: {e.paths}")
            except Exception as e:
                report.errors.append(f"principal {owner_id}: {e}")
                logger.error(f"Orphan sweep failed for principal {owner_id}: {e}", exc_info=True)

        return report

    def _paths_by_owner(self) -> Dict[int, List[str]]:
        grouped = defaultdict(list)
        for path in self.storage.list(USER_ROOT):
            parts = path.split("/")
            # Only user/<id>/<name> is a ledger-managed object
            if len(parts) != 3 or not parts[1].isdigit():
                continue
            grouped[int(parts[1])].append(path)
        return grouped

    def _orphans_of(self, owner_id: int, paths: List[str], now: datetime) -> List[str]:
        principal = self.principal_repository.get_by_id(SYSTEM_REALM, owner_id)
        if principal is None:
            # A failed or corrupt read also yields None; only a confirmed absence frees the objects
            if self.principal_repository.exists(owner_id):
                raise PrincipalStoreError(f"Ledger of principal {owner_id} is unreadable")
            known = set()
        else:
            known = {record.name for record in principal.files}

        orphans = []
        for path in paths:
            if path.rsplit("/", 1)[-1] in known:
                continue
            meta = self.storage.get_meta(path)
            if meta is None:
                continue
            if meta.last_modified is not None and now - meta.last_modified < self.min_age:
                continue
            orphans.append(path)
        return orphans
