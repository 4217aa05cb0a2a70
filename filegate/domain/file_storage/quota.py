"""
Quota Ledger

Domain service deciding whether a principal's file ledger may grow,
and computing the new ledger contents for uploads and deletions.
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterable, List, Tuple

from filegate.domain.errors import ErrorCategory, ForbiddenError
from filegate.domain.identity.value_objects import Privilege

from .entities import FileRecord

if TYPE_CHECKING:
    from filegate.domain.identity.entities import Principal


@dataclass(frozen=True)
class QuotaPolicy:
    """
    Configured per-principal limits.

    Attributes:
        max_files: Maximum number of stored files
        max_bytes: Maximum aggregate size of stored files in bytes
    """
    max_files: int
    max_bytes: int


class QuotaLedger:
    """
    Domain service for per-principal storage quotas.

    Checks run in a fixed order: file count first, then the prospective
    aggregate size including the candidate object. Principals holding
    the unlimited-quota privilege bypass both checks.
    """

    def __init__(self, policy: QuotaPolicy):
        """
        Initialize QuotaLedger with limits.

        Args:
            policy: Count and byte limits
        """
        self.policy = policy

    @staticmethod
    def usage(files: Iterable[FileRecord]) -> Tuple[int, int]:
        """
        Compute (count, aggregate size) of a ledger.

        Args:
            files: Ledger entries

        Returns:
            Tuple of file count and total bytes
        """
        count = 0
        total = 0
        for record in files:
            count += 1
            total += record.size
        return count, total

    def check_count(self, principal: "Principal") -> None:
        """
        Refuse a new file once the count limit is reached.

        A zero-length upload still consumes one unit of count quota.

        Raises:
            ForbiddenError: If the principal already holds max_files files
        """
        if principal.has_priv(Privilege.UNLIMITED_QUOTA):
            return
        if len(principal.files) >= self.policy.max_files:
            raise ForbiddenError(
                "File limit exceeded.", ErrorCategory.FILE_LIMIT_EXCEEDED
            )

    def check_size(self, principal: "Principal", candidate_size: int) -> None:
        """
        Refuse a file that would push aggregate usage over max_bytes.

        Reaching exactly max_bytes is allowed.

        Raises:
            ForbiddenError: If the prospective total exceeds the limit
        """
        if principal.has_priv(Privilege.UNLIMITED_QUOTA):
            return
        _, total = self.usage(principal.files)
        if total + candidate_size > self.policy.max_bytes:
            raise ForbiddenError(
                "File size limit exceeded.", ErrorCategory.SIZE_LIMIT_EXCEEDED
            )

    def check(self, principal: "Principal", candidate_size: int) -> None:
        """Run the count check, then the size check."""
        self.check_count(principal)
        self.check_size(principal, candidate_size)

    @staticmethod
    def with_record(files: List[FileRecord], record: FileRecord) -> List[FileRecord]:
        """Return a new ledger with ``record`` appended."""
        return [*files, record]

    @staticmethod
    def without(files: List[FileRecord], names: Iterable[str]) -> List[FileRecord]:
        """Return a new ledger without the named records."""
        removed = set(names)
        return [record for record in files if record.name not in removed]
