"""
Identity Repository Interface

Abstract interface for the identity store the file subsystem consumes.
"""

from abc import ABC, abstractmethod
from typing import Any, ContextManager, Dict, List, Optional

from .entities import Principal


class PrincipalStoreError(IOError):
    """Raised when the identity store cannot be reached or gives no usable answer."""


class PrincipalRepository(ABC):
    """
    Interface for reading and updating principals.

    ``set_by_id`` has whole-field overwrite semantics: every key in the
    update replaces the stored value entirely.
    """

    @abstractmethod
    def get_by_id(self, realm: str, principal_id: int) -> Optional[Principal]:
        """
        Retrieve a principal.

        Args:
            realm: Realm the principal is resolved in (e.g., 'system')
            principal_id: Principal identifier

        Returns:
            Principal if found, None otherwise
        """
        pass  # pragma: no cover

    @abstractmethod
    def set_by_id(self, principal_id: int, update: Dict[str, Any]) -> bool:
        """
        Overwrite fields of a stored principal.

        Args:
            principal_id: Principal identifier
            update: Field name to new value mapping (JSON-serialisable)

        Returns:
            True if the principal was updated, False otherwise
        """
        pass  # pragma: no cover

    @abstractmethod
    def exists(self, principal_id: int) -> bool:
        """
        Check whether a principal is stored.

        Unlike get_by_id, an unreachable store is never reported as absent.

        Raises:
            PrincipalStoreError: If the store cannot answer
        """
        pass  # pragma: no cover

    @abstractmethod
    def list_ids(self) -> List[int]:
        """Return the identifiers of all stored principals."""
        pass  # pragma: no cover

    @abstractmethod
    def serialized(self, principal_id: int) -> ContextManager[None]:
        """
        Context manager serialising ledger mutations for one principal.

        Code run inside the context is the only writer of the principal's
        file ledger until the context exits.
        """
        pass  # pragma: no cover
