"""
Object Storage Interface

Abstract interface for the physical object-storage engine.
This abstraction keeps the domain layer infrastructure-agnostic: the
file workflows only ever reference storage paths and never decide how
bytes are physically stored.

Paths follow the ``user/<principalId>/<filename>`` convention and are
relative to the storage root.
"""

from abc import ABC, abstractmethod
from typing import BinaryIO, Iterable, List, Optional

from .value_objects import ObjectMeta


class IObjectStorage(ABC):
    """
    Interface for object storage operations.

    Contract Guarantees:
    - get() and get_meta() return None for missing objects (no exceptions)
    - delete() is idempotent: missing objects are not an error
    - put() overwrites an existing object at the same path

    Thread Safety:
    - Implementations must be safe for concurrent requests; the delete
      workflow calls delete() from a worker thread
    """

    @abstractmethod
    def put(self, path: str, local_path: str, owner_id: int) -> None:
        """
        Store the content of a local file under a storage path.

        Args:
            path: Storage path (e.g., 'user/1/report.pdf')
            local_path: Local temporary file holding the content
            owner_id: Principal the object is stored for

        Raises:
            ValueError: If path is empty
            IOError: If the content could not be written
        """
        pass  # pragma: no cover

    @abstractmethod
    def get(self, path: str) -> Optional[BinaryIO]:
        """
        Retrieve object content.

        The caller is responsible for closing the returned stream.

        Args:
            path: Storage path

        Returns:
            Binary stream if the object exists, None otherwise
        """
        pass  # pragma: no cover

    @abstractmethod
    def get_meta(self, path: str) -> Optional[ObjectMeta]:
        """
        Retrieve object metadata (size, last modification time, etag).

        Args:
            path: Storage path

        Returns:
            ObjectMeta if the object exists, None otherwise
        """
        pass  # pragma: no cover

    @abstractmethod
    def delete(self, paths: Iterable[str], owner_id: int) -> None:
        """
        Delete a batch of objects.

        Args:
            paths: Storage paths to remove
            owner_id: Principal the objects belong to

        Raises:
            IOError: If one or more objects could not be removed. The
                error lists the paths that are still present.
        """
        pass  # pragma: no cover

    @abstractmethod
    def list(self, prefix: str) -> List[str]:
        """
        List the storage paths below a prefix.

        Args:
            prefix: Path prefix (e.g., 'user/1/')

        Returns:
            Storage paths of the objects found, sorted
        """
        pass  # pragma: no cover

    @abstractmethod
    def sign_download_link(
        self,
        path: str,
        filename: Optional[str] = None,
        force_download: bool = False,
        namespace: Optional[str] = None,
    ) -> str:
        """
        Build a temporary URL from which the object can be fetched.

        Args:
            path: Storage path
            filename: Name the client should save the content under;
                None lets the client choose how to render it
            force_download: Attach a disposition even without a filename,
                using the last path segment
            namespace: Link namespace, selects the link lifetime

        Returns:
            URL string
        """
        pass  # pragma: no cover


class ObjectDeletionError(IOError):
    """
    Raised by IObjectStorage.delete() when some objects could not be removed.

    Attributes:
        paths: Storage paths that are still present
    """

    def __init__(self, message: str, paths: List[str]):
        super().__init__(message)
        self.paths = list(paths)
