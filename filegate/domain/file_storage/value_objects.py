"""
File Storage Value Objects

Immutable value objects for type safety and validation.
"""

import os
import secrets
import string
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from filegate.domain.errors import ErrorCategory, ValidationError

RANDOM_NAME_LENGTH = 16
_RANDOM_NAME_ALPHABET = string.ascii_letters + string.digits


@dataclass(frozen=True)
class FileName:
    """
    Value object representing a validated file name.

    The storage path is built by plain string concatenation, so a name
    must never contain a path separator or a parent-directory reference.
    """
    value: str

    def __post_init__(self):
        if not self._is_valid():
            raise ValidationError(
                "filename",
                f"Bad filename: {self.value!r}",
                ErrorCategory.INVALID_FILENAME,
            )

    def _is_valid(self) -> bool:
        if not self.value or not isinstance(self.value, str):
            return False
        return "/" not in self.value and ".." not in self.value

    @classmethod
    def derive(
        cls, explicit: Optional[str], original: Optional[str] = None
    ) -> 'FileName':
        """
        Pick the name an upload is stored under.

        Falls back from the explicit name to the uploaded object's original
        name, then to a random 16-character name.

        Args:
            explicit: Name supplied with the request
            original: Name the client's upload carried

        Returns:
            Validated FileName

        Raises:
            ValidationError: If the chosen name is not acceptable
        """
        return cls(explicit or original or cls.random().value)

    @classmethod
    def random(cls, length: int = RANDOM_NAME_LENGTH) -> 'FileName':
        """Generate a random alphanumeric file name."""
        return cls("".join(secrets.choice(_RANDOM_NAME_ALPHABET) for _ in range(length)))

    def __str__(self) -> str:
        return self.value


def user_object_path(principal_id: int, filename: str) -> str:
    """Storage path of a principal's file: ``user/<id>/<filename>``."""
    return f"{user_prefix(principal_id)}{filename}"


def user_prefix(principal_id: int) -> str:
    """Storage prefix holding all of a principal's files."""
    return f"user/{principal_id}/"


@dataclass(frozen=True)
class ObjectMeta:
    """Metadata the storage engine reports for a stored object."""
    size: int
    last_modified: Optional[datetime] = None
    etag: Optional[str] = None


@dataclass(frozen=True)
class UploadedContent:
    """
    An uploaded object waiting in a temporary local file.

    Attributes:
        path: Local path of the temporary file
        size: Size of the file in bytes
        original_filename: Name the client sent with the upload, if any
    """
    path: str
    size: int
    original_filename: Optional[str] = None

    @classmethod
    def from_path(cls, path: str, original_filename: Optional[str] = None) -> 'UploadedContent':
        """
        Describe a temporary file, reading its size from the filesystem.

        Args:
            path: Local path of the uploaded file
            original_filename: Client supplied name

        Returns:
            New UploadedContent instance
        """
        return cls(path=path, size=os.stat(path).st_size, original_filename=original_filename)
