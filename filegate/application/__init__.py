"""
Application Layer

Orchestrates domain services for the upload, delete and download workflows.
"""

from .dependency_container import DependencyContainer, DependencyNotFoundError
from .download_service import DownloadService, SignedObject
from .event_publisher import EventPublisher
from .file_service import DeleteResult, FileService
from .orphan_sweeper import OrphanSweeper, SweepReport

__all__ = [
    "DeleteResult",
    "DependencyContainer",
    "DependencyNotFoundError",
    "DownloadService",
    "EventPublisher",
    "FileService",
    "OrphanSweeper",
    "SignedObject",
    "SweepReport",
]
