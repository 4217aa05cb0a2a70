"""
Logging Event Handler

Infrastructure event handler for logging domain events.
Subscribes to domain events and logs them appropriately.
Domain layer remains unaware of logging infrastructure.
"""

import logging

from filegate.domain.events import (
    DomainEvent,
    FileDownloadAuthorizedEvent,
    FilesDeletedEvent,
    FileUploadedEvent,
    ObjectDeletionFailedEvent,
)


class LoggingEventHandler:
    """
    Infrastructure event handler for logging domain events.

    Subscribes to domain events and logs them appropriately.
    """

    def __init__(self, logger: logging.Logger):
        """
        Initialize with logger instance.

        Args:
            logger: Python logging.Logger instance
        """
        self.logger = logger

    def handle(self, event: DomainEvent) -> None:
        """
        Handle domain event by logging it.

        Args:
            event: Domain event to log
        """
        try:
            if isinstance(event, FileUploadedEvent):
                self._handle_uploaded(event)
            elif isinstance(event, FilesDeletedEvent):
                self._handle_deleted(event)
            elif isinstance(event, ObjectDeletionFailedEvent):
                self._handle_deletion_failed(event)
            elif isinstance(event, FileDownloadAuthorizedEvent):
                self._handle_download_authorized(event)
            else:
                self.logger.debug(
                    f"Unhandled event: {event.__class__.__name__} "
                    f"(aggregate_id={event.aggregate_id})"
                )
        except Exception as e:
            # Log handler errors but don't fail the operation
            self.logger.error(
                f"Error in logging event handler for {event.__class__.__name__}: {e}",
                exc_info=True,
            )

    def _handle_uploaded(self, event: FileUploadedEvent) -> None:
        self.logger.info(
            f"File uploaded: owner={event.aggregate_id}, "
            f"target={event.target}, size={event.size} bytes"
        )

    def _handle_deleted(self, event: FilesDeletedEvent) -> None:
        self.logger.info(
            f"Files deleted: owner={event.aggregate_id}, "
            f"count={len(event.filenames)}"
        )

    def _handle_deletion_failed(self, event: ObjectDeletionFailedEvent) -> None:
        self.logger.warning(
            f"Objects orphaned: owner={event.aggregate_id}, "
            f"paths={list(event.paths)}, error={event.error_message}"
        )

    def _handle_download_authorized(self, event: FileDownloadAuthorizedEvent) -> None:
        self.logger.info(
            f"Download authorized: requester={event.requester_id}, "
            f"target={event.target}, size={event.size} bytes"
        )
