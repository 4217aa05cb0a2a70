"""
Unit tests for the logging and audit trail event handlers.
"""

import logging
from datetime import datetime
from unittest.mock import Mock

from filegate.domain.events import (
    FileDownloadAuthorizedEvent,
    FilesDeletedEvent,
    ObjectDeletionFailedEvent,
)
from filegate.infrastructure.event_handlers import AuditTrailHandler, LoggingEventHandler

OCCURRED = datetime(2024, 1, 1)


def download_event():
    return FileDownloadAuthorizedEvent(
        aggregate_id="1",
        occurred_at=OCCURRED,
        requester_id=2,
        target="user/1/a.txt",
        size=5,
    )


class TestAuditTrailHandler:
    def test_pushes_typed_entry(self):
        redis_repo = Mock()
        redis_repo.push_json.return_value = True

        AuditTrailHandler(redis_repo).handle(download_event())

        key, entry = redis_repo.push_json.call_args.args
        assert key == "oplog"
        assert entry["type"] == "download.file.user"
        assert entry["target"] == "user/1/a.txt"
        assert entry["size"] == 5
        assert entry["requester_id"] == 2

    def test_failed_push_is_logged(self, caplog):
        redis_repo = Mock()
        redis_repo.push_json.return_value = False

        with caplog.at_level(logging.WARNING):
            AuditTrailHandler(redis_repo).handle(
                FilesDeletedEvent(aggregate_id="1", occurred_at=OCCURRED, filenames=("a",))
            )

        assert "Audit entry dropped" in caplog.text


class TestLoggingEventHandler:
    def test_logs_orphaned_objects_as_warning(self):
        logger = Mock()
        LoggingEventHandler(logger).handle(
            ObjectDeletionFailedEvent(
                aggregate_id="1",
                occurred_at=OCCURRED,
                paths=("user/1/a.txt",),
                error_message="read-only",
            )
        )
        logger.warning.assert_called_once()
        assert "user/1/a.txt" in logger.warning.call_args.args[0]

    def test_logs_download_as_info(self):
        logger = Mock()
        LoggingEventHandler(logger).handle(download_event())
        logger.info.assert_called_once()
