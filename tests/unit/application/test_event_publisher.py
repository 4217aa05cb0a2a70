"""
Unit tests for EventPublisher dispatch and handler isolation.
"""

from datetime import datetime
from unittest.mock import Mock

from filegate.application import EventPublisher
from filegate.domain.events import DomainEvent, FilesDeletedEvent, FileUploadedEvent


def uploaded_event():
    return FileUploadedEvent(
        aggregate_id="1",
        occurred_at=datetime(2024, 1, 1),
        target="user/1/a.txt",
        filename="a.txt",
        size=3,
    )


def test_publish_dispatches_to_exact_type_handlers():
    publisher = EventPublisher()
    upload_handler = Mock()
    delete_handler = Mock()
    publisher.subscribe(FileUploadedEvent, upload_handler)
    publisher.subscribe(FilesDeletedEvent, delete_handler)

    event = uploaded_event()
    publisher.publish(event)

    upload_handler.assert_called_once_with(event)
    delete_handler.assert_not_called()


def test_base_class_subscription_receives_every_event():
    publisher = EventPublisher()
    handler = Mock()
    publisher.subscribe(DomainEvent, handler)

    publisher.publish(uploaded_event())
    publisher.publish(FilesDeletedEvent(aggregate_id="1", occurred_at=datetime(2024, 1, 1)))

    assert handler.call_count == 2


def test_handler_exceptions_dont_break_publishing():
    publisher = EventPublisher()
    failing = Mock(side_effect=RuntimeError("boom"))
    healthy = Mock()
    publisher.subscribe(DomainEvent, failing)
    publisher.subscribe(DomainEvent, healthy)

    publisher.publish(uploaded_event())

    healthy.assert_called_once()


def test_publish_with_no_handlers():
    EventPublisher().publish(uploaded_event())


def test_event_serialization():
    data = uploaded_event().to_dict()
    assert data == {
        "event_type": "FileUploadedEvent",
        "aggregate_id": "1",
        "occurred_at": "2024-01-01T00:00:00",
        "target": "user/1/a.txt",
        "filename": "a.txt",
        "size": 3,
    }
