"""
Unit tests for DependencyContainer registration, overrides and handler setup.
"""

from unittest.mock import Mock

import pytest

from filegate.application import (
    DependencyContainer,
    DependencyNotFoundError,
    EventPublisher,
    FileService,
    OrphanSweeper,
)
from filegate.domain.events import DomainEvent


@pytest.fixture
def container():
    return DependencyContainer()


def test_singleton_resolves_same_instance(container):
    service = Mock(spec=FileService)
    container.register_singleton(FileService, service)
    assert container.resolve(FileService) is service
    assert container.resolve(FileService) is service


def test_unregistered_dependency_raises(container):
    with pytest.raises(DependencyNotFoundError, match="OrphanSweeper"):
        container.resolve(OrphanSweeper)


def test_override_shadows_registration(container):
    original = Mock(spec=FileService)
    replacement = Mock(spec=FileService)
    container.register_singleton(FileService, original)

    container.override(FileService, replacement)

    assert container.resolve(FileService) is replacement


def test_registered_lists_service_names(container):
    container.register_singleton(OrphanSweeper, Mock(spec=OrphanSweeper))
    container.register_singleton(FileService, Mock(spec=FileService))
    container.override(EventPublisher, Mock(spec=EventPublisher))

    assert container.registered() == ["FileService", "OrphanSweeper"]


def test_setup_event_handlers_subscribes_to_all_events(container):
    publisher = Mock(spec=EventPublisher)
    handler = Mock()

    container.setup_event_handlers(publisher, [handler])

    publisher.subscribe.assert_called_once_with(DomainEvent, handler.handle)


def test_failing_handler_does_not_block_others(container):
    publisher = Mock(spec=EventPublisher)
    publisher.subscribe.side_effect = [RuntimeError("boom"), None]
    broken, working = Mock(), Mock()

    container.setup_event_handlers(publisher, [broken, working])

    assert publisher.subscribe.call_count == 2
    publisher.subscribe.assert_called_with(DomainEvent, working.handle)
