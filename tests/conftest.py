"""
Shared pytest fixtures and configuration for the Filegate test suite.

This module provides:
- Hypothesis configuration for property-based testing
- Shared fixtures for principals, storage and services
- Directory-based test markers
"""

import pytest
from unittest.mock import Mock

from hypothesis import HealthCheck, Phase, settings

from filegate.application import DownloadService, EventPublisher, FileService
from filegate.domain.access import DownloadAuthorizer, LinkSigner
from filegate.domain.file_storage import QuotaLedger, QuotaPolicy
from filegate.domain.identity import Privilege
from tests.fixtures import FIXED_NOW_MS, MockObjectStorage, MockPrincipalRepository, make_principal

# Register Hypothesis profiles
settings.register_profile(
    "default",
    max_examples=100,
    deadline=None,
    suppress_health_check=[HealthCheck.too_slow],
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.target, Phase.shrink],
)
settings.register_profile(
    "ci",
    max_examples=200,
    deadline=None,
    suppress_health_check=[HealthCheck.too_slow],
)
settings.register_profile(
    "dev",
    max_examples=10,
    deadline=None,
    suppress_health_check=[HealthCheck.too_slow],
)
settings.load_profile("default")




# =============================================================================
# Principal Fixtures
# =============================================================================

@pytest.fixture
def owner():
    """Principal holding the file privilege and no files."""
    return make_principal(1, Privilege.CREATE_FILE)


@pytest.fixture
def plain_user():
    """Principal without any privileges."""
    return make_principal(2, Privilege.NONE)


@pytest.fixture
def principal_repository(owner, plain_user):
    return MockPrincipalRepository([owner, plain_user])


# =============================================================================
# Infrastructure Fixtures
# =============================================================================

@pytest.fixture
def object_storage():
    return MockObjectStorage()


@pytest.fixture
def link_signer():
    """LinkSigner with a fixed clock."""
    return LinkSigner("test-secret", clock=lambda: FIXED_NOW_MS)


@pytest.fixture
def mock_event_publisher():
    """Mock EventPublisher recording published events."""
    return Mock(spec=EventPublisher)


# =============================================================================
# Service Fixtures
# =============================================================================

@pytest.fixture
def quota_ledger():
    """Quota of 2 files and 1000 bytes."""
    return QuotaLedger(QuotaPolicy(max_files=2, max_bytes=1000))


@pytest.fixture
def file_service(principal_repository, object_storage, quota_ledger, mock_event_publisher):
    return FileService(
        principal_repository,
        object_storage,
        quota_ledger,
        event_publisher=mock_event_publisher,
    )


@pytest.fixture
def download_service(principal_repository, object_storage, link_signer, mock_event_publisher):
    return DownloadService(
        DownloadAuthorizer(principal_repository),
        object_storage,
        link_signer,
        event_publisher=mock_event_publisher,
    )


@pytest.fixture
def upload_file(tmp_path):
    """Factory writing a temporary upload of the given size."""
    from filegate.domain.file_storage import UploadedContent

    def _make(size: int, original_filename=None, data: bytes = None):
        path = tmp_path / f"upload-{len(list(tmp_path.iterdir()))}"
        path.write_bytes(data if data is not None else b"x" * size)
        return UploadedContent.from_path(str(path), original_filename)

    return _make


# =============================================================================
# Pytest Configuration Hooks
# =============================================================================

def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "unit: Unit tests (fast, no external dependencies)"
    )
    config.addinivalue_line(
        "markers", "integration: Integration tests (require external services)"
    )
    config.addinivalue_line(
        "markers", "property: Property-based tests using Hypothesis"
    )


def pytest_collection_modifyitems(config, items):
    """
    Automatically mark tests based on their location.

    - tests/unit/* -> @pytest.mark.unit
    - tests/integration/* -> @pytest.mark.integration
    - tests/property/* -> @pytest.mark.property
    """
    for item in items:
        test_path = str(item.fspath)

        if "/unit/" in test_path or "\\unit\\" in test_path:
            item.add_marker(pytest.mark.unit)
        elif "/integration/" in test_path or "\\integration\\" in test_path:
            item.add_marker(pytest.mark.integration)
        elif "/property/" in test_path or "\\property\\" in test_path:
            item.add_marker(pytest.mark.property)
