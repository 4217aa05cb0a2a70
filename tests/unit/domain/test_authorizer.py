import pytest

from filegate.domain.access import DownloadAuthorizer
from filegate.domain.errors import ErrorCategory, ForbiddenError, NotFoundError
from filegate.domain.identity import Privilege
from tests.fixtures import MockPrincipalRepository, make_principal


@pytest.fixture
def repository():
    return MockPrincipalRepository([
        make_principal(1, Privilege.NONE),
        make_principal(2, Privilege.NONE),
        make_principal(3, Privilege.CREATE_FILE),
    ])


class TestDownloadAuthorizer:
    def test_owner_may_access_own_files(self, repository):
        requester = make_principal(1, Privilege.NONE)
        owner = DownloadAuthorizer(repository).authorize(requester, 1)
        assert owner.id == 1

    def test_other_user_is_denied_for_unprivileged_owner(self, repository):
        requester = make_principal(2, Privilege.NONE)
        with pytest.raises(ForbiddenError) as exc_info:
            DownloadAuthorizer(repository).authorize(requester, 1)
        assert exc_info.value.category == ErrorCategory.ACCESS_DENIED

    def test_files_of_privileged_owner_are_public(self, repository):
        requester = make_principal(2, Privilege.NONE)
        assert DownloadAuthorizer(repository).authorize(requester, 3).id == 3

    def test_missing_owner_is_not_found(self, repository):
        with pytest.raises(NotFoundError) as exc_info:
            DownloadAuthorizer(repository).authorize(make_principal(1), 99)
        assert exc_info.value.category == ErrorCategory.PRINCIPAL_NOT_FOUND

    def test_owner_is_resolved_in_system_realm(self, repository):
        DownloadAuthorizer(repository).authorize(make_principal(1), 1)
        call = repository.get_call_history()[-1]
        assert call["args"] == {"realm": "system", "principal_id": 1}
