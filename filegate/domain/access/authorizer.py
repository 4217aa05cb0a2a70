"""
Download Authorizer

Domain service deciding who may obtain a link to a principal's file.
"""

from filegate.domain.errors import ErrorCategory, ForbiddenError, NotFoundError
from filegate.domain.identity import Principal, PrincipalRepository, Privilege

SYSTEM_REALM = "system"


class DownloadAuthorizer:
    """
    Two-clause authorization predicate for file downloads.

    A requester may access a file if they own it, or if the owning
    principal itself holds the file privilege. Files of such principals
    are treated as published by a system-level account.
    """

    def __init__(self, principal_repository: PrincipalRepository):
        """
        Initialize DownloadAuthorizer with the identity store.

        Args:
            principal_repository: Repository resolving file owners
        """
        self.principal_repo = principal_repository

    @staticmethod
    def is_allowed(requester: Principal, owner: Principal) -> bool:
        """
        Evaluate the authorization predicate.

        Args:
            requester: Principal making the request
            owner: Principal owning the file

        Returns:
            True if access is permitted
        """
        return requester.id == owner.id or owner.has_priv(Privilege.CREATE_FILE)

    def authorize(self, requester: Principal, owner_id: int) -> Principal:
        """
        Resolve the file owner and check access.

        Args:
            requester: Principal making the request
            owner_id: Identifier of the owning principal

        Returns:
            The owning principal

        Raises:
            NotFoundError: If the owner does not exist
            ForbiddenError: If the requester may not access the owner's files
        """
        owner = self.principal_repo.get_by_id(SYSTEM_REALM, owner_id)
        if owner is None:
            raise NotFoundError(
                f"Principal not found: {owner_id}", ErrorCategory.PRINCIPAL_NOT_FOUND
            )
        if not self.is_allowed(requester, owner):
            raise ForbiddenError("Access denied", ErrorCategory.ACCESS_DENIED)
        return owner
