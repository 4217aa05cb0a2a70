"""Shared test fixtures: in-memory repositories and entity factories."""

from .domain_fixtures import FIXED_NOW_MS, make_principal, make_record
from .mock_repositories import MockObjectStorage, MockPrincipalRepository

__all__ = [
    "FIXED_NOW_MS",
    "MockObjectStorage",
    "MockPrincipalRepository",
    "make_principal",
    "make_record",
]
