"""
Identity Domain

Principals, privileges and the identity store interface.
"""

from .entities import ANONYMOUS_ID, Principal
from .repositories import PrincipalRepository, PrincipalStoreError
from .value_objects import Privilege

__all__ = [
    "ANONYMOUS_ID",
    "Principal",
    "PrincipalRepository",
    "PrincipalStoreError",
    "Privilege",
]
