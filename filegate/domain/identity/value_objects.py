"""
Identity Value Objects

Privilege flags granted to principals by the identity system.
"""

from enum import IntFlag


class Privilege(IntFlag):
    """
    Bit set of system-wide privileges.

    Stored as a plain integer in the identity store.
    """

    NONE = 0
    EDIT_SYSTEM = 1 << 0
    CREATE_FILE = 1 << 1
    UNLIMITED_QUOTA = 1 << 2
