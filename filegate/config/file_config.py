"""
File Subsystem Configuration

Reads quota limits, the link signing secret and storage settings from
the environment.
"""

import logging
import os
import secrets
from typing import Dict

from filegate.domain.file_storage import QuotaPolicy

logger = logging.getLogger(__name__)

DEFAULT_MAX_FILES = 100
DEFAULT_MAX_BYTES = 128 * 1024 * 1024


class FileConfig:
    """File storage, quota and link configuration settings."""

    def __init__(self):
        self.max_files = int(os.getenv("LIMIT_USER_FILES", DEFAULT_MAX_FILES))
        self.max_bytes = int(os.getenv("LIMIT_USER_FILES_SIZE", DEFAULT_MAX_BYTES))

        self.secret = os.getenv("FILE_SECRET")
        if not self.secret:
            # Links minted by one process won't verify in another
            logger.warning(
                "FILE_SECRET is not set; using a random per-process secret"
            )
            self.secret = secrets.token_hex(32)

        self.link_ttl_seconds = int(os.getenv("LINK_TTL_SECONDS", 1800))
        self.user_link_ttl_seconds = int(
            os.getenv("USER_LINK_TTL_SECONDS", self.link_ttl_seconds)
        )
        self.storage_base_url = os.getenv("STORAGE_BASE_URL", "/api/v1/storage")
        self.storage_dir = os.getenv("STORAGE_DIR", "/tmp/filegate")

        self.ledger_consistency = os.getenv("LEDGER_CONSISTENCY", "overwrite").lower()
        self.delete_workers = int(os.getenv("DELETE_WORKERS", 2))

    @property
    def namespace_link_ttls(self) -> Dict[str, int]:
        """Link lifetimes in seconds keyed by link namespace."""
        return {"user": self.user_link_ttl_seconds}

    def quota_policy(self) -> QuotaPolicy:
        return QuotaPolicy(max_files=self.max_files, max_bytes=self.max_bytes)
