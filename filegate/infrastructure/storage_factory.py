"""
Storage Factory

Factory for creating the object storage implementation.

This simplified factory always returns the local filesystem adapter; the
application layer stays decoupled from it via the `IObjectStorage` interface.
"""

import logging

from filegate.config.file_config import FileConfig
from filegate.domain.access import LinkSigner
from filegate.domain.file_storage import IObjectStorage
from filegate.infrastructure.local_object_storage import LocalObjectStorage

logger = logging.getLogger(__name__)


class StorageFactory:
    """Factory that returns a local filesystem object storage."""

    @staticmethod
    def create_storage(config: FileConfig, link_signer: LinkSigner) -> IObjectStorage:
        """
        Create local filesystem object storage.

        Args:
            config: File subsystem configuration
            link_signer: Signer used for download links

        Returns:
            LocalObjectStorage instance

        Raises:
            RuntimeError: If local storage initialization fails
        """
        try:
            storage = LocalObjectStorage(
                config.storage_dir,
                link_signer,
                link_base_url=config.storage_base_url,
                default_ttl=config.link_ttl_seconds,
                namespace_ttls=config.namespace_link_ttls,
            )
        except OSError as e:
            raise RuntimeError(f"Failed to initialize local storage: {e}") from e

        logger.info(f"Storage factory: Using local filesystem storage at {config.storage_dir}")
        return storage
