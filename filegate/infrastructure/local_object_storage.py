"""
Local Object Storage Implementation

Concrete implementation of IObjectStorage for the local filesystem.
Objects live below a base directory; download links point at the
application's own signed-fetch endpoint.
"""

import hashlib
import logging
import shutil
from datetime import datetime, timezone
from io import BytesIO
from pathlib import Path
from typing import BinaryIO, Dict, Iterable, List, Optional

from filegate.domain.access import LinkSigner
from filegate.domain.file_storage import IObjectStorage, ObjectDeletionError, ObjectMeta

logger = logging.getLogger(__name__)

CHUNK_SIZE = 8192


class LocalObjectStorage(IObjectStorage):
    """
    Local filesystem implementation of IObjectStorage.

    Thread Safety:
        Concurrent reads are safe. Writes go to a temporary sibling file
        that is renamed into place, so readers never see partial content.

    Attributes:
        base_path: Base directory for stored objects
        link_signer: Signer used to build download links
        link_base_url: URL of the signed-fetch endpoint
        default_ttl: Link lifetime in seconds
        namespace_ttls: Per-namespace link lifetimes overriding default_ttl
    """

    def __init__(
        self,
        base_path: str,
        link_signer: LinkSigner,
        link_base_url: str = "/api/v1/storage",
        default_ttl: int = 1800,
        namespace_ttls: Optional[Dict[str, int]] = None,
    ):
        """
        Initialize the local object storage.

        Args:
            base_path: Base directory for stored objects
            link_signer: Signer used to build download links
            link_base_url: URL of the signed-fetch endpoint
            default_ttl: Link lifetime in seconds
            namespace_ttls: Per-namespace link lifetimes in seconds
        """
        self.base_path = Path(base_path)
        self.link_signer = link_signer
        self.link_base_url = link_base_url
        self.default_ttl = default_ttl
        self.namespace_ttls = dict(namespace_ttls or {})
        self._ensure_base_directory()

    def _ensure_base_directory(self) -> None:
        try:
            self.base_path.mkdir(parents=True, exist_ok=True)
        except PermissionError as e:
            raise PermissionError(
                f"Insufficient permissions to create storage directory: {self.base_path}"
            ) from e
        except OSError as e:
            raise OSError(
                f"Failed to create storage directory: {self.base_path}"
            ) from e

    def _resolve(self, path: str) -> Optional[Path]:
        """
        Map a storage path to a filesystem path inside base_path.

        Returns None for empty paths and for paths escaping the base directory.
        """
        if not path or not path.strip():
            return None
        base = self.base_path.resolve()
        full_path = (base / path).resolve()
        if full_path != base and base not in full_path.parents:
            return None
        return full_path

    # IObjectStorage interface methods

    def put(self, path: str, local_path: str, owner_id: int) -> None:
        full_path = self._resolve(path)
        if full_path is None:
            raise ValueError(f"Invalid storage path: {path!r}")

        tmp_path = full_path.with_name(f".{full_path.name}.part")
        try:
            full_path.parent.mkdir(parents=True, exist_ok=True)
            with open(local_path, "rb") as src, open(tmp_path, "wb") as dst:
                shutil.copyfileobj(src, dst, CHUNK_SIZE)
            tmp_path.replace(full_path)
        except PermissionError:
            raise
        except (IOError, OSError) as e:
            tmp_path.unlink(missing_ok=True)
            raise IOError(f"Failed to store {path}: {e}") from e

        logger.debug(f"Stored {path} for owner {owner_id}")

    def get(self, path: str) -> Optional[BinaryIO]:
        full_path = self._resolve(path)
        if full_path is None or not full_path.is_file():
            return None

        try:
            with open(full_path, "rb") as f:
                return BytesIO(f.read())
        except OSError as e:
            logger.warning(f"Failed to read {path}: {e}")
            return None

    def get_meta(self, path: str) -> Optional[ObjectMeta]:
        full_path = self._resolve(path)
        if full_path is None or not full_path.is_file():
            return None

        try:
            stat = full_path.stat()
            digest = hashlib.md5()
            with open(full_path, "rb") as f:
                for chunk in iter(lambda: f.read(CHUNK_SIZE), b""):
                    digest.update(chunk)
        except OSError as e:
            logger.warning(f"Failed to read metadata of {path}: {e}")
            return None

        return ObjectMeta(
            size=stat.st_size,
            last_modified=datetime.fromtimestamp(stat.st_mtime, tz=timezone.utc),
            etag=digest.hexdigest(),
        )

    def delete(self, paths: Iterable[str], owner_id: int) -> None:
        failed = []
        for path in paths:
            full_path = self._resolve(path)
            if full_path is None:
                continue
            try:
                if full_path.is_file():
                    full_path.unlink()
            except OSError as e:
                logger.warning(f"Failed to delete {path} for owner {owner_id}: {e}")
                failed.append(path)

        if failed:
            raise ObjectDeletionError(
                f"Failed to delete {len(failed)} object(s)", failed
            )

    def list(self, prefix: str) -> List[str]:
        directory = self._resolve(prefix)
        if directory is None or not directory.is_dir():
            return []

        base = self.base_path.resolve()
        return sorted(
            item.relative_to(base).as_posix()
            for item in directory.rglob("*")
            if item.is_file() and not item.name.endswith(".part")
        )

    def sign_download_link(
        self,
        path: str,
        filename: Optional[str] = None,
        force_download: bool = False,
        namespace: Optional[str] = None,
    ) -> str:
        if filename is None and force_download:
            filename = path.rsplit("/", 1)[-1]
        ttl = self.namespace_ttls.get(namespace, self.default_ttl)
        link = self.link_signer.link_for(path, ttl, filename)
        return link.to_url(self.link_base_url)
