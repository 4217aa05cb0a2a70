"""
Unit tests for LocalObjectStorage against a temporary directory.
"""

import hashlib
from urllib.parse import parse_qs, urlparse

import pytest

from filegate.domain.access import LinkSigner
from filegate.domain.file_storage import ObjectDeletionError
from filegate.infrastructure import LocalObjectStorage
from tests.fixtures import FIXED_NOW_MS


@pytest.fixture
def signer():
    return LinkSigner("secret", clock=lambda: FIXED_NOW_MS)


@pytest.fixture
def storage(tmp_path, signer):
    return LocalObjectStorage(
        str(tmp_path / "store"),
        signer,
        link_base_url="/api/v1/storage",
        default_ttl=60,
        namespace_ttls={"user": 1800},
    )


@pytest.fixture
def source(tmp_path):
    path = tmp_path / "upload.bin"
    path.write_bytes(b"hello world")
    return str(path)


class TestLocalObjectStorage:
    def test_put_then_get(self, storage, source):
        storage.put("user/1/a.txt", source, 1)
        assert storage.get("user/1/a.txt").read() == b"hello world"

    def test_put_leaves_no_partial_file(self, storage, source):
        storage.put("user/1/a.txt", source, 1)
        assert storage.list("user/") == ["user/1/a.txt"]

    def test_get_meta(self, storage, source):
        storage.put("user/1/a.txt", source, 1)
        meta = storage.get_meta("user/1/a.txt")
        assert meta.size == 11
        assert meta.etag == hashlib.md5(b"hello world").hexdigest()
        assert meta.last_modified.tzinfo is not None

    def test_missing_object(self, storage):
        assert storage.get("user/1/none") is None
        assert storage.get_meta("user/1/none") is None

    @pytest.mark.parametrize("path", ["", "../escape.txt", "user/../../escape.txt"])
    def test_paths_outside_base_are_refused(self, storage, source, path):
        with pytest.raises(ValueError):
            storage.put(path, source, 1)
        assert storage.get(path) is None

    def test_delete_is_idempotent(self, storage, source):
        storage.put("user/1/a.txt", source, 1)
        storage.delete(["user/1/a.txt", "user/1/missing"], 1)
        storage.delete(["user/1/a.txt"], 1)
        assert storage.get("user/1/a.txt") is None

    def test_delete_reports_paths_left_behind(self, storage, source, monkeypatch):
        storage.put("user/1/a.txt", source, 1)
        storage.put("user/1/b.txt", source, 1)

        from pathlib import Path

        original_unlink = Path.unlink

        def unlink(self, *args, **kwargs):
            if self.name == "a.txt":
                raise PermissionError("read-only")
            return original_unlink(self, *args, **kwargs)

        monkeypatch.setattr(Path, "unlink", unlink)

        with pytest.raises(ObjectDeletionError) as exc_info:
            storage.delete(["user/1/a.txt", "user/1/b.txt"], 1)
        assert exc_info.value.paths == ["user/1/a.txt"]
        assert storage.get("user/1/b.txt") is None

    def test_list_by_prefix(self, storage, source):
        storage.put("user/2/b", source, 2)
        storage.put("user/1/a", source, 1)
        assert storage.list("user/") == ["user/1/a", "user/2/b"]
        assert storage.list("user/1/") == ["user/1/a"]
        assert storage.list("user/3/") == []

    def test_sign_download_link_uses_namespace_ttl(self, storage, signer):
        url = storage.sign_download_link("user/1/a.txt", "a.txt", namespace="user")
        query = parse_qs(urlparse(url).query)
        expire = int(query["expire"][0])

        assert urlparse(url).path == "/api/v1/storage"
        assert expire == FIXED_NOW_MS + 1800 * 1000
        assert query["filename"] == ["a.txt"]
        assert signer.verify("user/1/a.txt", expire, query["secret"][0])

    def test_sign_download_link_default_ttl(self, storage):
        url = storage.sign_download_link("user/1/a.txt")
        query = parse_qs(urlparse(url).query)
        assert int(query["expire"][0]) == FIXED_NOW_MS + 60 * 1000
        assert "filename" not in query

    def test_force_download_uses_basename(self, storage):
        url = storage.sign_download_link("user/1/a.txt", force_download=True)
        assert parse_qs(urlparse(url).query)["filename"] == ["a.txt"]
