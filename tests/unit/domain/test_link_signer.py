import hashlib
from urllib.parse import parse_qs, urlparse

import pytest

from filegate.domain.access import LinkSigner, SignedAccessLink

NOW = 1_700_000_000_000


class TestLinkSigner:
    def test_verify_accepts_minted_fingerprint(self):
        signer = LinkSigner("secret")
        fingerprint = signer.mint("user/1/a.txt", NOW)
        assert signer.verify("user/1/a.txt", NOW, fingerprint) is True

    def test_fingerprint_binds_target_and_expiry(self):
        signer = LinkSigner("secret")
        fingerprint = signer.mint("user/1/a.txt", NOW)
        assert signer.verify("user/1/b.txt", NOW, fingerprint) is False
        assert signer.verify("user/1/a.txt", NOW + 1, fingerprint) is False

    def test_different_secrets_produce_different_fingerprints(self):
        assert LinkSigner("one").mint("t", NOW) != LinkSigner("two").mint("t", NOW)

    def test_verify_does_not_check_expiry(self):
        signer = LinkSigner("secret", clock=lambda: NOW)
        past = NOW - 60_000
        assert signer.verify("t", past, signer.mint("t", past)) is True

    @pytest.mark.parametrize("fingerprint", ["", None, "abc"])
    def test_verify_rejects_malformed_fingerprints(self, fingerprint):
        assert LinkSigner("secret").verify("t", NOW, fingerprint) is False

    def test_md5_era_fingerprint_does_not_verify(self):
        legacy = hashlib.md5(f"user/1/a.txt/{NOW}/secret".encode("utf-8")).hexdigest()
        assert LinkSigner("secret").verify("user/1/a.txt", NOW, legacy) is False

    def test_empty_secret_is_rejected(self):
        with pytest.raises(ValueError):
            LinkSigner("")

    def test_link_for_uses_clock_and_ttl(self):
        signer = LinkSigner("secret", clock=lambda: NOW)
        link = signer.link_for("user/1/a.txt", 1800, "a.txt")
        assert link.expiry == NOW + 1_800_000
        assert link.filename == "a.txt"
        assert signer.verify(link.target, link.expiry, link.fingerprint)


class TestSignedAccessLink:
    def test_is_expired_strictly_before_now(self):
        link = SignedAccessLink(target="t", expiry=NOW, fingerprint="f")
        assert link.is_expired(NOW) is False
        assert link.is_expired(NOW + 1) is True

    def test_to_url_encodes_query(self):
        link = SignedAccessLink(
            target="user/1/a b.txt", expiry=NOW, fingerprint="abc", filename="a b.txt"
        )
        url = link.to_url("/api/v1/storage")
        parsed = urlparse(url)
        assert parsed.path == "/api/v1/storage"
        query = parse_qs(parsed.query)
        assert query == {
            "target": ["user/1/a b.txt"],
            "filename": ["a b.txt"],
            "expire": [str(NOW)],
            "secret": ["abc"],
        }

    def test_to_url_omits_missing_filename(self):
        link = SignedAccessLink(target="t", expiry=NOW, fingerprint="abc")
        assert "filename" not in link.to_url("/s")
