"""
Link Signer

Stateless service for minting and verifying temporary access links.
A link is a capability for exactly one (target, expiry) pair: it needs no
server-side lookup and cannot be forged without the server secret.
"""

import hashlib
import hmac
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional
from urllib.parse import urlencode


def current_millis() -> int:
    """Current Unix time in milliseconds."""
    return int(time.time() * 1000)


@dataclass(frozen=True)
class SignedAccessLink:
    """
    Represents a signed link with expiration.

    Never persisted; rebuilt from query parameters on every request.

    Attributes:
        target: Storage path the link grants access to
        expiry: Expiration as Unix time in milliseconds
        fingerprint: Keyed hash binding target and expiry
        filename: Optional name the client should save the content under
    """

    target: str
    expiry: int
    fingerprint: str
    filename: Optional[str] = None

    def is_expired(self, now_ms: Optional[int] = None) -> bool:
        """Check if the link has expired."""
        if now_ms is None:
            now_ms = current_millis()
        return self.expiry < now_ms

    def query_params(self) -> Dict[str, Any]:
        """Query parameters understood by the signed-fetch endpoint."""
        params = {"target": self.target}
        if self.filename:
            params["filename"] = self.filename
        params["expire"] = self.expiry
        params["secret"] = self.fingerprint
        return params

    def to_url(self, base_url: str) -> str:
        """
        Render the link as a URL.

        Args:
            base_url: URL of the signed-fetch endpoint

        Returns:
            URL with the link encoded in its query string
        """
        return f"{base_url}?{urlencode(self.query_params())}"


class LinkSigner:
    """
    Service for minting and verifying link fingerprints.

    The fingerprint is an HMAC-SHA256 over ``<target>/<expiry>`` keyed by
    the server secret. The secret is injected at construction and never
    leaves the server. Safe for concurrent use from any number of threads.

    Links minted by older deployments, which hashed
    ``<target>/<expiry>/<secret>`` with MD5, do not verify here.
    """

    def __init__(self, secret_key: str, clock: Callable[[], int] = current_millis):
        """
        Initialize LinkSigner.

        Args:
            secret_key: Server-wide link signing secret
            clock: Callable returning the current Unix time in milliseconds
        """
        if not secret_key:
            raise ValueError("secret_key cannot be empty")
        self._key = secret_key.encode("utf-8")
        self.clock = clock

    def mint(self, target: str, expiry: int) -> str:
        """
        Compute the fingerprint for a target and expiry.

        Args:
            target: Storage path
            expiry: Expiration as Unix time in milliseconds

        Returns:
            Fingerprint as hex string
        """
        message = f"{target}/{int(expiry)}"
        return hmac.new(self._key, message.encode("utf-8"), hashlib.sha256).hexdigest()

    def verify(self, target: str, expiry: int, fingerprint: str) -> bool:
        """
        Check a presented fingerprint.

        Expiry is not checked here; callers reject expired links separately.

        Args:
            target: Storage path
            expiry: Expiration as Unix time in milliseconds
            fingerprint: Fingerprint presented by the client

        Returns:
            True if the fingerprint matches, False otherwise
        """
        if not fingerprint:
            return False
        expected = self.mint(target, expiry)
        # Use constant-time comparison to prevent timing attacks
        return hmac.compare_digest(fingerprint.encode("utf-8"), expected.encode("utf-8"))

    def link_for(
        self, target: str, ttl_seconds: int, filename: Optional[str] = None
    ) -> SignedAccessLink:
        """
        Mint a link that expires ``ttl_seconds`` from now.

        Args:
            target: Storage path
            ttl_seconds: Link lifetime
            filename: Optional name hint for the client

        Returns:
            SignedAccessLink
        """
        expiry = self.clock() + int(ttl_seconds) * 1000
        return SignedAccessLink(
            target=target,
            expiry=expiry,
            fingerprint=self.mint(target, expiry),
            filename=filename,
        )
