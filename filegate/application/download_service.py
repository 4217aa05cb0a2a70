"""
Download Service

Application service issuing signed download links for stored files and
serving the objects those links point at.
"""

import logging
import mimetypes
from dataclasses import dataclass
from datetime import datetime
from typing import BinaryIO, Optional
from urllib.parse import quote

from filegate.domain.access import DownloadAuthorizer, LinkSigner, SignedAccessLink
from filegate.domain.errors import ErrorCategory, ForbiddenError, NotFoundError
from filegate.domain.events import FileDownloadAuthorizedEvent
from filegate.domain.file_storage import FileName, IObjectStorage, user_object_path
from filegate.domain.identity import Principal

from .event_publisher import EventPublisher

logger = logging.getLogger(__name__)

DEFAULT_CONTENT_TYPE = "application/octet-stream"
PLAIN_TEXT_SUFFIXES = (".out", ".ans")
USER_NAMESPACE = "user"

# Characters RFC 5987 allows unescaped in an ext-value besides alphanumerics
# and the "-._~" that quote() never escapes.
_RFC5987_SAFE = "!#$&+^`|"


def resolve_content_type(target: str) -> str:
    """
    Guess the content type of a stored object from its path.

    Judge outputs and answers (``.out``, ``.ans``) are always plain text.
    """
    if target.endswith(PLAIN_TEXT_SUFFIXES):
        return "text/plain"
    content_type, _ = mimetypes.guess_type(target, strict=False)
    return content_type or DEFAULT_CONTENT_TYPE


def encode_rfc5987(value: str) -> str:
    """Percent-encode a header parameter value per RFC 5987."""
    return quote(value, safe=_RFC5987_SAFE, encoding="utf-8")


def attachment_disposition(filename: str) -> str:
    """Content-Disposition header value telling the client to save as ``filename``."""
    encoded = encode_rfc5987(filename)
    return f"attachment; filename=\"{encoded}\"; filename*=UTF-8''{encoded}"


@dataclass
class SignedObject:
    """
    Object content released through a valid signed link.

    Attributes:
        stream: Binary content, closed by the caller
        content_type: MIME type to serve the content with
        disposition: Content-Disposition header value, if any
    """
    stream: BinaryIO
    content_type: str
    disposition: Optional[str] = None


class DownloadService:
    """
    Application service for file downloads.

    Link issuance goes through the DownloadAuthorizer and leaves an audit
    event; link redemption checks expiry and fingerprint and never
    reveals which of the two failed.
    """

    def __init__(
        self,
        authorizer: DownloadAuthorizer,
        storage: IObjectStorage,
        link_signer: LinkSigner,
        event_publisher: Optional[EventPublisher] = None,
    ):
        """
        Initialize Download Service with dependencies.

        Args:
            authorizer: Download authorization decision
            storage: Object storage engine
            link_signer: Signer shared with the storage link builder
            event_publisher: Optional publisher for the audit event
        """
        self.authorizer = authorizer
        self.storage = storage
        self.link_signer = link_signer
        self.event_publisher = event_publisher

    def issue_link(
        self,
        requester: Principal,
        owner_id: int,
        filename: str,
        no_disposition: bool = False,
    ) -> str:
        """
        Authorize a download and mint a signed URL for it.

        Args:
            requester: Principal asking for the file
            owner_id: Owner of the file
            filename: File name in the owner's namespace
            no_disposition: Omit the filename hint so the client chooses
                how to render the content

        Returns:
            Signed URL

        Raises:
            ValidationError: If the file name is malformed
            NotFoundError: If the owner does not exist
            ForbiddenError: If the requester may not access the file
        """
        name = FileName(filename).value
        owner = self.authorizer.authorize(requester, owner_id)
        target = user_object_path(owner.id, name)

        meta = self.storage.get_meta(target)
        if self.event_publisher is not None:
            self.event_publisher.publish(
                FileDownloadAuthorizedEvent(
                    aggregate_id=str(owner.id),
                    occurred_at=datetime.utcnow(),
                    requester_id=requester.id,
                    target=target,
                    size=meta.size if meta else 0,
                )
            )

        return self.storage.sign_download_link(
            target,
            None if no_disposition else name,
            False,
            USER_NAMESPACE,
        )

    def open_link(
        self,
        target: str,
        expire: int,
        secret: str,
        filename: Optional[str] = None,
    ) -> SignedObject:
        """
        Redeem a signed link.

        Args:
            target: Storage path from the link
            expire: Expiration (Unix milliseconds) from the link
            secret: Fingerprint from the link
            filename: Optional save-as name from the link

        Returns:
            SignedObject with the content and response headers

        Raises:
            ForbiddenError: If the link is expired or its fingerprint is wrong
            NotFoundError: If the object no longer exists
        """
        link = SignedAccessLink(
            target=target, expiry=expire, fingerprint=secret, filename=filename
        )
        if link.is_expired(self.link_signer.clock()):
            logger.info(f"Rejected expired link for {target}")
            raise ForbiddenError("Link expired", ErrorCategory.INVALID_LINK)
        if not self.link_signer.verify(link.target, link.expiry, link.fingerprint):
            logger.warning(f"Rejected link with bad fingerprint for {target}")
            raise ForbiddenError("Invalid secret", ErrorCategory.INVALID_LINK)

        stream = self.storage.get(target)
        if stream is None:
            raise NotFoundError(f"Object not found: {target}", ErrorCategory.FILE_NOT_FOUND)

        return SignedObject(
            stream=stream,
            content_type=resolve_content_type(target),
            disposition=attachment_disposition(filename) if filename else None,
        )
