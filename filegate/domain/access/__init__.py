"""
Access Domain

Signed temporary links and the download authorization decision.
"""

from .authorizer import SYSTEM_REALM, DownloadAuthorizer
from .link_signer import LinkSigner, SignedAccessLink, current_millis

__all__ = [
    "DownloadAuthorizer",
    "LinkSigner",
    "SYSTEM_REALM",
    "SignedAccessLink",
    "current_millis",
]
