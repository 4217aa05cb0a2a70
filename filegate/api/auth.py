"""
Request Principal Resolution

The upstream gateway authenticates users and forwards their id in the
``X-Principal-Id`` header. Requests without a known id act as the
anonymous principal.
"""

import logging

from flask import current_app, g, request

from filegate.domain.access import SYSTEM_REALM
from filegate.domain.identity import Principal, PrincipalRepository

logger = logging.getLogger(__name__)

PRINCIPAL_HEADER = "X-Principal-Id"


def load_principal() -> None:
    """Resolve the requesting principal into ``g.principal``."""
    g.principal = Principal.anonymous()

    raw_id = request.headers.get(PRINCIPAL_HEADER, "").strip()
    if not raw_id.isdigit():
        return

    repository = current_app.container.resolve(PrincipalRepository)
    principal = repository.get_by_id(SYSTEM_REALM, int(raw_id))
    if principal is None:
        logger.debug(f"Unknown principal id {raw_id}, continuing as anonymous")
        return
    g.principal = principal


def current_principal() -> Principal:
    """The principal load_principal() resolved for this request."""
    return g.get("principal") or Principal.anonymous()
