from __future__ import annotations

import logging

from crm.config import settings
from crm.utils.exceptions import AuthenticationError

logger = logging.getLogger(__name__)


def resolve_user_id(header_user_id: str | None) -> str:
    """Pick the data partition for a request.

    An explicit user id wins; otherwise fall back to the anonymous session
    when allowed.
    """
    if header_user_id and header_user_id.strip():
        return header_user_id.strip()
    if settings.allow_anonymous:
        return settings.anonymous_user_id
    logger.warning("Rejected request without a user id (anonymous sessions disabled)")
    raise AuthenticationError("Not signed in and anonymous sessions are disabled")
