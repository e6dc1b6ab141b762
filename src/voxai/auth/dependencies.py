"""FastAPI auth dependencies: the session guard.

Learn: These are used as Depends() in route handlers (or at the
include_router level) to extract and validate the caller from the
``x-auth-token`` header. Possession of a valid token is enough for
every protected route; there are no roles.
"""

from typing import Optional

import structlog
from fastapi import Header

from voxai.auth.jwt import verify_token
from voxai.errors import MissingToken, TokenError

logger = structlog.get_logger()


class CurrentIdentity:
    """Represents the authenticated caller of a request."""

    def __init__(self, user_id: str):
        self.user_id = user_id

    def __repr__(self) -> str:
        return f"CurrentIdentity(user_id={self.user_id!r})"


def authenticate(token: Optional[str]) -> CurrentIdentity:
    """Resolve a raw header value to an identity.

    Raises MissingToken, InvalidToken or ExpiredToken.
    """
    if not token:
        raise MissingToken()
    try:
        payload = verify_token(token)
    except TokenError as e:
        logger.info("auth.token_rejected", reason=e.code)
        raise
    return CurrentIdentity(user_id=payload["sub"])


async def get_current_user(
    x_auth_token: Optional[str] = Header(None),
) -> CurrentIdentity:
    """Resolve the caller of a protected request (401 without a valid token)."""
    return authenticate(x_auth_token)
