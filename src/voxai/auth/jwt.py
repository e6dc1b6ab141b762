"""Session token creation and verification.

Learn: A session token is an HS256 JWT with three claims:
- sub: the user id
- iat: issue time, whole seconds
- exp: iat + token_expire_days (7 by default)

Verification is a pure function of the token, the secret and the
clock, so it needs no locking and no server-side session table.
The signature is checked before the expiry, so a forged token is
always reported as invalid, never as expired.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt

from voxai.config import settings
from voxai.errors import ExpiredToken, InvalidToken

REQUIRED_CLAIMS = ["sub", "iat", "exp"]


def create_session_token(
    user_id: str,
    issued_at: Optional[datetime] = None,
    expires_days: Optional[int] = None,
    secret: Optional[str] = None,
) -> str:
    """Create a signed session token for ``user_id``."""
    issued = (issued_at or datetime.now(timezone.utc)).replace(microsecond=0)
    if expires_days is None:
        expires_days = settings.token_expire_days
    expires = issued + timedelta(days=expires_days)
    payload = {
        "sub": user_id,
        "iat": issued,
        "exp": expires,
    }
    return jwt.encode(
        payload, secret or settings.jwt_secret, algorithm=settings.jwt_algorithm
    )


def verify_token(token: str, secret: Optional[str] = None) -> dict:
    """Verify and decode a session token.

    Returns the payload dict on success.
    Raises ExpiredToken or InvalidToken on failure.
    """
    try:
        return jwt.decode(
            token,
            secret or settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
            options={"require": REQUIRED_CLAIMS},
        )
    except jwt.ExpiredSignatureError:
        raise ExpiredToken()
    except jwt.InvalidTokenError as e:
        raise InvalidToken(f"Token is not valid: {e}")


def decode_unverified(token: str) -> dict:
    """Read the claims of a token without checking its signature or expiry.

    Learn: Used client-side, where the signing secret is unknown. The
    result is only good for local decisions such as "is this token
    already past its expiry"; the server still verifies every request.
    """
    try:
        return jwt.decode(token, options={"verify_signature": False})
    except jwt.InvalidTokenError as e:
        raise InvalidToken(f"Token is not valid: {e}")


def token_expiry(token: str) -> datetime:
    """Return the ``exp`` claim of an unverified token as an aware datetime."""
    claims = decode_unverified(token)
    try:
        return datetime.fromtimestamp(int(claims["exp"]), tz=timezone.utc)
    except (KeyError, TypeError, ValueError, OverflowError):
        raise InvalidToken("Token has no usable expiry")
