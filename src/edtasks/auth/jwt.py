"""JWT token creation and verification.

Learn: JWT (JSON Web Token) provides stateless authentication. Nothing is
stored server-side; the signature and the exp claim are the whole story.
Tokens carry only the user id, expire 7 days after issuance by default.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt

from edtasks.config import settings
from edtasks.errors import TokenExpired, TokenInvalid


def create_access_token(
    user_id: str,
    expires_days: Optional[int] = None,
) -> str:
    """Create a JWT access token for user_id."""
    now = datetime.now(timezone.utc)
    expires = now + timedelta(
        days=expires_days if expires_days is not None else settings.token_expire_days
    )
    payload = {
        "sub": user_id,
        "type": "access",
        "exp": expires,
        "iat": now,
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def verify_token(token: str) -> dict:
    """Verify and decode a JWT token.

    Returns the payload dict on success.
    Raises TokenExpired past exp, TokenInvalid for anything else.
    """
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
            options={"require": ["exp", "sub"]},
        )
    except jwt.ExpiredSignatureError:
        raise TokenExpired()
    except jwt.InvalidTokenError:
        raise TokenInvalid()

    if payload.get("type") != "access":
        raise TokenInvalid()
    return payload
