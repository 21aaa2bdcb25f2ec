"""Credential service: passwords in, tokens out, tokens back to subjects."""

from sqlalchemy.ext.asyncio import AsyncSession

from edtasks.auth.jwt import create_access_token, verify_token
from edtasks.auth.password import verify_password
from edtasks.domain import Subject, as_subject
from edtasks.errors import TokenInvalid, TokenMissing
from edtasks.services.identity_store import IdentityStore

__all__ = ["issue_token", "resolve_token", "verify_password"]


def issue_token(user_id) -> str:
    return create_access_token(str(user_id))


async def resolve_token(db: AsyncSession, token) -> Subject:
    """Turn a bearer token into the authenticated subject.

    Raises TokenMissing, TokenInvalid or TokenExpired. A token for a user
    that no longer exists is TokenInvalid.
    """
    if not token:
        raise TokenMissing()
    payload = verify_token(token)
    user = await IdentityStore(db).get(payload["sub"])
    if user is None:
        raise TokenInvalid("Invalid authentication token")
    return as_subject(user)
