"""FastAPI auth dependencies.

Learn: These are used as Depends() in route handlers to extract and validate
the current subject from the request. Only one mechanism exists: a Bearer
JWT in the Authorization header. A missing or malformed header fails before
any request body is looked at.
"""

from typing import Optional

from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from edtasks.auth.credentials import resolve_token
from edtasks.db.engine import get_db
from edtasks.domain import Subject
from edtasks.errors import TokenMissing


def bearer_token(authorization: Optional[str]) -> str:
    """Extract the token from an "Authorization: Bearer <token>" header."""
    if not authorization or not authorization.startswith("Bearer "):
        raise TokenMissing()
    token = authorization[7:].strip()
    if not token:
        raise TokenMissing()
    return token


async def get_current_user(
    authorization: Optional[str] = Header(None),
    db: AsyncSession = Depends(get_db),
) -> Subject:
    """Resolve the request's subject (required, 401 if absent or bad)."""
    return await resolve_token(db, bearer_token(authorization))
