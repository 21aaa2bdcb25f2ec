"""Identity store: user records keyed by id, unique by email.

Learn: Email uniqueness is enforced by the database's unique index, not by a
look-before-insert. Two concurrent signups for the same address both reach
INSERT; the second one fails at flush and is reported as EmailTaken.
"""

import uuid
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from edtasks.db.models import User
from edtasks.domain import Role
from edtasks.errors import EmailTaken


def normalize_email(email: str) -> str:
    return email.strip().lower()


def parse_user_id(raw) -> Optional[uuid.UUID]:
    """Parse a user id from untrusted input, None when malformed."""
    if isinstance(raw, uuid.UUID):
        return raw
    try:
        return uuid.UUID(str(raw))
    except (TypeError, ValueError, AttributeError):
        return None


class IdentityStore:
    """Reads and inserts user rows."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get(self, user_id) -> Optional[User]:
        """Look up a user by id. Malformed ids resolve to None."""
        uid = parse_user_id(user_id)
        if uid is None:
            return None
        return await self.db.get(User, uid)

    async def get_by_email(self, email: str) -> Optional[User]:
        result = await self.db.execute(
            select(User).where(User.email == normalize_email(email))
        )
        return result.scalars().first()

    async def add(self, user: User) -> User:
        """Insert a user and commit. Raises EmailTaken on a duplicate email."""
        email = user.email
        self.db.add(user)
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            if await self.get_by_email(email) is not None:
                raise EmailTaken()
            raise
        return user

    async def student_ids_for_teacher(self, teacher_id: uuid.UUID) -> list[uuid.UUID]:
        """Reverse lookup: ids of students whose teacher is teacher_id."""
        result = await self.db.execute(
            select(User.id).where(
                User.role == Role.STUDENT.value,
                User.teacher_id == teacher_id,
            )
        )
        return list(result.scalars().all())
