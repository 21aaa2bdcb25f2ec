"""Account service: signup and login.

Learn: Signup validates the teacher association before anything is
written, then inserts the user in a single commit. If the teacher check
fails, or the unique email index rejects the insert, no user row exists.

Login gives the same InvalidCredentials for "no such email" and "wrong
password", and spends one bcrypt verification either way.
"""

import uuid
from dataclasses import dataclass
from typing import Optional

import structlog
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from edtasks.auth.credentials import issue_token, verify_password
from edtasks.auth.password import dummy_hash, hash_password
from edtasks.auth.policy import can_assign_teacher
from edtasks.db.models import User
from edtasks.domain import Role, Student, Subject, as_subject
from edtasks.errors import InvalidCredentials, TeacherNotFound, ValidationError
from edtasks.services.identity_store import IdentityStore, normalize_email, parse_user_id

logger = structlog.get_logger()


@dataclass(frozen=True)
class AuthResult:
    """A fresh session: the token plus who it belongs to."""

    token: str
    subject: Subject
    teacher: Optional[User] = None


class AccountService:
    """Signup/login flows on top of the identity store."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.users = IdentityStore(db)

    async def signup(
        self,
        email: str,
        password: str,
        role: str,
        teacher_id: Optional[str] = None,
    ) -> AuthResult:
        if role == Role.STUDENT.value:
            if not teacher_id:
                raise ValidationError("Teacher ID is required for students")
            if not await can_assign_teacher(self.users, teacher_id):
                raise TeacherNotFound()
            teacher_ref: Optional[uuid.UUID] = parse_user_id(teacher_id)
        elif role == Role.TEACHER.value:
            if teacher_id is not None:
                raise ValidationError("Teachers cannot have a teacher ID")
            teacher_ref = None
        else:
            raise ValidationError("Role must be either student or teacher")

        user = User(
            email=normalize_email(email),
            password_hash=hash_password(password),
            role=role,
            teacher_id=teacher_ref,
        )
        try:
            await self.users.add(user)
        except IntegrityError:
            # Past the email index, only the teacher FK is left to trip.
            raise TeacherNotFound()
        logger.info("auth.signup", user_id=str(user.id), role=role)

        return await self._session_for(user)

    async def login(self, email: str, password: str) -> AuthResult:
        user = await self.users.get_by_email(email)
        if user is None:
            verify_password(password, dummy_hash())
            logger.info("auth.login_failed")
            raise InvalidCredentials()
        if not verify_password(password, user.password_hash):
            logger.info("auth.login_failed")
            raise InvalidCredentials()

        logger.info("auth.login", user_id=str(user.id))
        return await self._session_for(user)

    async def _session_for(self, user: User) -> AuthResult:
        subject = as_subject(user)
        teacher = None
        if isinstance(subject, Student):
            teacher = await self.users.get(subject.teacher_id)
        return AuthResult(token=issue_token(user.id), subject=subject, teacher=teacher)
