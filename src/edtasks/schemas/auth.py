"""Pydantic schemas for signup and login.

Learn: These only check shape (email format, password length, role,
teacherId present iff student). Whether the teacher exists, and whether the
email is free, is decided by the account service and the database.
"""

import re
import uuid
from typing import Literal, Optional

from pydantic import Field, field_validator, model_validator

from edtasks.schemas.common import CamelModel

EMAIL_RE = re.compile(r"^\S+@\S+\.\S+$")


def _normalize_email(value: str) -> str:
    value = value.strip().lower()
    if not EMAIL_RE.match(value):
        raise ValueError("Please provide a valid email")
    return value


class SignupRequest(CamelModel):
    email: str
    password: str = Field(..., min_length=6)
    role: Literal["student", "teacher"]
    teacher_id: Optional[str] = None

    @field_validator("email")
    @classmethod
    def check_email(cls, value: str) -> str:
        return _normalize_email(value)

    @model_validator(mode="after")
    def check_teacher_association(self):
        if self.role == "student" and not self.teacher_id:
            raise ValueError("Teacher ID is required for students")
        if self.role == "teacher" and "teacher_id" in self.model_fields_set:
            raise ValueError("Teacher ID is not allowed for teachers")
        return self


class LoginRequest(CamelModel):
    email: str
    password: str = Field(..., min_length=1)

    @field_validator("email")
    @classmethod
    def check_email(cls, value: str) -> str:
        return _normalize_email(value)


class TeacherRef(CamelModel):
    id: uuid.UUID
    email: str


class UserRead(CamelModel):
    """A user as returned to clients. Never includes the password hash."""

    id: uuid.UUID
    email: str
    role: str
    teacher_id: Optional[uuid.UUID] = None
    teacher: Optional[TeacherRef] = None


class AuthPayload(CamelModel):
    token: str
    user: UserRead
