"""Authenticated subjects as a tagged variant.

A user is either a Teacher or a Student bound to exactly one teacher. Code
that needs the teacher association pattern-matches on the variant instead of
checking a nullable column, so "teacher_id present iff student" holds by
construction.
"""

import uuid
from dataclasses import dataclass
from enum import Enum
from typing import Union


class Role(str, Enum):
    STUDENT = "student"
    TEACHER = "teacher"


TASK_PROGRESS = ("not-started", "in-progress", "completed")
DEFAULT_PROGRESS = "not-started"


@dataclass(frozen=True)
class Teacher:
    id: uuid.UUID
    email: str

    @property
    def role(self) -> Role:
        return Role.TEACHER


@dataclass(frozen=True)
class Student:
    id: uuid.UUID
    email: str
    teacher_id: uuid.UUID

    @property
    def role(self) -> Role:
        return Role.STUDENT


Subject = Union[Student, Teacher]


def as_subject(user) -> Subject:
    """Build the variant for a stored user row."""
    if user.role == Role.TEACHER.value:
        return Teacher(id=user.id, email=user.email)
    if user.teacher_id is None:
        raise ValueError(f"student {user.id} has no teacher association")
    return Student(id=user.id, email=user.email, teacher_id=user.teacher_id)
