"""SQLAlchemy ORM models, single source of truth for the database schema.

Learn: Declarative ORM mapping with SQLAlchemy 2.0 style (Mapped[] + mapped_column).
Each class = one table. Relationships, constraints, and indexes defined here.
Alembic migrations in db/migrations mirror these definitions.

Key concepts:
- UUID primary keys for users, autoincrement ids for tasks
- The email column holds the normalized (trimmed, lower-cased) address and
  carries the unique index that settles concurrent signups
- A CHECK constraint mirrors the Student/Teacher variant: teacher_id is set
  for students and only for students
- Python-side timestamp defaults so values are known right after flush
"""

import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Uuid,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class Base(DeclarativeBase):
    """Base class for all models."""
    pass


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_uuid() -> uuid.UUID:
    return uuid.uuid4()


class User(Base):
    """A student or a teacher.

    Learn: role is immutable after signup. Students point at their teacher
    through teacher_id; the reverse lookup (a teacher's students) is served
    by idx_users_teacher.
    """

    __tablename__ = "users"
    __table_args__ = (
        CheckConstraint("role IN ('student', 'teacher')", name="ck_users_role"),
        CheckConstraint(
            "(role = 'student' AND teacher_id IS NOT NULL)"
            " OR (role = 'teacher' AND teacher_id IS NULL)",
            name="ck_users_teacher_association",
        ),
        Index("idx_users_teacher", "teacher_id"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=new_uuid)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[str] = mapped_column(String(20), nullable=False)
    teacher_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="RESTRICT"), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )


class Task(Base):
    """A unit of work owned by exactly one user.

    Learn: owner_id never changes after creation. Tasks are listed newest
    first; idx_tasks_owner_created serves "by owner, newest first".
    """

    __tablename__ = "tasks"
    __table_args__ = (
        CheckConstraint(
            "progress IN ('not-started', 'in-progress', 'completed')",
            name="ck_tasks_progress",
        ),
        Index("idx_tasks_owner_created", "owner_id", "created_at"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    owner_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="RESTRICT"), nullable=False
    )
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str] = mapped_column(String(1000), nullable=False)
    due_date: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    progress: Mapped[str] = mapped_column(
        String(20), nullable=False, default="not-started"
    )

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow
    )

    # Relationships
    owner: Mapped[Optional["User"]] = relationship(lazy="joined", innerjoin=False)
