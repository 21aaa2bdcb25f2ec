"""Pydantic schemas for tasks.

Learn: Separate schemas for create/update/read keeps the API clean.
- TaskCreate: what you POST to create a task (owner is never read from it)
- TaskUpdate: what you PUT to modify a task (all optional, at least one)
- TaskRead: what the API returns, with the owner's identity attached
"""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import Field, model_validator

from edtasks.schemas.common import CamelModel

PROGRESS_PATTERN = r"^(not-started|in-progress|completed)$"


class TaskCreate(CamelModel):
    model_config = {"str_strip_whitespace": True}

    title: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=1, max_length=1000)
    due_date: Optional[datetime] = None
    progress: Optional[str] = Field(None, pattern=PROGRESS_PATTERN)


class TaskUpdate(CamelModel):
    """Partial update, only fields present in the body are applied."""

    model_config = {"str_strip_whitespace": True}

    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = Field(None, min_length=1, max_length=1000)
    due_date: Optional[datetime] = None
    progress: Optional[str] = Field(None, pattern=PROGRESS_PATTERN)

    @model_validator(mode="after")
    def check_fields(self):
        if not self.model_fields_set:
            raise ValueError("At least one field must be provided")
        for name in ("title", "description", "progress"):
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        return self

    def changes(self) -> dict:
        return self.model_dump(include=self.model_fields_set)


class OwnerRead(CamelModel):
    id: uuid.UUID
    email: str
    role: str


class TaskRead(CamelModel):
    id: int
    owner_id: uuid.UUID
    owner: Optional[OwnerRead] = None
    title: str
    description: str
    due_date: Optional[datetime] = None
    progress: str
    created_at: datetime
    updated_at: datetime


class TaskList(CamelModel):
    tasks: list[TaskRead]


class TaskEnvelopeData(CamelModel):
    task: TaskRead
