"""Task service: create, update and delete under the ownership policy.

Learn: Every mutation is re-fetch → check → write inside one transaction:
1. Re-read the task from the database (never a cached copy), locking the row
2. Missing task (or missing owner) → NotFoundError
3. Subject is not the owner → AuthorizationError (403, even for the
   owner's teacher, who can read but never write)
4. Apply the change and commit

Because the id in the path is already well-formed, "not yours" is reported
as 403 rather than hidden behind a 404.
"""

from datetime import datetime
from typing import Any, Optional

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from edtasks.auth.policy import can_mutate
from edtasks.db.models import Task
from edtasks.domain import DEFAULT_PROGRESS, Subject
from edtasks.errors import AuthorizationError, NotFoundError
from edtasks.services.task_store import TaskStore
from edtasks.services.visibility import list_visible_tasks

logger = structlog.get_logger()

UPDATABLE_FIELDS = ("title", "description", "due_date", "progress")


class TaskService:
    """Business logic for task CRUD under the ownership policy."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.tasks = TaskStore(db)

    # ─── Create ──────────────────────────────────────────

    async def create_task(
        self,
        subject: Subject,
        title: str,
        description: str,
        due_date: Optional[datetime] = None,
        progress: Optional[str] = None,
    ) -> Task:
        """Create a task owned by the subject. The owner is never taken from input."""
        task = Task(
            owner_id=subject.id,
            title=title,
            description=description,
            due_date=due_date,
            progress=progress or DEFAULT_PROGRESS,
        )
        await self.tasks.add(task)
        await self.db.commit()
        logger.info("tasks.created", task_id=task.id, owner_id=str(subject.id))
        return await self.tasks.get(task.id, fresh=True)

    # ─── Read ────────────────────────────────────────────

    async def list_tasks(self, subject: Subject) -> list[Task]:
        return await list_visible_tasks(self.db, subject)

    # ─── Update / Delete ─────────────────────────────────

    async def update_task(
        self, subject: Subject, task_id, changes: dict[str, Any]
    ) -> Task:
        """Apply a partial update. Only keys present in changes are written."""
        task = await self._load_for_mutation(subject, task_id, action="update")

        for field, value in changes.items():
            if field in UPDATABLE_FIELDS:
                setattr(task, field, value)

        await self.db.commit()
        logger.info("tasks.updated", task_id=task.id, fields=sorted(changes))
        return await self.tasks.get(task.id, fresh=True)

    async def delete_task(self, subject: Subject, task_id) -> None:
        task = await self._load_for_mutation(subject, task_id, action="delete")
        deleted_id = task.id
        await self.tasks.delete(task)
        await self.db.commit()
        logger.info("tasks.deleted", task_id=deleted_id)

    async def _load_for_mutation(self, subject: Subject, task_id, action: str) -> Task:
        task = await self.tasks.get(task_id, for_update=True)
        if task is None or task.owner is None:
            await self.db.rollback()
            raise NotFoundError("Task not found")
        if not can_mutate(subject, task):
            # rollback expires every loaded instance, log while task is still readable
            logger.warning(
                "tasks.mutation_denied",
                task_id=task.id,
                owner_id=str(task.owner_id),
                subject_id=str(subject.id),
                action=action,
            )
            await self.db.rollback()
            raise AuthorizationError(f"You can only {action} your own tasks")
        return task
