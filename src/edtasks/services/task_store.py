"""Task store: task records keyed by id, listed by owner newest first."""

from collections.abc import Collection
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from edtasks.db.models import Task


# tasks.id is a 32-bit INTEGER column
MAX_TASK_ID = 2**31 - 1


def parse_task_id(raw) -> Optional[int]:
    """Parse a task id from a path segment.

    None when malformed or outside the range the id column can hold, so an
    oversized id is simply not found instead of failing in the driver.
    """
    if isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        value = raw
    else:
        text = str(raw).strip()
        if not (text.isascii() and text.isdigit()):
            return None
        value = int(text)
    if not 1 <= value <= MAX_TASK_ID:
        return None
    return value


class TaskStore:
    """Reads and writes task rows. Owners are always eager-loaded."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def add(self, task: Task) -> Task:
        self.db.add(task)
        await self.db.flush()  # get auto-generated ID
        return task

    async def get(
        self, task_id, *, for_update: bool = False, fresh: bool = False
    ) -> Optional[Task]:
        """Fetch a task with its owner.

        fresh re-reads the row from the database, overwriting whatever the
        session already holds. for_update implies fresh and also locks the
        row where the backend supports it. Malformed ids resolve to None.
        """
        tid = parse_task_id(task_id)
        if tid is None:
            return None
        query = select(Task).where(Task.id == tid)
        if for_update:
            query = query.with_for_update(of=Task)
        if for_update or fresh:
            query = query.execution_options(populate_existing=True)
        result = await self.db.execute(query)
        return result.unique().scalars().first()

    async def list_by_owners(self, owner_ids: Collection) -> list[Task]:
        """Tasks owned by any of owner_ids, newest first.

        Ties on created_at fall back to the later insert (higher id) first.
        """
        if not owner_ids:
            return []
        result = await self.db.execute(
            select(Task)
            .where(Task.owner_id.in_(list(owner_ids)))
            .order_by(Task.created_at.desc(), Task.id.desc())
            .execution_options(populate_existing=True)
        )
        return list(result.unique().scalars().all())

    async def delete(self, task: Task) -> None:
        await self.db.delete(task)
