"""Task visibility resolver.

Learn: The visible set is a union, computed in two steps:
1. Reverse lookup of the subject's students (teachers only).
2. Tasks owned by {subject} ∪ those students, newest first.

Students skip step 1 and see only their own tasks. The result is exactly
the set of tasks for which policy.can_read(subject, task) holds.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from edtasks.auth.policy import can_read
from edtasks.db.models import Task
from edtasks.domain import Subject, Teacher
from edtasks.services.identity_store import IdentityStore
from edtasks.services.task_store import TaskStore


async def list_visible_tasks(db: AsyncSession, subject: Subject) -> list[Task]:
    owner_ids = {subject.id}
    if isinstance(subject, Teacher):
        owner_ids.update(await IdentityStore(db).student_ids_for_teacher(subject.id))

    tasks = await TaskStore(db).list_by_owners(owner_ids)
    # Owner rows are FK-protected; the filter only drops rows the policy rejects.
    return [task for task in tasks if can_read(subject, task)]
