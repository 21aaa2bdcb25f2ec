"""Authorization engine.

Learn: Reads are broadened, writes are narrowed.

- can_read: the owner, plus the owner's teacher when the owner is a student.
- can_mutate: the owner and nobody else. A teacher who can read a student's
  task still cannot update or delete it.
- can_assign_teacher: a signup may only link a student to an existing
  teacher account.

can_read and can_mutate are pure functions of (subject, task). The task must
have its owner loaded; a task whose owner row is gone is neither readable nor
mutable.
"""

from edtasks.db.models import Task
from edtasks.domain import Role, Subject, Teacher
from edtasks.services.identity_store import IdentityStore


def can_read(subject: Subject, task: Task) -> bool:
    owner = task.owner
    if owner is None:
        return False
    if owner.id == subject.id:
        return True
    return (
        isinstance(subject, Teacher)
        and owner.role == Role.STUDENT.value
        and owner.teacher_id == subject.id
    )


def can_mutate(subject: Subject, task: Task) -> bool:
    if task.owner is None:
        return False
    return task.owner_id == subject.id


async def can_assign_teacher(users: IdentityStore, candidate_teacher_id) -> bool:
    """True only if candidate_teacher_id names an existing teacher."""
    candidate = await users.get(candidate_teacher_id)
    return candidate is not None and candidate.role == Role.TEACHER.value
