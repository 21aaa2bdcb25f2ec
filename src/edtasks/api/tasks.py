"""Task API routes.

Learn: These routes are the HTTP interface to the task service. The
service owns every authorization decision; routes translate HTTP to service
calls and wrap results in the response envelope.

- GET    /tasks      → tasks visible to the caller, newest first
- POST   /tasks      → create, owner forced to the caller
- PUT    /tasks/{id} → partial update, owner only (403 otherwise, 404 if gone)
- DELETE /tasks/{id} → delete, owner only (403 otherwise, 404 if gone)

Task ids are taken as plain strings and parsed by the core, so a malformed
id is a 404 like any other missing task.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from edtasks.auth.dependencies import get_current_user
from edtasks.db.engine import get_db
from edtasks.domain import Subject
from edtasks.schemas.common import Envelope
from edtasks.schemas.task import (
    TaskCreate,
    TaskEnvelopeData,
    TaskList,
    TaskRead,
    TaskUpdate,
)
from edtasks.services.task_service import TaskService

router = APIRouter(prefix="/tasks")


def _task_svc(db: AsyncSession = Depends(get_db)) -> TaskService:
    return TaskService(db)


@router.get("", response_model=Envelope[TaskList])
async def list_tasks(
    subject: Subject = Depends(get_current_user),
    svc: TaskService = Depends(_task_svc),
):
    """List the caller's visible tasks."""
    tasks = await svc.list_tasks(subject)
    return Envelope(data=TaskList(tasks=[TaskRead.model_validate(t) for t in tasks]))


@router.post("", response_model=Envelope[TaskEnvelopeData], status_code=201)
async def create_task(
    body: TaskCreate,
    subject: Subject = Depends(get_current_user),
    svc: TaskService = Depends(_task_svc),
):
    """Create a task owned by the caller."""
    task = await svc.create_task(
        subject,
        title=body.title,
        description=body.description,
        due_date=body.due_date,
        progress=body.progress,
    )
    return Envelope(
        message="Task created successfully",
        data=TaskEnvelopeData(task=TaskRead.model_validate(task)),
    )


@router.put("/{task_id}", response_model=Envelope[TaskEnvelopeData])
async def update_task(
    task_id: str,
    body: TaskUpdate,
    subject: Subject = Depends(get_current_user),
    svc: TaskService = Depends(_task_svc),
):
    """Partially update one of the caller's own tasks."""
    task = await svc.update_task(subject, task_id, body.changes())
    return Envelope(
        message="Task updated successfully",
        data=TaskEnvelopeData(task=TaskRead.model_validate(task)),
    )


@router.delete("/{task_id}", response_model=Envelope[None])
async def delete_task(
    task_id: str,
    subject: Subject = Depends(get_current_user),
    svc: TaskService = Depends(_task_svc),
):
    """Delete one of the caller's own tasks."""
    await svc.delete_task(subject, task_id)
    return Envelope(message="Task deleted successfully")
