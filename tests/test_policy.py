"""Authorization engine and visibility resolver tests.

Learn: can_read / can_mutate are pure, so most cases use transient ORM
objects and never touch the database. The visibility tests build a small
school in the database and check that list_visible_tasks returns exactly
the tasks can_read allows, nothing missing and nothing extra.
"""

import uuid

import pytest
import pytest_asyncio
from sqlalchemy import select

from edtasks.auth.policy import can_assign_teacher, can_mutate, can_read
from edtasks.db.models import Task, User
from edtasks.domain import Student, Teacher, as_subject
from edtasks.services.identity_store import IdentityStore
from edtasks.services.visibility import list_visible_tasks


def _teacher_row(**kw) -> User:
    return User(id=uuid.uuid4(), email=f"{uuid.uuid4().hex[:6]}@t.example", role="teacher",
                password_hash="x", **kw)


def _student_row(teacher: User) -> User:
    return User(id=uuid.uuid4(), email=f"{uuid.uuid4().hex[:6]}@s.example", role="student",
                password_hash="x", teacher_id=teacher.id)


def _task_for(owner: User) -> Task:
    return Task(id=1, owner_id=owner.id, owner=owner, title="t", description="d")


# ═══════════════════════════════════════════════════════════
# can_read / can_mutate
# ═══════════════════════════════════════════════════════════


def test_owner_can_read_and_mutate():
    teacher = _teacher_row()
    student = _student_row(teacher)
    for owner in (teacher, student):
        task = _task_for(owner)
        subject = as_subject(owner)
        assert can_read(subject, task)
        assert can_mutate(subject, task)


def test_teacher_reads_but_never_mutates_student_task():
    teacher = _teacher_row()
    task = _task_for(_student_row(teacher))
    subject = as_subject(teacher)
    assert can_read(subject, task)
    assert not can_mutate(subject, task)


def test_other_teacher_cannot_read_student_task():
    teacher, other = _teacher_row(), _teacher_row()
    task = _task_for(_student_row(teacher))
    assert not can_read(as_subject(other), task)
    assert not can_mutate(as_subject(other), task)


def test_classmate_cannot_read_student_task():
    teacher = _teacher_row()
    task = _task_for(_student_row(teacher))
    classmate = as_subject(_student_row(teacher))
    assert not can_read(classmate, task)
    assert not can_mutate(classmate, task)


def test_student_cannot_read_own_teachers_task():
    teacher = _teacher_row()
    student = as_subject(_student_row(teacher))
    task = _task_for(teacher)
    assert not can_read(student, task)
    assert not can_mutate(student, task)


def test_teacher_cannot_read_other_teachers_task():
    task = _task_for(_teacher_row())
    assert not can_read(as_subject(_teacher_row()), task)


def test_ownerless_task_is_neither_readable_nor_mutable():
    teacher = _teacher_row()
    task = Task(id=1, owner_id=teacher.id, title="t", description="d")
    subject = as_subject(teacher)
    assert not can_read(subject, task)
    assert not can_mutate(subject, task)


def test_as_subject_builds_variant():
    teacher = _teacher_row()
    student = _student_row(teacher)
    assert as_subject(teacher) == Teacher(id=teacher.id, email=teacher.email)
    assert as_subject(student) == Student(
        id=student.id, email=student.email, teacher_id=teacher.id
    )
    assert as_subject(student).role.value == "student"


def test_as_subject_rejects_student_without_teacher():
    broken = User(id=uuid.uuid4(), email="x@example.com", role="student", password_hash="x")
    with pytest.raises(ValueError):
        as_subject(broken)


# ═══════════════════════════════════════════════════════════
# can_assign_teacher
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_can_assign_teacher(db_session):
    teacher = _teacher_row()
    db_session.add(teacher)
    await db_session.flush()
    student = _student_row(teacher)
    db_session.add(student)
    await db_session.commit()

    users = IdentityStore(db_session)
    assert await can_assign_teacher(users, teacher.id)
    assert await can_assign_teacher(users, str(teacher.id))
    assert not await can_assign_teacher(users, student.id)
    assert not await can_assign_teacher(users, uuid.uuid4())
    assert not await can_assign_teacher(users, "not-a-uuid")
    assert not await can_assign_teacher(users, None)


# ═══════════════════════════════════════════════════════════
# Visibility
# ═══════════════════════════════════════════════════════════


@pytest_asyncio.fixture()
async def school(db_session):
    """Two classes, each with a teacher, two students, and tasks for everyone."""
    t1, t2 = _teacher_row(), _teacher_row()
    db_session.add_all([t1, t2])
    await db_session.flush()
    students = [_student_row(t1), _student_row(t1), _student_row(t2), _student_row(t2)]
    db_session.add_all(students)
    await db_session.flush()

    users = [t1, t2, *students]
    for i, owner in enumerate(users):
        for j in range(2):
            db_session.add(
                Task(owner_id=owner.id, title=f"task {i}.{j}", description="work")
            )
    await db_session.commit()
    return users


@pytest.mark.asyncio
async def test_visible_set_matches_can_read(db_session, school):
    result = await db_session.execute(
        select(Task).execution_options(populate_existing=True)
    )
    all_tasks = list(result.unique().scalars().all())
    assert len(all_tasks) == 12

    for user in school:
        subject = as_subject(user)
        visible = await list_visible_tasks(db_session, subject)
        expected = {t.id for t in all_tasks if can_read(subject, t)}
        assert {t.id for t in visible} == expected
        assert len(visible) == len(expected)


@pytest.mark.asyncio
async def test_visible_set_sizes(db_session, school):
    t1, t2, s1, *_ = school
    assert len(await list_visible_tasks(db_session, as_subject(t1))) == 6
    assert len(await list_visible_tasks(db_session, as_subject(t2))) == 6
    assert len(await list_visible_tasks(db_session, as_subject(s1))) == 2


@pytest.mark.asyncio
async def test_visible_tasks_newest_first(db_session, school):
    visible = await list_visible_tasks(db_session, as_subject(school[0]))
    keys = [(t.created_at, t.id) for t in visible]
    assert keys == sorted(keys, reverse=True)


@pytest.mark.asyncio
async def test_teacher_without_students_sees_only_own(db_session):
    lonely = _teacher_row()
    db_session.add(lonely)
    await db_session.flush()
    db_session.add(Task(owner_id=lonely.id, title="solo", description="work"))
    await db_session.commit()

    visible = await list_visible_tasks(db_session, as_subject(lonely))
    assert [t.title for t in visible] == ["solo"]
