"""Test fixtures: a fresh in-memory database per test.

Learn: Testing pattern for async SQLAlchemy + FastAPI:

1. Each test gets its own in-memory SQLite engine (aiosqlite, StaticPool so
   every session shares the one connection) with foreign keys switched on.
2. The schema is created from the ORM metadata.
3. get_db is overridden to open a new session per request, like production.
4. The engine is disposed after the test, so nothing leaks between tests.

bcrypt runs at its minimum work factor to keep the suite fast.
"""

import os

os.environ.setdefault("EDTASKS_BCRYPT_ROUNDS", "4")

import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy import event  # noqa: E402
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from edtasks.db.engine import get_db  # noqa: E402
from edtasks.db.models import Base  # noqa: E402
from edtasks.main import app  # noqa: E402
from helpers import signup  # noqa: E402

TEST_DB_URL = "sqlite+aiosqlite://"


@pytest_asyncio.fixture()
async def engine():
    engine = create_async_engine(TEST_DB_URL, poolclass=StaticPool, echo=False)

    @event.listens_for(engine.sync_engine, "connect")
    def _enable_foreign_keys(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    try:
        yield engine
    finally:
        await engine.dispose()


@pytest_asyncio.fixture()
async def session_factory(engine):
    return async_sessionmaker(engine, expire_on_commit=False)


@pytest_asyncio.fixture()
async def db_session(session_factory):
    """A session for service- and store-level tests."""
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture()
async def client(session_factory):
    """HTTP client against the real app, auth pipeline untouched."""

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


# ═══════════════════════════════════════════════════════════
# Accounts
# ═══════════════════════════════════════════════════════════


@pytest_asyncio.fixture()
async def teacher(client):
    return await signup(client, "teacher")


@pytest_asyncio.fixture()
async def other_teacher(client):
    return await signup(client, "other-teacher")


@pytest_asyncio.fixture()
async def student(client, teacher):
    """A student assigned to `teacher`."""
    return await signup(client, "student", role="student", teacher_id=teacher["user"]["id"])


@pytest_asyncio.fixture()
async def classmate(client, teacher):
    """A second student assigned to the same `teacher`."""
    return await signup(client, "classmate", role="student", teacher_id=teacher["user"]["id"])


@pytest_asyncio.fixture()
async def outsider(client, other_teacher):
    """A student assigned to `other_teacher`."""
    return await signup(
        client, "outsider", role="student", teacher_id=other_teacher["user"]["id"]
    )
