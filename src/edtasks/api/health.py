"""Health check and service banner.

Learn: Simple GET endpoints that verify the server is running and the
database is reachable.
"""

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from edtasks import __version__
from edtasks.db.engine import get_db

router = APIRouter()


@router.get("/")
async def index():
    """Service banner with the public endpoint list."""
    return {
        "success": True,
        "message": "EdTech Task Manager API is running!",
        "data": {
            "endpoints": {
                "auth": {
                    "signup": "POST /auth/signup",
                    "login": "POST /auth/login",
                },
                "tasks": {
                    "getAll": "GET /tasks",
                    "create": "POST /tasks",
                    "update": "PUT /tasks/:id",
                    "delete": "DELETE /tasks/:id",
                },
            }
        },
    }


@router.get("/health")
async def health_check(db: AsyncSession = Depends(get_db)):
    """Check server health and database connectivity."""
    checks = {"server": "ok", "version": __version__}

    try:
        await db.execute(text("SELECT 1"))
        checks["database"] = "ok"
    except Exception as e:
        checks["database"] = f"error: {e}"

    status = "healthy" if checks["database"] == "ok" else "degraded"
    return {"status": status, **checks}
