"""API route aggregation.

All routers registered here get mounted in main.py.

Learn: Auth is applied at the include_router level using FastAPI's
dependencies parameter, so every task route is protected even before its
handler asks for the subject. Health, config and auth routers are open.
"""

from fastapi import APIRouter, Depends

from edtasks.api.auth import router as auth_router
from edtasks.api.health import router as health_router
from edtasks.api.runtime_config import router as config_router
from edtasks.api.tasks import router as tasks_router
from edtasks.auth.dependencies import get_current_user

# All protected routers require authentication
_auth = [Depends(get_current_user)]

api_router = APIRouter()

# Open routes, no auth required
api_router.include_router(health_router, tags=["health"])
api_router.include_router(config_router, tags=["config"])
api_router.include_router(auth_router, tags=["auth"])

# Protected routes, require a valid JWT
api_router.include_router(tasks_router, tags=["tasks"], dependencies=_auth)
