"""Runtime flags for clients.

Learn: Read once by the UI at startup (which AI model is enabled, etc.).
These flags come straight from settings and play no part in authorization.
"""

from fastapi import APIRouter

from edtasks.config import settings

router = APIRouter()


@router.get("/config")
async def get_runtime_config():
    """Expose the minimal runtime flags clients need."""
    return {
        "success": True,
        "data": {
            "enableGpt5Mini": settings.enable_gpt5_mini,
            "aiModel": settings.default_ai_model,
        },
    }
