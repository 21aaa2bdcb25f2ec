"""FastAPI application factory.

Learn: App factory pattern, create_app() returns a configured FastAPI
instance. Lifespan manages startup/shutdown (Redis, database engine).
Middleware, CORS, error handlers and routers are all registered here.
"""

from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from edtasks import __version__, redis_client
from edtasks.api import api_router
from edtasks.api.errors import register_error_handlers
from edtasks.config import settings

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown lifecycle.

    Anything before `yield` runs at startup, after `yield` runs at shutdown.
    """
    logger.info(
        "edtasks.starting",
        version=__version__,
        environment=settings.environment,
        port=settings.port,
    )

    try:
        await redis_client.init_redis()
        logger.info("edtasks.redis_connected", url=settings.redis_url)
    except Exception as e:
        # Redis is optional, login throttling is skipped without it
        logger.warning("edtasks.redis_unavailable", error=str(e))

    yield

    logger.info("edtasks.shutdown")
    await redis_client.close_redis()

    from edtasks.db.engine import engine
    await engine.dispose()


def create_app() -> FastAPI:
    """Build and return the FastAPI application."""
    app = FastAPI(
        title="EdTech Task Manager",
        description="Role-based task management for students and their teachers",
        version=__version__,
        lifespan=lifespan,
    )

    # ── Middleware stack ──────────────────────────────────────
    # Note: Starlette middleware executes in reverse order of registration.
    # Request flow: RequestId → Security → LoginRateLimit → CORS → handler

    from edtasks.middleware.rate_limit import LoginRateLimitMiddleware
    from edtasks.middleware.request_id import RequestIdMiddleware
    from edtasks.middleware.security import SecurityHeadersMiddleware

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(
        LoginRateLimitMiddleware,
        limit=settings.login_rate_limit,
        window_seconds=settings.login_rate_window_seconds,
    )
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(RequestIdMiddleware)

    register_error_handlers(app)
    app.include_router(api_router)

    return app


# Default app instance (used by uvicorn: edtasks.main:app)
app = create_app()
