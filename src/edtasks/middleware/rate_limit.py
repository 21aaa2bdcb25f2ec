"""Login rate limiting middleware, Redis-based fixed window.

Learn: Each client IP gets a counter key like
"edtasks:rl:{ip}:login:{window}" where window is the current 15-minute
slot. The 6th login attempt inside a slot gets a 429 with the standard
envelope. Only POST /auth/login is throttled.

Gracefully skips rate limiting if Redis is unavailable (e.g., in tests).
"""

import time

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from edtasks import redis_client

LOGIN_PATH = "/auth/login"


class LoginRateLimitMiddleware(BaseHTTPMiddleware):
    """Redis-based login attempt limiting per IP per window."""

    def __init__(self, app, limit: int = 5, window_seconds: int = 900):
        super().__init__(app)
        self.limit = limit
        self.window_seconds = window_seconds

    async def dispatch(self, request: Request, call_next) -> Response:
        if request.method != "POST" or request.url.path != LOGIN_PATH:
            return await call_next(request)

        # Try to get Redis, skip rate limiting if unavailable
        try:
            redis = redis_client.get_redis()
        except RuntimeError:
            return await call_next(request)

        client_ip = request.client.host if request.client else "unknown"
        window = int(time.time() // self.window_seconds)
        key = f"edtasks:rl:{client_ip}:login:{window}"

        try:
            count = await redis.incr(key)
            if count == 1:
                await redis.expire(key, self.window_seconds * 2)
        except Exception:
            # Redis error, don't block the request
            return await call_next(request)

        if count > self.limit:
            minutes = self.window_seconds // 60
            return JSONResponse(
                status_code=429,
                content={
                    "success": False,
                    "message": (
                        "Too many login attempts, please try again after "
                        f"{minutes} minutes"
                    ),
                },
                headers={"Retry-After": str(self.window_seconds)},
            )

        response = await call_next(request)
        response.headers["X-RateLimit-Limit"] = str(self.limit)
        response.headers["X-RateLimit-Remaining"] = str(max(0, self.limit - count))
        return response
