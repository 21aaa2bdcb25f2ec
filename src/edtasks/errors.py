"""Typed failures raised by the core.

The core never builds HTTP responses. Services, the credential layer and the
policy engine raise these; api/errors.py maps each family to a status code.
"""

from typing import Optional


class AppError(Exception):
    """Base class for all expected, user-facing failures."""

    message = "Request failed"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.message
        super().__init__(self.message)


# ─── 400: malformed input / business-rule validation ─────


class ValidationError(AppError):
    message = "Validation error"


class TeacherNotFound(ValidationError):
    """A student's declared teacher is missing or is not a teacher."""

    message = "Invalid teacher ID"


# ─── 401: who are you? ───────────────────────────────────


class AuthenticationError(AppError):
    message = "Authentication failed"


class TokenMissing(AuthenticationError):
    message = "Authentication token required"


class TokenInvalid(AuthenticationError):
    message = "Invalid token"


class TokenExpired(AuthenticationError):
    message = "Token expired"


class InvalidCredentials(AuthenticationError):
    """Same message for unknown email and wrong password."""

    message = "Invalid email or password"


# ─── 403 / 404 / conflict ────────────────────────────────


class AuthorizationError(AppError):
    message = "You are not allowed to perform this action"


class NotFoundError(AppError):
    message = "Not found"


class ConflictError(AppError):
    message = "Conflict"


class EmailTaken(ConflictError):
    message = "Email already registered"
