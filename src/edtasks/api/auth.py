"""Auth API: signup and login.

Learn: Both routes are open (no token required) and both answer with a
fresh token plus the user, enriched with the teacher's identity when the
user is a student:
- POST /auth/signup → 201, or 400 on validation / business-rule failure
- POST /auth/login  → 200, or 401 with one message for every bad credential
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from edtasks.db.engine import get_db
from edtasks.domain import Student
from edtasks.schemas.auth import (
    AuthPayload,
    LoginRequest,
    SignupRequest,
    TeacherRef,
    UserRead,
)
from edtasks.schemas.common import Envelope
from edtasks.services.account_service import AccountService, AuthResult

router = APIRouter(prefix="/auth")


def _account_svc(db: AsyncSession = Depends(get_db)) -> AccountService:
    return AccountService(db)


def _payload(result: AuthResult) -> AuthPayload:
    subject = result.subject
    teacher = None
    if result.teacher is not None:
        teacher = TeacherRef(id=result.teacher.id, email=result.teacher.email)
    return AuthPayload(
        token=result.token,
        user=UserRead(
            id=subject.id,
            email=subject.email,
            role=subject.role.value,
            teacher_id=subject.teacher_id if isinstance(subject, Student) else None,
            teacher=teacher,
        ),
    )


@router.post("/signup", response_model=Envelope[AuthPayload], status_code=201)
async def signup(body: SignupRequest, svc: AccountService = Depends(_account_svc)):
    """Create a new account and log it in."""
    result = await svc.signup(
        email=body.email,
        password=body.password,
        role=body.role,
        teacher_id=body.teacher_id,
    )
    return Envelope(message="User registered successfully", data=_payload(result))


@router.post("/login", response_model=Envelope[AuthPayload])
async def login(body: LoginRequest, svc: AccountService = Depends(_account_svc)):
    """Login with email and password → JWT."""
    result = await svc.login(email=body.email, password=body.password)
    return Envelope(message="Login successful", data=_payload(result))
