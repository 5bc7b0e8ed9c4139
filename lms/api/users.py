"""Registration, email verification, login and profile routes."""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from lms.api.deps import get_current_user
from lms.db.models import User, UserRoleEnum
from lms.db.session import get_db
from lms.schemas.common import ApiResponse, ok
from lms.schemas.user import AuthResponse, LoginRequest, RegistrationRequest, UserRead
from lms.services import users as user_service

router = APIRouter()


@router.post(
    "/register/student",
    response_model=ApiResponse[UserRead],
    status_code=status.HTTP_201_CREATED,
)
def register_student(body: RegistrationRequest, db: Session = Depends(get_db)):
    """Create a student account; a verification link is emailed."""
    user = user_service.register_user(db, body, UserRoleEnum.STUDENT)
    return ok("Student registered successfully. Please verify your email.", user)


@router.post(
    "/register/teacher",
    response_model=ApiResponse[UserRead],
    status_code=status.HTTP_201_CREATED,
)
def register_teacher(body: RegistrationRequest, db: Session = Depends(get_db)):
    user = user_service.register_user(db, body, UserRoleEnum.TEACHER)
    return ok("Teacher registered successfully. Please verify your email.", user)


@router.get("/verify-email", response_model=ApiResponse[None])
def verify_email(token: str = Query(...), db: Session = Depends(get_db)):
    user_service.verify_email(db, token)
    return ok("Email verified successfully")


@router.post("/login", response_model=ApiResponse[AuthResponse])
def login(body: LoginRequest, db: Session = Depends(get_db)):
    """Authenticate and return a JWT access token + user profile."""
    return ok("Login successful", user_service.login(db, body.username, body.password))


@router.get("/users/me", response_model=ApiResponse[UserRead])
def me(current_user: User = Depends(get_current_user)):
    """Return the authenticated user's profile."""
    return ok("Current user", UserRead.model_validate(current_user))
