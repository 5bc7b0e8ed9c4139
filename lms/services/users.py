"""Registration, email verification and login."""

import logging
import threading
import uuid
from datetime import datetime, timezone

from sqlalchemy.orm import Session

from lms.config import settings
from lms.core.exceptions import (
    BadRequestError,
    ForbiddenError,
    NotFoundError,
    RegistrationError,
    UnauthorizedError,
)
from lms.core.security import (
    create_access_token,
    hash_password,
    new_verification_token,
    verify_password,
)
from lms.db.models import GenderEnum, User, UserRoleEnum
from lms.schemas.user import AuthResponse, RegistrationRequest, UserRead
from lms.tasks import send_verification_email_task

logger = logging.getLogger(__name__)


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes even for timezone-aware columns
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


def _dispatch_verification_email(to: str, token: str) -> None:
    """Queue the verification email without blocking the request.

    In eager mode Celery would run the task inline, so it is pushed onto a
    daemon thread instead. Delivery problems never fail registration.
    """
    try:
        if settings.CELERY_TASK_ALWAYS_EAGER:
            threading.Thread(
                target=send_verification_email_task.delay,
                args=(to, token),
                daemon=True,
            ).start()
        else:
            send_verification_email_task.delay(to, token)
    except Exception:
        logger.exception("Could not dispatch verification email to %s", to)


def get_user(db: Session, user_id: uuid.UUID) -> User:
    user = db.get(User, user_id)
    if user is None:
        raise NotFoundError("User not found")
    return user


def validate_registration(db: Session, body: RegistrationRequest) -> None:
    """Reject an email or username that is already in use."""
    if db.query(User).filter(User.email == body.email).first() is not None:
        logger.warning("%s is already being used!", body.email)
        raise RegistrationError("Email is already registered")
    if db.query(User).filter(User.username == body.username).first() is not None:
        logger.warning("%s is already being used!", body.username)
        raise RegistrationError("Username is already taken")


def register_user(db: Session, body: RegistrationRequest, role: UserRoleEnum) -> UserRead:
    """Create an unverified account with *role* and send its verification link."""
    validate_registration(db, body)
    try:
        hashed = hash_password(body.password)
    except ValueError as exc:
        raise BadRequestError(str(exc)) from exc

    token, expiry = new_verification_token()
    user = User(
        name=body.name,
        username=body.username,
        email=body.email,
        hashed_password=hashed,
        role=role,
        full_name=body.full_name,
        gender=GenderEnum(body.gender.value),
        birth_year=body.birth_year,
        phone_number=body.phone_number,
        email_verified=False,
        email_verification_token=token,
        email_verification_token_expiry=expiry,
    )
    db.add(user)
    db.commit()
    db.refresh(user)

    _dispatch_verification_email(user.email, token)
    logger.info("%s registered successfully as a %s", user.username, role.value.lower())
    return UserRead.model_validate(user)


def verify_email(db: Session, token: str) -> None:
    user = db.query(User).filter(User.email_verification_token == token).first()
    if user is None:
        raise BadRequestError("Invalid verification token")
    if user.email_verified:
        raise BadRequestError("Email already verified")
    expiry = user.email_verification_token_expiry
    if expiry is None or _as_utc(expiry) < datetime.now(timezone.utc):
        raise BadRequestError("Verification token has expired")

    user.email_verified = True
    user.email_verification_token = None
    user.email_verification_token_expiry = None
    db.commit()
    logger.info("Email verified for %s", user.username)


def login(db: Session, username: str, password: str) -> AuthResponse:
    """Authenticate and return a JWT access token + user profile."""
    user = db.query(User).filter(User.username == username).first()
    if user is None or not verify_password(password, user.hashed_password):
        raise UnauthorizedError("Invalid username or password")
    if not user.is_active:
        raise ForbiddenError("Account deactivated")

    token = create_access_token(data={"sub": str(user.id), "role": user.role.value})
    return AuthResponse(access_token=token, user=UserRead.model_validate(user))
