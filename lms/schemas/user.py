"""User, registration & authentication schemas."""

import uuid
from datetime import datetime
from enum import Enum

from pydantic import EmailStr, Field

from lms.schemas.common import CamelModel


class UserRole(str, Enum):
    STUDENT = "STUDENT"
    TEACHER = "TEACHER"
    ADMIN = "ADMIN"


class Gender(str, Enum):
    MALE = "MALE"
    FEMALE = "FEMALE"
    OTHER = "OTHER"


class RegistrationRequest(CamelModel):
    """POST /register/student and /register/teacher"""

    name: str = Field(min_length=1)
    email: EmailStr
    username: str = Field(min_length=1, max_length=100)
    password: str = Field(min_length=1)
    full_name: str = Field(min_length=1)
    gender: Gender
    birth_year: int = Field(ge=1900, le=2100)
    phone_number: str = Field(min_length=1, max_length=30)


class LoginRequest(CamelModel):
    """POST /login"""

    username: str
    password: str


class UserRead(CamelModel):
    """User returned from API: never exposes password or tokens."""

    id: uuid.UUID
    name: str
    username: str
    email: str
    role: UserRole
    full_name: str | None = None
    gender: Gender | None = None
    birth_year: int | None = None
    phone_number: str | None = None
    email_verified: bool
    created_at: datetime


class AuthResponse(CamelModel):
    """Combined auth response: token + user profile."""

    access_token: str
    token_type: str = "bearer"
    user: UserRead
