"""Course & enrollment schemas."""

import uuid

from pydantic import Field

from lms.schemas.common import CamelModel
from lms.schemas.week import WeekRead


class CourseCreate(CamelModel):
    """POST /courses and PUT /courses/{id} (full replacement)."""

    name: str = Field(min_length=1, max_length=255)
    category: str | None = None
    price: float | None = Field(default=None, ge=0)
    is_free: bool = False
    is_draft: bool = False
    estimated_weeks: int | None = Field(default=None, ge=0)
    summary: str | None = Field(default=None, max_length=500)
    description: str | None = None
    thumbnail_url: str | None = None


class CourseRead(CamelModel):
    id: uuid.UUID
    name: str
    category: str | None = None
    price: float | None = None
    is_free: bool
    is_draft: bool
    number_of_lessons: int = 0
    total_duration_minutes: int = 0
    estimated_weeks: int | None = None
    summary: str | None = None
    description: str | None = None
    thumbnail_url: str | None = None
    teacher_id: uuid.UUID
    teacher_name: str | None = None


class CourseDetailRead(CourseRead):
    """Course with its weeks and their learning items, in order."""

    weeks: list[WeekRead] = []


class EnrollmentRequest(CamelModel):
    """POST /enrollments"""

    course_id: uuid.UUID
