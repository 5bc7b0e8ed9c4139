"""Enrollment routes."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from lms.api.deps import require_student
from lms.db.models import User
from lms.db.session import get_db
from lms.schemas.common import ApiResponse, ok
from lms.schemas.course import CourseRead, EnrollmentRequest
from lms.services import enrollments as enrollment_service

router = APIRouter()


@router.post(
    "",
    response_model=ApiResponse[CourseRead],
    status_code=status.HTTP_201_CREATED,
)
def enroll(
    body: EnrollmentRequest,
    current_user: User = Depends(require_student),
    db: Session = Depends(get_db),
):
    return ok(
        "Enrolled successfully",
        enrollment_service.enroll(db, current_user, body.course_id),
    )


@router.get("/my-courses", response_model=ApiResponse[list[CourseRead]])
def my_courses(
    current_user: User = Depends(require_student),
    db: Session = Depends(get_db),
):
    return ok(
        "Enrolled courses retrieved successfully",
        enrollment_service.list_enrolled_courses(db, current_user),
    )
