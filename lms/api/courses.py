"""Course catalogue and course management routes."""

import uuid

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from lms.api.deps import require_teacher
from lms.db.models import User
from lms.db.session import get_db
from lms.schemas.common import ApiResponse, PagedResponse, ok
from lms.schemas.course import CourseCreate, CourseDetailRead, CourseRead
from lms.services import courses as course_service

router = APIRouter()


@router.get("", response_model=ApiResponse[PagedResponse[CourseRead]])
def list_courses(
    name: str | None = None,
    teacher_name: str | None = Query(None, alias="teacherName"),
    page: int = Query(0, ge=0),
    size: int = Query(10, ge=1, le=100),
    db: Session = Depends(get_db),
):
    """Published courses, sorted by name."""
    result = course_service.list_published_courses(
        db, name=name, teacher_name=teacher_name, page=page, size=size
    )
    return ok("Courses retrieved successfully", result)


@router.get("/mine", response_model=ApiResponse[list[CourseRead]])
def list_my_courses(
    current_user: User = Depends(require_teacher),
    db: Session = Depends(get_db),
):
    """The caller's own courses, drafts included."""
    return ok(
        "Courses retrieved successfully",
        course_service.list_teacher_courses(db, current_user),
    )


@router.get("/{course_id}", response_model=ApiResponse[CourseDetailRead])
def get_course(course_id: uuid.UUID, db: Session = Depends(get_db)):
    return ok(
        "Course retrieved successfully",
        course_service.get_published_course(db, course_id),
    )


@router.post(
    "",
    response_model=ApiResponse[CourseRead],
    status_code=status.HTTP_201_CREATED,
)
def create_course(
    body: CourseCreate,
    current_user: User = Depends(require_teacher),
    db: Session = Depends(get_db),
):
    return ok(
        "Course created successfully",
        course_service.create_course(db, body, current_user),
    )


@router.put("/{course_id}", response_model=ApiResponse[CourseRead])
def update_course(
    course_id: uuid.UUID,
    body: CourseCreate,
    current_user: User = Depends(require_teacher),
    db: Session = Depends(get_db),
):
    return ok(
        "Course updated successfully",
        course_service.update_course(db, course_id, body, current_user),
    )


@router.delete("/{course_id}", response_model=ApiResponse[None])
def delete_course(
    course_id: uuid.UUID,
    current_user: User = Depends(require_teacher),
    db: Session = Depends(get_db),
):
    """Delete the course with its weeks, learning items and enrollments."""
    course_service.delete_course(db, course_id, current_user)
    return ok("Course deleted successfully")
