"""Courses: catalogue queries and teacher-side management.

Drafts are invisible to the public catalogue. Deleting a course removes
its weeks, learning items, quiz attempts and enrollments explicitly; its
documents survive as standalone documents.
"""

import logging
import math
import uuid

from sqlalchemy.orm import Session

from lms.core.exceptions import NotFoundError
from lms.db.models import Course, Enrollment, User
from lms.schemas.common import PagedResponse
from lms.schemas.course import CourseCreate, CourseDetailRead, CourseRead
from lms.services.access import ensure_course_owner
from lms.services.weeks import purge_weeks, week_read

logger = logging.getLogger(__name__)


def _course_fields(course: Course) -> dict:
    items = [item for week in course.weeks for item in week.learning_items]
    return dict(
        id=course.id,
        name=course.name,
        category=course.category,
        price=course.price,
        is_free=course.is_free,
        is_draft=course.is_draft,
        number_of_lessons=len(items),
        total_duration_minutes=sum(item.duration_minutes or 0 for item in items),
        estimated_weeks=course.estimated_weeks,
        summary=course.summary,
        description=course.description,
        thumbnail_url=course.thumbnail_url,
        teacher_id=course.teacher_id,
        teacher_name=course.teacher.name if course.teacher else None,
    )


def course_read(course: Course) -> CourseRead:
    return CourseRead(**_course_fields(course))


def course_detail(course: Course) -> CourseDetailRead:
    return CourseDetailRead(
        **_course_fields(course), weeks=[week_read(w) for w in course.weeks]
    )


def get_course(db: Session, course_id: uuid.UUID) -> Course:
    course = db.get(Course, course_id)
    if course is None:
        raise NotFoundError(f"Course not found with id: {course_id}")
    return course


# ── Catalogue ─────────────────────────────────────────────────────────────────


def list_published_courses(
    db: Session,
    name: str | None = None,
    teacher_name: str | None = None,
    page: int = 0,
    size: int = 10,
) -> PagedResponse[CourseRead]:
    """Published courses, filtered and sorted by name, one page at a time."""
    query = db.query(Course).filter(Course.is_draft.is_(False))
    if name:
        query = query.filter(Course.name.ilike(f"%{name}%"))
    if teacher_name:
        query = query.join(Course.teacher).filter(User.name.ilike(f"%{teacher_name}%"))

    total = query.count()
    courses = query.order_by(Course.name).offset(page * size).limit(size).all()
    total_pages = math.ceil(total / size) if size else 0
    return PagedResponse[CourseRead](
        content=[course_read(c) for c in courses],
        page=page,
        size=size,
        total_elements=total,
        total_pages=total_pages,
        last=page >= total_pages - 1,
    )


def get_published_course(db: Session, course_id: uuid.UUID) -> CourseDetailRead:
    course = db.get(Course, course_id)
    if course is None or course.is_draft:
        raise NotFoundError(f"Course not found with id: {course_id}")
    return course_detail(course)


def list_teacher_courses(db: Session, teacher: User) -> list[CourseRead]:
    """Every course of *teacher*, drafts included."""
    courses = (
        db.query(Course)
        .filter(Course.teacher_id == teacher.id)
        .order_by(Course.name)
        .all()
    )
    return [course_read(c) for c in courses]


# ── Management ────────────────────────────────────────────────────────────────


def _apply(course: Course, body: CourseCreate) -> None:
    course.name = body.name
    course.category = body.category
    course.price = body.price
    course.is_free = body.is_free
    course.is_draft = body.is_draft
    course.estimated_weeks = body.estimated_weeks
    course.summary = body.summary
    course.description = body.description
    course.thumbnail_url = body.thumbnail_url


def create_course(db: Session, body: CourseCreate, teacher: User) -> CourseRead:
    course = Course(teacher_id=teacher.id)
    _apply(course, body)
    db.add(course)
    db.commit()
    db.refresh(course)
    logger.info("Course %s created by %s", course.id, teacher.username)
    return course_read(course)


def update_course(
    db: Session, course_id: uuid.UUID, body: CourseCreate, user: User
) -> CourseRead:
    course = get_course(db, course_id)
    ensure_course_owner(course, user)
    _apply(course, body)
    db.commit()
    db.refresh(course)
    return course_read(course)


def delete_course(db: Session, course_id: uuid.UUID, user: User) -> None:
    course = get_course(db, course_id)
    ensure_course_owner(course, user)

    purge_weeks(db, list(course.weeks))
    db.query(Enrollment).filter(Enrollment.course_id == course.id).delete(
        synchronize_session="fetch"
    )
    db.flush()
    db.delete(course)
    db.commit()
    logger.info("Course %s deleted by %s", course_id, user.username)
