"""Student enrollment in published courses."""

import logging
import uuid

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from lms.core.exceptions import BadRequestError, NotFoundError
from lms.db.models import Course, Enrollment, User
from lms.schemas.course import CourseRead
from lms.services.courses import course_read

logger = logging.getLogger(__name__)


def enroll(db: Session, student: User, course_id: uuid.UUID) -> CourseRead:
    course = db.get(Course, course_id)
    if course is None:
        raise NotFoundError(f"Course not found with id: {course_id}")
    if course.is_draft:
        raise BadRequestError("Cannot enroll in a draft course")

    existing = (
        db.query(Enrollment)
        .filter(Enrollment.student_id == student.id, Enrollment.course_id == course.id)
        .first()
    )
    if existing is not None:
        raise BadRequestError("Already enrolled in this course")

    db.add(Enrollment(student_id=student.id, course_id=course.id))
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise BadRequestError("Already enrolled in this course") from exc

    logger.info("%s enrolled in course %s", student.username, course.id)
    return course_read(course)


def list_enrolled_courses(db: Session, student: User) -> list[CourseRead]:
    courses = (
        db.query(Course)
        .join(Enrollment, Enrollment.course_id == Course.id)
        .filter(Enrollment.student_id == student.id)
        .order_by(Course.name)
        .all()
    )
    return [course_read(c) for c in courses]
