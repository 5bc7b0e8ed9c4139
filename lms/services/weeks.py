"""Weeks: numbered sections of a course."""

import logging
import uuid

from sqlalchemy.orm import Session

from lms.core.exceptions import BadRequestError, NotFoundError
from lms.db.models import Course, User, Week
from lms.schemas.week import WeekCreate, WeekRead, WeekUpdate
from lms.services.access import ensure_course_owner
from lms.services.learning_items import get_week, item_read, purge_learning_items

logger = logging.getLogger(__name__)


def week_read(week: Week) -> WeekRead:
    return WeekRead(
        id=week.id,
        title=week.title,
        description=week.description,
        week_number=week.week_number,
        course_id=week.course_id,
        learning_items=[item_read(i) for i in week.learning_items],
    )


def _get_course(db: Session, course_id: uuid.UUID) -> Course:
    course = db.get(Course, course_id)
    if course is None:
        raise NotFoundError(f"Course not found with id: {course_id}")
    return course


def _ensure_number_free(
    db: Session,
    course_id: uuid.UUID,
    week_number: int,
    exclude_id: uuid.UUID | None = None,
) -> None:
    query = db.query(Week).filter(
        Week.course_id == course_id, Week.week_number == week_number
    )
    if exclude_id is not None:
        query = query.filter(Week.id != exclude_id)
    if query.first() is not None:
        raise BadRequestError(f"Week {week_number} already exists in this course")


def list_course_weeks(db: Session, course_id: uuid.UUID) -> list[WeekRead]:
    _get_course(db, course_id)
    weeks = (
        db.query(Week)
        .filter(Week.course_id == course_id)
        .order_by(Week.week_number)
        .all()
    )
    return [week_read(w) for w in weeks]


def get_week_detail(db: Session, week_id: uuid.UUID) -> WeekRead:
    return week_read(get_week(db, week_id))


def create_week(db: Session, body: WeekCreate, user: User) -> WeekRead:
    course = _get_course(db, body.course_id)
    ensure_course_owner(course, user)
    _ensure_number_free(db, course.id, body.week_number)

    week = Week(
        title=body.title,
        description=body.description,
        week_number=body.week_number,
        course_id=course.id,
    )
    db.add(week)
    db.commit()
    db.refresh(week)
    logger.info("Week %d created in course %s", week.week_number, course.id)
    return week_read(week)


def update_week(
    db: Session, week_id: uuid.UUID, body: WeekUpdate, user: User
) -> WeekRead:
    week = get_week(db, week_id)
    ensure_course_owner(week.course, user)

    if body.week_number is not None and body.week_number != week.week_number:
        _ensure_number_free(db, week.course_id, body.week_number, exclude_id=week.id)
        week.week_number = body.week_number
    if body.title is not None:
        week.title = body.title
    if body.description is not None:
        week.description = body.description
    db.commit()
    db.refresh(week)
    return week_read(week)


def purge_weeks(db: Session, weeks: list[Week]) -> None:
    """Delete *weeks* and everything inside them. Does not commit."""
    for week in weeks:
        purge_learning_items(db, list(week.learning_items))
    db.flush()
    for week in weeks:
        db.delete(week)


def delete_week(db: Session, week_id: uuid.UUID, user: User) -> None:
    week = get_week(db, week_id)
    ensure_course_owner(week.course, user)
    purge_weeks(db, [week])
    db.commit()
    logger.info("Week %s deleted", week_id)
