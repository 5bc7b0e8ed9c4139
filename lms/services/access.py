"""Ownership checks shared by the course-content services."""

from lms.core.exceptions import ForbiddenError
from lms.db.models import Course, User, UserRoleEnum


def ensure_course_owner(course: Course, user: User) -> None:
    """Raise 403 unless *user* teaches *course* (admins pass too)."""
    if user.role == UserRoleEnum.ADMIN:
        return
    if course.teacher_id != user.id:
        raise ForbiddenError("You are not the teacher of this course")
