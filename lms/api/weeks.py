"""Week routes."""

import uuid

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from lms.api.deps import get_current_user, require_teacher
from lms.db.models import User
from lms.db.session import get_db
from lms.schemas.common import ApiResponse, ok
from lms.schemas.week import WeekCreate, WeekRead, WeekUpdate
from lms.services import weeks as week_service

router = APIRouter()


@router.get("/course/{course_id}", response_model=ApiResponse[list[WeekRead]])
def list_course_weeks(
    course_id: uuid.UUID,
    _: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return ok(
        "Weeks retrieved successfully", week_service.list_course_weeks(db, course_id)
    )


@router.get("/{week_id}", response_model=ApiResponse[WeekRead])
def get_week(
    week_id: uuid.UUID,
    _: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return ok("Week retrieved successfully", week_service.get_week_detail(db, week_id))


@router.post("", response_model=ApiResponse[WeekRead], status_code=status.HTTP_201_CREATED)
def create_week(
    body: WeekCreate,
    current_user: User = Depends(require_teacher),
    db: Session = Depends(get_db),
):
    return ok("Week created successfully", week_service.create_week(db, body, current_user))


@router.put("/{week_id}", response_model=ApiResponse[WeekRead])
def update_week(
    week_id: uuid.UUID,
    body: WeekUpdate,
    current_user: User = Depends(require_teacher),
    db: Session = Depends(get_db),
):
    return ok(
        "Week updated successfully",
        week_service.update_week(db, week_id, body, current_user),
    )


@router.delete("/{week_id}", response_model=ApiResponse[None])
def delete_week(
    week_id: uuid.UUID,
    current_user: User = Depends(require_teacher),
    db: Session = Depends(get_db),
):
    week_service.delete_week(db, week_id, current_user)
    return ok("Week deleted successfully")
