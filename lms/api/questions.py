"""Question routes."""

import uuid

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from lms.api.deps import get_current_user, require_teacher
from lms.db.models import User
from lms.db.session import get_db
from lms.schemas.common import ApiResponse, ok
from lms.schemas.question import QuestionCreate, QuestionRead, QuestionUpdate
from lms.services import questions as question_service

router = APIRouter()


@router.post(
    "",
    response_model=ApiResponse[QuestionRead],
    status_code=status.HTTP_201_CREATED,
)
def create_question(
    body: QuestionCreate,
    current_user: User = Depends(require_teacher),
    db: Session = Depends(get_db),
):
    return ok(
        "Question created successfully",
        question_service.create_question(db, body, current_user),
    )


@router.get("/quiz-bank/{bank_id}", response_model=ApiResponse[list[QuestionRead]])
def list_bank_questions(
    bank_id: uuid.UUID,
    _: User = Depends(require_teacher),
    db: Session = Depends(get_db),
):
    return ok(
        "Questions retrieved successfully",
        question_service.list_bank_questions(db, bank_id),
    )


@router.get(
    "/quiz-bank/{bank_id}/random", response_model=ApiResponse[list[QuestionRead]]
)
def random_bank_questions(
    bank_id: uuid.UUID,
    count: int = Query(10, ge=1),
    _: User = Depends(require_teacher),
    db: Session = Depends(get_db),
):
    return ok(
        "Questions retrieved successfully",
        question_service.random_bank_questions(db, bank_id, count),
    )


@router.get("/{question_id}", response_model=ApiResponse[QuestionRead])
def get_question(
    question_id: uuid.UUID,
    _: User = Depends(require_teacher),
    db: Session = Depends(get_db),
):
    return ok(
        "Question retrieved successfully",
        question_service.get_question(db, question_id),
    )


@router.put("/{question_id}", response_model=ApiResponse[QuestionRead])
def update_question(
    question_id: uuid.UUID,
    body: QuestionUpdate,
    current_user: User = Depends(require_teacher),
    db: Session = Depends(get_db),
):
    return ok(
        "Question updated successfully",
        question_service.update_question(db, question_id, body, current_user),
    )


@router.delete("/{question_id}", response_model=ApiResponse[None])
def delete_question(
    question_id: uuid.UUID,
    current_user: User = Depends(require_teacher),
    db: Session = Depends(get_db),
):
    question_service.delete_question(db, question_id, current_user)
    return ok("Question deleted successfully")
