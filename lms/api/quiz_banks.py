"""Quiz bank routes."""

import uuid

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from lms.api.deps import get_current_user, require_teacher
from lms.db.models import User
from lms.db.session import get_db
from lms.schemas.common import ApiResponse, ok
from lms.schemas.learning_item import LearningItemRead
from lms.schemas.quiz_bank import (
    QuizBankCreate,
    QuizBankLearningItemAssociation,
    QuizBankRead,
    QuizBankUpdate,
)
from lms.services import quiz_banks as bank_service

router = APIRouter()


@router.post(
    "",
    response_model=ApiResponse[QuizBankRead],
    status_code=status.HTTP_201_CREATED,
)
def create_quiz_bank(
    body: QuizBankCreate,
    current_user: User = Depends(require_teacher),
    db: Session = Depends(get_db),
):
    return ok(
        "Quiz bank created successfully",
        bank_service.create_quiz_bank(db, body, current_user),
    )


@router.get("", response_model=ApiResponse[list[QuizBankRead]])
def list_active_quiz_banks(
    _: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return ok("Quiz banks retrieved successfully", bank_service.list_active_quiz_banks(db))


@router.get("/teacher/{teacher_id}", response_model=ApiResponse[list[QuizBankRead]])
def list_teacher_quiz_banks(
    teacher_id: uuid.UUID,
    _: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return ok(
        "Quiz banks retrieved successfully",
        bank_service.list_teacher_quiz_banks(db, teacher_id),
    )


@router.get("/{bank_id}", response_model=ApiResponse[QuizBankRead])
def get_quiz_bank(
    bank_id: uuid.UUID,
    _: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return ok("Quiz bank retrieved successfully", bank_service.get_quiz_bank(db, bank_id))


@router.put("/{bank_id}", response_model=ApiResponse[QuizBankRead])
def update_quiz_bank(
    bank_id: uuid.UUID,
    body: QuizBankUpdate,
    current_user: User = Depends(require_teacher),
    db: Session = Depends(get_db),
):
    return ok(
        "Quiz bank updated successfully",
        bank_service.update_quiz_bank(db, bank_id, body, current_user),
    )


@router.delete("/{bank_id}", response_model=ApiResponse[None])
def delete_quiz_bank(
    bank_id: uuid.UUID,
    current_user: User = Depends(require_teacher),
    db: Session = Depends(get_db),
):
    """Deactivate the bank; questions and past attempts are kept."""
    bank_service.delete_quiz_bank(db, bank_id, current_user)
    return ok("Quiz bank deleted successfully")


@router.put("/{bank_id}/learning-items", response_model=ApiResponse[LearningItemRead])
def associate_learning_item(
    bank_id: uuid.UUID,
    body: QuizBankLearningItemAssociation,
    current_user: User = Depends(require_teacher),
    db: Session = Depends(get_db),
):
    return ok(
        "Quiz bank associated with learning item successfully",
        bank_service.associate_with_learning_item(
            db, bank_id, body.learning_item_id, current_user
        ),
    )
