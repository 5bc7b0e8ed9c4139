"""Quiz attempt routes.

Students start, answer and complete their own attempts. Reads are open to
the attempt's student and to teachers/admins.
"""

import uuid

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from lms.api.deps import get_current_user, require_student
from lms.db.models import User
from lms.db.session import get_db
from lms.schemas.common import ApiResponse, ok
from lms.schemas.quiz import (
    AnswerSubmission,
    QuizAttemptRead,
    QuizAttemptWithQuestionsRead,
    QuizResultRead,
    StartAttemptRequest,
    StudentResponseRead,
)
from lms.services import quiz_attempts as attempt_service

router = APIRouter()


@router.post(
    "/attempt",
    response_model=ApiResponse[QuizAttemptRead],
    status_code=status.HTTP_201_CREATED,
)
def start_attempt(
    body: StartAttemptRequest,
    current_user: User = Depends(require_student),
    db: Session = Depends(get_db),
):
    attempt = attempt_service.start_quiz_attempt(
        db, current_user.id, body.learning_item_id
    )
    return ok("Quiz attempt started successfully", attempt)


@router.put("/attempt/{attempt_id}/answer", response_model=ApiResponse[StudentResponseRead])
def submit_answer(
    attempt_id: uuid.UUID,
    body: AnswerSubmission,
    current_user: User = Depends(require_student),
    db: Session = Depends(get_db),
):
    attempt_service.ensure_attempt_access(db, attempt_id, current_user, write=True)
    response = attempt_service.submit_answer(
        db, attempt_id, body.question_id, body.selected_answer
    )
    return ok("Answer submitted successfully", response)


@router.put(
    "/attempt/{attempt_id}/answers",
    response_model=ApiResponse[list[StudentResponseRead]],
)
def submit_answers(
    attempt_id: uuid.UUID,
    body: list[AnswerSubmission],
    current_user: User = Depends(require_student),
    db: Session = Depends(get_db),
):
    """Grade and store several answers; earlier ones stay if a later one fails."""
    attempt_service.ensure_attempt_access(db, attempt_id, current_user, write=True)
    responses = attempt_service.submit_all_answers(db, attempt_id, body)
    return ok("Answers submitted successfully", responses)


@router.put("/attempt/{attempt_id}/complete", response_model=ApiResponse[QuizResultRead])
def complete_attempt(
    attempt_id: uuid.UUID,
    current_user: User = Depends(require_student),
    db: Session = Depends(get_db),
):
    """Close the attempt and return its score breakdown."""
    attempt_service.ensure_attempt_access(db, attempt_id, current_user, write=True)
    attempt_service.complete_quiz_attempt(db, attempt_id)
    return ok(
        "Quiz completed successfully",
        attempt_service.get_quiz_results(db, attempt_id),
    )


@router.get("/attempt/{attempt_id}", response_model=ApiResponse[QuizAttemptRead])
def get_attempt(
    attempt_id: uuid.UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    attempt_service.ensure_attempt_access(db, attempt_id, current_user)
    return ok(
        "Quiz attempt retrieved successfully",
        attempt_service.get_quiz_attempt_by_id(db, attempt_id),
    )


@router.get(
    "/attempt/{attempt_id}/questions",
    response_model=ApiResponse[QuizAttemptWithQuestionsRead],
)
def get_attempt_questions(
    attempt_id: uuid.UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """The attempt with its quiz questions; answers hidden while in progress."""
    attempt_service.ensure_attempt_access(db, attempt_id, current_user)
    return ok(
        "Quiz attempt retrieved successfully",
        attempt_service.get_attempt_with_questions(db, attempt_id),
    )


@router.get("/attempt/{attempt_id}/results", response_model=ApiResponse[QuizResultRead])
def get_results(
    attempt_id: uuid.UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    attempt_service.ensure_attempt_access(db, attempt_id, current_user)
    return ok(
        "Quiz results retrieved successfully",
        attempt_service.get_quiz_results(db, attempt_id),
    )


@router.get(
    "/student/{student_id}/attempts",
    response_model=ApiResponse[list[QuizAttemptRead]],
)
def get_student_attempts(
    student_id: uuid.UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    attempt_service.ensure_student_access(student_id, current_user)
    return ok(
        "Quiz attempts retrieved successfully",
        attempt_service.get_quiz_attempts_by_student_id(db, student_id),
    )


@router.get(
    "/student/{student_id}/history",
    response_model=ApiResponse[list[QuizResultRead]],
)
def get_student_history(
    student_id: uuid.UUID,
    learning_item_id: uuid.UUID = Query(..., alias="learningItemId"),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Completed attempts on one quiz, most recent first."""
    attempt_service.ensure_student_access(student_id, current_user)
    return ok(
        "Quiz history retrieved successfully",
        attempt_service.get_student_quiz_history(db, student_id, learning_item_id),
    )
