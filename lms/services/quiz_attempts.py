"""Quiz attempt lifecycle: start → answer → complete → score.

An attempt is IN_PROGRESS from the moment it is started until it is
completed; COMPLETED is terminal. Every accepted answer is committed on its
own, so a batch that fails halfway keeps the answers recorded before the
failure.

The duplicate checks below are backed by storage constraints
(``uq_quiz_attempt_in_progress`` and ``uq_student_response_attempt_question``);
a concurrent request that slips past a check trips the constraint instead and
gets the same 400.
"""

import logging
import uuid
from datetime import datetime, timezone

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from lms.core.exceptions import BadRequestError, ForbiddenError, NotFoundError
from lms.db.models import (
    LearningItem,
    LearningItemTypeEnum,
    Question,
    QuizAttempt,
    QuizAttemptStatusEnum,
    StudentResponse,
    User,
    UserRoleEnum,
)
from lms.schemas.question import QuestionRead
from lms.schemas.quiz import (
    AnswerSubmission,
    QuizAttemptRead,
    QuizAttemptWithQuestionsRead,
    QuizResultRead,
    StudentResponseRead,
)

logger = logging.getLogger(__name__)


# ── Projections ───────────────────────────────────────────────────────────────


def _attempt_read(attempt: QuizAttempt) -> QuizAttemptRead:
    return QuizAttemptRead(
        id=attempt.id,
        student_id=attempt.student_id,
        student_name=attempt.student.name if attempt.student else None,
        quiz_bank_id=attempt.quiz_bank_id,
        quiz_bank_title=attempt.quiz_bank.title if attempt.quiz_bank else None,
        learning_item_id=attempt.learning_item_id,
        start_time=attempt.start_time,
        end_time=attempt.end_time,
        total_score=attempt.total_score,
        max_possible_score=attempt.max_possible_score,
        status=attempt.status.value,
    )


def _response_read(response: StudentResponse) -> StudentResponseRead:
    return StudentResponseRead(
        id=response.id,
        quiz_attempt_id=response.quiz_attempt_id,
        question_id=response.question_id,
        question_text=response.question.question_text,
        selected_answer=response.selected_answer,
        is_correct=response.is_correct,
        points_earned=response.points_earned,
    )


def percentage_score(total_score: int | None, max_possible_score: int | None) -> float:
    """Share of points earned, 0 when nothing could be earned."""
    if not max_possible_score:
        return 0.0
    return round((total_score or 0) / max_possible_score * 100, 2)


# ── Lookups & access ──────────────────────────────────────────────────────────


def get_attempt(db: Session, attempt_id: uuid.UUID) -> QuizAttempt:
    attempt = db.get(QuizAttempt, attempt_id)
    if attempt is None:
        raise NotFoundError(f"Quiz attempt not found with id: {attempt_id}")
    return attempt


def ensure_attempt_access(
    db: Session, attempt_id: uuid.UUID, user: User, write: bool = False
) -> QuizAttempt:
    """Return the attempt if *user* may see it (or change it, with *write*).

    Students only reach their own attempts. Teachers and admins may read any
    attempt but never answer or complete one.
    """
    attempt = get_attempt(db, attempt_id)
    if attempt.student_id == user.id:
        return attempt
    if not write and user.role in (UserRoleEnum.TEACHER, UserRoleEnum.ADMIN):
        return attempt
    raise ForbiddenError("You do not have access to this quiz attempt")


def ensure_student_access(student_id: uuid.UUID, user: User) -> None:
    if student_id != user.id and user.role not in (
        UserRoleEnum.TEACHER,
        UserRoleEnum.ADMIN,
    ):
        raise ForbiddenError("You can only view your own quiz attempts")


# ── State transitions ─────────────────────────────────────────────────────────


def start_quiz_attempt(
    db: Session, student_id: uuid.UUID, learning_item_id: uuid.UUID
) -> QuizAttemptRead:
    student = db.get(User, student_id)
    if student is None:
        raise NotFoundError(f"Student not found with id: {student_id}")

    item = db.get(LearningItem, learning_item_id)
    if item is None:
        raise NotFoundError(f"Learning item not found with id: {learning_item_id}")
    if item.type != LearningItemTypeEnum.QUIZ:
        raise BadRequestError("Learning item is not a quiz")
    if item.quiz_bank_id is None:
        raise BadRequestError("No quiz bank associated with this learning item")

    in_progress = (
        db.query(QuizAttempt)
        .filter(
            QuizAttempt.student_id == student_id,
            QuizAttempt.learning_item_id == learning_item_id,
            QuizAttempt.status == QuizAttemptStatusEnum.IN_PROGRESS,
        )
        .first()
    )
    if in_progress is not None:
        raise BadRequestError("You already have an in-progress attempt for this quiz")

    attempt = QuizAttempt(
        student_id=student_id,
        quiz_bank_id=item.quiz_bank_id,
        learning_item_id=learning_item_id,
        start_time=datetime.now(timezone.utc),
        status=QuizAttemptStatusEnum.IN_PROGRESS,
    )
    db.add(attempt)
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise BadRequestError(
            "You already have an in-progress attempt for this quiz"
        ) from exc
    db.refresh(attempt)

    logger.info(
        "Quiz attempt %s started by %s on item %s",
        attempt.id,
        student.username,
        learning_item_id,
    )
    return _attempt_read(attempt)


def _record_answer(
    db: Session, attempt: QuizAttempt, question_id: uuid.UUID, selected_answer: str
) -> StudentResponse:
    question = db.get(Question, question_id)
    if question is None:
        raise NotFoundError(f"Question not found with id: {question_id}")
    if question.quiz_bank_id != attempt.quiz_bank_id:
        raise BadRequestError(f"Question {question_id} does not belong to this quiz")

    already_answered = (
        db.query(StudentResponse)
        .filter(
            StudentResponse.quiz_attempt_id == attempt.id,
            StudentResponse.question_id == question_id,
        )
        .first()
    )
    if already_answered is not None:
        raise BadRequestError(
            f"Question {question_id} has already been answered in this attempt"
        )

    is_correct = selected_answer == question.correct_answer
    response = StudentResponse(
        quiz_attempt_id=attempt.id,
        question_id=question.id,
        selected_answer=selected_answer,
        is_correct=is_correct,
        points_earned=1 if is_correct else 0,
        answered_at=datetime.now(timezone.utc),
    )
    db.add(response)
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise BadRequestError(
            f"Question {question_id} has already been answered in this attempt"
        ) from exc
    db.refresh(response)
    return response


def _in_progress(db: Session, attempt_id: uuid.UUID) -> QuizAttempt:
    attempt = get_attempt(db, attempt_id)
    if attempt.status != QuizAttemptStatusEnum.IN_PROGRESS:
        raise BadRequestError("This quiz attempt is already completed")
    return attempt


def submit_answer(
    db: Session, attempt_id: uuid.UUID, question_id: uuid.UUID, selected_answer: str
) -> StudentResponseRead:
    attempt = _in_progress(db, attempt_id)
    response = _record_answer(db, attempt, question_id, selected_answer)
    logger.debug("Answer recorded for question %s in attempt %s", question_id, attempt_id)
    return _response_read(response)


def submit_all_answers(
    db: Session, attempt_id: uuid.UUID, answers: list[AnswerSubmission]
) -> list[StudentResponseRead]:
    """Grade and store a batch of answers in order.

    Not atomic across the batch: answers stored before a rejected one stay
    stored.
    """
    attempt = _in_progress(db, attempt_id)
    if not answers:
        raise BadRequestError("No answers provided")

    saved = []
    for answer in answers:
        saved.append(
            _record_answer(db, attempt, answer.question_id, answer.selected_answer)
        )

    logger.info("%d answers recorded for attempt %s", len(saved), attempt_id)
    return [_response_read(r) for r in saved]


def complete_quiz_attempt(db: Session, attempt_id: uuid.UUID) -> QuizAttemptRead:
    attempt = _in_progress(db, attempt_id)

    responses = (
        db.query(StudentResponse)
        .filter(StudentResponse.quiz_attempt_id == attempt.id)
        .all()
    )
    attempt.total_score = sum(r.points_earned for r in responses)
    attempt.max_possible_score = len(responses)
    attempt.end_time = datetime.now(timezone.utc)
    attempt.status = QuizAttemptStatusEnum.COMPLETED
    db.commit()
    db.refresh(attempt)

    logger.info(
        "Quiz attempt %s completed: %d/%d",
        attempt.id,
        attempt.total_score,
        attempt.max_possible_score,
    )
    return _attempt_read(attempt)


# ── Read projections ──────────────────────────────────────────────────────────


def get_quiz_results(db: Session, attempt_id: uuid.UUID) -> QuizResultRead:
    attempt = get_attempt(db, attempt_id)
    return QuizResultRead(
        quiz_attempt_id=attempt.id,
        quiz_title=attempt.quiz_bank.title,
        start_time=attempt.start_time,
        end_time=attempt.end_time,
        total_score=attempt.total_score,
        max_possible_score=attempt.max_possible_score,
        percentage_score=percentage_score(
            attempt.total_score, attempt.max_possible_score
        ),
        responses=[_response_read(r) for r in attempt.responses],
    )


def get_quiz_attempt_by_id(db: Session, attempt_id: uuid.UUID) -> QuizAttemptRead:
    return _attempt_read(get_attempt(db, attempt_id))


def get_attempt_with_questions(
    db: Session, attempt_id: uuid.UUID
) -> QuizAttemptWithQuestionsRead:
    """Attempt plus its quiz's questions; answers stay hidden until completion."""
    attempt = get_attempt(db, attempt_id)
    reveal = attempt.status == QuizAttemptStatusEnum.COMPLETED

    questions = (
        db.query(Question)
        .filter(Question.quiz_bank_id == attempt.quiz_bank_id)
        .order_by(Question.created_at)
        .all()
    )
    return QuizAttemptWithQuestionsRead(
        **_attempt_read(attempt).model_dump(),
        questions=[
            QuestionRead(
                id=q.id,
                quiz_bank_id=q.quiz_bank_id,
                question_text=q.question_text,
                question_type=q.question_type.value,
                options=list(q.options or []),
                correct_answer=q.correct_answer if reveal else None,
            )
            for q in questions
        ],
    )


def get_quiz_attempts_by_student_id(
    db: Session, student_id: uuid.UUID
) -> list[QuizAttemptRead]:
    if db.get(User, student_id) is None:
        raise NotFoundError(f"Student not found with id: {student_id}")
    attempts = (
        db.query(QuizAttempt)
        .filter(QuizAttempt.student_id == student_id)
        .order_by(QuizAttempt.start_time.desc())
        .all()
    )
    return [_attempt_read(a) for a in attempts]


def get_student_quiz_history(
    db: Session, student_id: uuid.UUID, learning_item_id: uuid.UUID
) -> list[QuizResultRead]:
    """Results of one student's completed attempts on one quiz, most recent first."""
    attempts = (
        db.query(QuizAttempt)
        .filter(
            QuizAttempt.student_id == student_id,
            QuizAttempt.learning_item_id == learning_item_id,
            QuizAttempt.status == QuizAttemptStatusEnum.COMPLETED,
        )
        .order_by(QuizAttempt.start_time.desc())
        .all()
    )
    return [get_quiz_results(db, a.id) for a in attempts]


# ── Cleanup ───────────────────────────────────────────────────────────────────


def delete_attempts_for_items(db: Session, learning_item_ids: list[uuid.UUID]) -> int:
    """Delete every attempt (and its responses) on the given learning items.

    Does not commit; the caller owns the surrounding delete.
    """
    if not learning_item_ids:
        return 0
    attempts = (
        db.query(QuizAttempt)
        .filter(QuizAttempt.learning_item_id.in_(learning_item_ids))
        .all()
    )
    for attempt in attempts:
        for response in list(attempt.responses):
            db.delete(response)
    db.flush()
    for attempt in attempts:
        db.delete(attempt)
    return len(attempts)
