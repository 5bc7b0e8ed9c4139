"""Questions of a quiz bank."""

import logging
import random
import uuid

from sqlalchemy.orm import Session

from lms.core.exceptions import BadRequestError, NotFoundError
from lms.db.models import Question, QuestionTypeEnum, StudentResponse, User
from lms.schemas.question import QuestionCreate, QuestionRead, QuestionUpdate
from lms.services.quiz_banks import ensure_bank_owner, get_bank

logger = logging.getLogger(__name__)


def question_read(question: Question) -> QuestionRead:
    return QuestionRead(
        id=question.id,
        quiz_bank_id=question.quiz_bank_id,
        question_text=question.question_text,
        question_type=question.question_type.value,
        options=list(question.options or []),
        correct_answer=question.correct_answer,
    )


def _get(db: Session, question_id: uuid.UUID) -> Question:
    question = db.get(Question, question_id)
    if question is None:
        raise NotFoundError(f"Question not found with id: {question_id}")
    return question


def create_question(db: Session, body: QuestionCreate, user: User) -> QuestionRead:
    bank = get_bank(db, body.quiz_bank_id)
    ensure_bank_owner(bank, user)

    question = Question(
        quiz_bank_id=bank.id,
        question_text=body.question_text,
        question_type=QuestionTypeEnum(body.question_type.value),
        options=list(body.options),
        correct_answer=body.correct_answer,
    )
    db.add(question)
    db.commit()
    db.refresh(question)
    logger.info("Question %s added to quiz bank %s", question.id, bank.id)
    return question_read(question)


def get_question(db: Session, question_id: uuid.UUID) -> QuestionRead:
    return question_read(_get(db, question_id))


def _bank_questions(db: Session, bank_id: uuid.UUID) -> list[Question]:
    get_bank(db, bank_id)
    return (
        db.query(Question)
        .filter(Question.quiz_bank_id == bank_id)
        .order_by(Question.created_at)
        .all()
    )


def list_bank_questions(db: Session, bank_id: uuid.UUID) -> list[QuestionRead]:
    return [question_read(q) for q in _bank_questions(db, bank_id)]


def random_bank_questions(
    db: Session, bank_id: uuid.UUID, count: int
) -> list[QuestionRead]:
    """Up to *count* distinct questions of the bank in random order."""
    questions = _bank_questions(db, bank_id)
    picked = random.sample(questions, min(count, len(questions)))
    return [question_read(q) for q in picked]


def update_question(
    db: Session, question_id: uuid.UUID, body: QuestionUpdate, user: User
) -> QuestionRead:
    question = _get(db, question_id)
    ensure_bank_owner(question.quiz_bank, user)

    if body.question_text is not None:
        question.question_text = body.question_text
    if body.question_type is not None:
        question.question_type = QuestionTypeEnum(body.question_type.value)
    if body.options is not None:
        question.options = list(body.options)
    if body.correct_answer is not None:
        question.correct_answer = body.correct_answer
    db.commit()
    db.refresh(question)
    return question_read(question)


def delete_question(db: Session, question_id: uuid.UUID, user: User) -> None:
    question = _get(db, question_id)
    ensure_bank_owner(question.quiz_bank, user)

    answered = (
        db.query(StudentResponse)
        .filter(StudentResponse.question_id == question.id)
        .first()
    )
    if answered is not None:
        raise BadRequestError("Cannot delete a question that students have already answered")

    db.delete(question)
    db.commit()
    logger.info("Question %s deleted", question_id)
