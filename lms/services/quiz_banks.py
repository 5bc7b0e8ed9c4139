"""Quiz banks: reusable question collections owned by a teacher."""

import logging
import uuid
from datetime import datetime, timezone

from sqlalchemy.orm import Session

from lms.core.exceptions import BadRequestError, ForbiddenError, NotFoundError
from lms.db.models import (
    LearningItem,
    LearningItemTypeEnum,
    Question,
    QuizBank,
    User,
    UserRoleEnum,
)
from lms.schemas.learning_item import LearningItemRead
from lms.schemas.quiz_bank import QuizBankCreate, QuizBankRead, QuizBankUpdate
from lms.services.learning_items import item_read

logger = logging.getLogger(__name__)


def quiz_bank_read(db: Session, bank: QuizBank) -> QuizBankRead:
    count = db.query(Question).filter(Question.quiz_bank_id == bank.id).count()
    return QuizBankRead(
        id=bank.id,
        title=bank.title,
        description=bank.description,
        created_by_id=bank.created_by,
        created_by_name=bank.creator.name if bank.creator else None,
        creation_date=bank.creation_date,
        last_modified_date=bank.last_modified_date,
        active=bank.active,
        question_count=count,
    )


def get_bank(db: Session, bank_id: uuid.UUID) -> QuizBank:
    bank = db.get(QuizBank, bank_id)
    if bank is None:
        raise NotFoundError(f"Quiz bank not found with id: {bank_id}")
    return bank


def ensure_bank_owner(bank: QuizBank, user: User) -> None:
    if user.role != UserRoleEnum.ADMIN and bank.created_by != user.id:
        raise ForbiddenError("You are not the creator of this quiz bank")


def create_quiz_bank(db: Session, body: QuizBankCreate, creator: User) -> QuizBankRead:
    now = datetime.now(timezone.utc)
    bank = QuizBank(
        title=body.title,
        description=body.description,
        created_by=creator.id,
        creation_date=now,
        last_modified_date=now,
        active=True,
    )
    db.add(bank)
    db.commit()
    db.refresh(bank)
    logger.info("Quiz bank %s created by %s", bank.id, creator.username)
    return quiz_bank_read(db, bank)


def get_quiz_bank(db: Session, bank_id: uuid.UUID) -> QuizBankRead:
    return quiz_bank_read(db, get_bank(db, bank_id))


def list_active_quiz_banks(db: Session) -> list[QuizBankRead]:
    banks = (
        db.query(QuizBank)
        .filter(QuizBank.active.is_(True))
        .order_by(QuizBank.title)
        .all()
    )
    return [quiz_bank_read(db, b) for b in banks]


def list_teacher_quiz_banks(db: Session, teacher_id: uuid.UUID) -> list[QuizBankRead]:
    banks = (
        db.query(QuizBank)
        .filter(QuizBank.created_by == teacher_id)
        .order_by(QuizBank.creation_date.desc())
        .all()
    )
    return [quiz_bank_read(db, b) for b in banks]


def update_quiz_bank(
    db: Session, bank_id: uuid.UUID, body: QuizBankUpdate, user: User
) -> QuizBankRead:
    """Apply the provided fields; a blank title is ignored.

    ``last_modified_date`` moves only when a field actually changed.
    """
    bank = get_bank(db, bank_id)
    ensure_bank_owner(bank, user)

    changed = False
    if body.title is not None and body.title.strip() and body.title != bank.title:
        bank.title = body.title
        changed = True
    if body.description is not None and body.description != bank.description:
        bank.description = body.description
        changed = True
    if body.active is not None and body.active != bank.active:
        bank.active = body.active
        changed = True

    if changed:
        bank.last_modified_date = datetime.now(timezone.utc)
        db.commit()
        db.refresh(bank)
    return quiz_bank_read(db, bank)


def delete_quiz_bank(db: Session, bank_id: uuid.UUID, user: User) -> None:
    """Soft delete: the bank is deactivated, its questions and attempts stay."""
    bank = get_bank(db, bank_id)
    ensure_bank_owner(bank, user)
    bank.active = False
    bank.last_modified_date = datetime.now(timezone.utc)
    db.commit()
    logger.info("Quiz bank %s deactivated", bank_id)


def associate_with_learning_item(
    db: Session, bank_id: uuid.UUID, learning_item_id: uuid.UUID, user: User
) -> LearningItemRead:
    bank = get_bank(db, bank_id)
    ensure_bank_owner(bank, user)
    if not bank.active:
        raise BadRequestError("Cannot associate an inactive quiz bank")

    item = db.get(LearningItem, learning_item_id)
    if item is None:
        raise NotFoundError(f"Learning item not found with id: {learning_item_id}")
    if item.type != LearningItemTypeEnum.QUIZ:
        raise BadRequestError("Quiz banks can only be associated with QUIZ learning items")

    item.quiz_bank_id = bank.id
    db.commit()
    db.refresh(item)
    logger.info("Quiz bank %s associated with learning item %s", bank.id, item.id)
    return item_read(item)
