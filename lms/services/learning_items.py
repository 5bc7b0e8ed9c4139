"""Learning items: the ordered content of a week."""

import logging
import uuid

from sqlalchemy.orm import Session

from lms.core.exceptions import BadRequestError, NotFoundError
from lms.db.models import Document, LearningItem, LearningItemTypeEnum, User, Week
from lms.schemas.document import DocumentRead
from lms.schemas.learning_item import (
    LearningItemCreate,
    LearningItemRead,
    LearningItemType,
    LearningItemUpdate,
)
from lms.services import quiz_attempts
from lms.services.access import ensure_course_owner
from lms.services.documents import document_read, remove_document, store_document
from lms.services.storage import FileStorage

logger = logging.getLogger(__name__)


def item_read(item: LearningItem) -> LearningItemRead:
    return LearningItemRead(
        id=item.id,
        title=item.title,
        type=item.type.value,
        content=item.content,
        duration_minutes=item.duration_minutes,
        order_index=item.order_index,
        week_id=item.week_id,
        week_title=item.week.title if item.week else None,
        quiz_bank_id=item.quiz_bank_id,
        documents=[document_read(d) for d in item.documents],
    )


def get_week(db: Session, week_id: uuid.UUID) -> Week:
    week = db.get(Week, week_id)
    if week is None:
        raise NotFoundError(f"Week not found with id: {week_id}")
    return week


def get_item(db: Session, item_id: uuid.UUID) -> LearningItem:
    item = db.get(LearningItem, item_id)
    if item is None:
        raise NotFoundError(f"Learning item not found with id: {item_id}")
    return item


def _owned_item(db: Session, item_id: uuid.UUID, user: User) -> LearningItem:
    item = get_item(db, item_id)
    ensure_course_owner(item.week.course, user)
    return item


# ── Queries ───────────────────────────────────────────────────────────────────


def get_learning_item(db: Session, item_id: uuid.UUID) -> LearningItemRead:
    return item_read(get_item(db, item_id))


def list_by_week(db: Session, week_id: uuid.UUID) -> list[LearningItemRead]:
    get_week(db, week_id)
    items = (
        db.query(LearningItem)
        .filter(LearningItem.week_id == week_id)
        .order_by(LearningItem.order_index)
        .all()
    )
    return [item_read(i) for i in items]


def list_by_week_and_type(
    db: Session, week_id: uuid.UUID, item_type: LearningItemType
) -> list[LearningItemRead]:
    get_week(db, week_id)
    items = (
        db.query(LearningItem)
        .filter(
            LearningItem.week_id == week_id,
            LearningItem.type == LearningItemTypeEnum(item_type.value),
        )
        .order_by(LearningItem.order_index)
        .all()
    )
    return [item_read(i) for i in items]


def download_url(db: Session, item_id: uuid.UUID) -> str:
    """URL of the item's document, for the download redirect."""
    item = get_item(db, item_id)
    if not item.documents:
        raise NotFoundError("No document found for this learning item")
    return item.documents[0].file_url


# ── Mutations ─────────────────────────────────────────────────────────────────


def create_learning_item(
    db: Session, body: LearningItemCreate, user: User
) -> LearningItemRead:
    week = get_week(db, body.week_id)
    ensure_course_owner(week.course, user)

    order_index = body.order_index
    if not order_index:
        # append after the existing items
        order_index = (
            db.query(LearningItem).filter(LearningItem.week_id == week.id).count()
        )

    item = LearningItem(
        title=body.title,
        type=LearningItemTypeEnum(body.type.value),
        content=body.content,
        duration_minutes=body.duration_minutes,
        order_index=order_index,
        week_id=week.id,
    )
    db.add(item)
    db.commit()
    db.refresh(item)
    logger.info("Learning item %s (%s) added to week %s", item.id, item.type.value, week.id)
    return item_read(item)


def update_learning_item(
    db: Session, item_id: uuid.UUID, body: LearningItemUpdate, user: User
) -> LearningItemRead:
    item = _owned_item(db, item_id, user)
    if body.title is not None:
        item.title = body.title
    if body.type is not None:
        item.type = LearningItemTypeEnum(body.type.value)
    if body.content is not None:
        item.content = body.content
    if body.duration_minutes is not None:
        item.duration_minutes = body.duration_minutes
    if body.order_index is not None:
        item.order_index = body.order_index
    db.commit()
    db.refresh(item)
    return item_read(item)


def reorder_learning_items(
    db: Session, week_id: uuid.UUID, item_ids: list[uuid.UUID], user: User
) -> list[LearningItemRead]:
    """Give the listed items of a week consecutive order indexes."""
    week = get_week(db, week_id)
    ensure_course_owner(week.course, user)

    by_id = {item.id: item for item in week.learning_items}
    for item_id in item_ids:
        if item_id not in by_id:
            raise BadRequestError(f"Learning item {item_id} does not belong to this week")
    for position, item_id in enumerate(item_ids):
        by_id[item_id].order_index = position
    db.commit()
    return list_by_week(db, week_id)


def purge_learning_items(db: Session, items: list[LearningItem]) -> None:
    """Delete *items* with their quiz attempts; their documents are detached.

    Does not commit.
    """
    if not items:
        return
    item_ids = [item.id for item in items]
    (
        db.query(Document)
        .filter(Document.learning_item_id.in_(item_ids))
        .update({Document.learning_item_id: None}, synchronize_session="fetch")
    )
    quiz_attempts.delete_attempts_for_items(db, item_ids)
    db.flush()
    for item in items:
        db.delete(item)


def delete_learning_item(db: Session, item_id: uuid.UUID, user: User) -> None:
    item = _owned_item(db, item_id, user)
    purge_learning_items(db, [item])
    db.commit()
    logger.info("Learning item %s deleted", item_id)


# ── Item documents ────────────────────────────────────────────────────────────


def upload_item_document(
    db: Session,
    storage: FileStorage,
    item_id: uuid.UUID,
    *,
    filename: str | None,
    content: bytes,
    content_type: str | None,
    user: User,
) -> DocumentRead:
    """Attach a file to the item, replacing whatever document it had."""
    item = _owned_item(db, item_id, user)

    for existing in list(item.documents):
        remove_document(db, storage, existing)
    db.flush()

    doc = store_document(
        db,
        storage,
        filename=filename,
        content=content,
        content_type=content_type,
        title=item.title,
        description=None,
        uploader=user,
        learning_item_id=item.id,
    )
    db.commit()
    db.refresh(doc)
    logger.info("Document %s uploaded to learning item %s", doc.id, item.id)
    return document_read(doc)


def delete_item_document(
    db: Session,
    storage: FileStorage,
    item_id: uuid.UUID,
    document_id: uuid.UUID,
    user: User,
) -> None:
    item = _owned_item(db, item_id, user)
    doc = db.get(Document, document_id)
    if doc is None or doc.learning_item_id != item.id:
        raise NotFoundError(f"Document {document_id} not found on this learning item")
    remove_document(db, storage, doc)
    db.commit()
    logger.info("Document %s removed from learning item %s", document_id, item_id)
