"""Uploaded documents and videos.

A document may stand alone or hang off one learning item. Only the user who
uploaded a document may edit, re-associate or delete it.
"""

import logging
import uuid

from sqlalchemy import or_
from sqlalchemy.orm import Session

from lms.core.exceptions import ForbiddenError, NotFoundError
from lms.db.models import Document, LearningItem, User
from lms.schemas.document import DocumentRead, DocumentUpdate
from lms.services.storage import FileStorage, safe_name

logger = logging.getLogger(__name__)


def document_read(doc: Document) -> DocumentRead:
    return DocumentRead(
        id=doc.id,
        title=doc.title,
        file_name=doc.file_name,
        content_type=doc.content_type,
        file_size=doc.file_size,
        file_url=doc.file_url,
        description=doc.description,
        is_video=doc.is_video,
        uploaded_at=doc.uploaded_at,
        uploaded_by_id=doc.uploaded_by,
        uploaded_by_name=doc.uploader.name if doc.uploader else None,
        learning_item_id=doc.learning_item_id,
    )


def _get(db: Session, document_id: uuid.UUID) -> Document:
    doc = db.get(Document, document_id)
    if doc is None:
        raise NotFoundError(f"Document not found with id: {document_id}")
    return doc


def _get_owned(db: Session, document_id: uuid.UUID, user: User) -> Document:
    doc = _get(db, document_id)
    if doc.uploaded_by != user.id:
        raise ForbiddenError("You don't have permission to modify this document")
    return doc


def _get_learning_item(db: Session, learning_item_id: uuid.UUID) -> LearningItem:
    item = db.get(LearningItem, learning_item_id)
    if item is None:
        raise NotFoundError(f"Learning item not found with id: {learning_item_id}")
    return item


# ── Upload ────────────────────────────────────────────────────────────────────


def store_document(
    db: Session,
    storage: FileStorage,
    *,
    filename: str | None,
    content: bytes,
    content_type: str | None,
    title: str | None,
    description: str | None,
    uploader: User,
    learning_item_id: uuid.UUID | None = None,
) -> Document:
    """Push the bytes to *storage* and add the document row (not committed)."""
    is_video = bool(content_type and content_type.startswith("video/"))
    file_url = storage.upload(
        filename, content, content_type, directory="videos" if is_video else "documents"
    )
    name = safe_name(filename)
    doc = Document(
        title=title or name,
        file_name=name,
        content_type=content_type,
        file_size=len(content),
        file_url=file_url,
        description=description,
        is_video=is_video,
        uploaded_by=uploader.id,
        learning_item_id=learning_item_id,
    )
    db.add(doc)
    return doc


def upload_document(
    db: Session,
    storage: FileStorage,
    *,
    filename: str | None,
    content: bytes,
    content_type: str | None,
    title: str | None,
    description: str | None,
    uploader: User,
    learning_item_id: uuid.UUID | None = None,
) -> DocumentRead:
    if learning_item_id is not None:
        _get_learning_item(db, learning_item_id)

    doc = store_document(
        db,
        storage,
        filename=filename,
        content=content,
        content_type=content_type,
        title=title,
        description=description,
        uploader=uploader,
        learning_item_id=learning_item_id,
    )
    db.commit()
    db.refresh(doc)
    logger.info("Document uploaded: %s (%s) by %s", doc.id, doc.file_name, uploader.username)
    return document_read(doc)


# ── Queries ───────────────────────────────────────────────────────────────────


def get_document(db: Session, document_id: uuid.UUID) -> DocumentRead:
    return document_read(_get(db, document_id))


def list_user_documents(db: Session, user: User) -> list[DocumentRead]:
    docs = (
        db.query(Document)
        .filter(Document.uploaded_by == user.id)
        .order_by(Document.uploaded_at.desc())
        .all()
    )
    return [document_read(d) for d in docs]


def list_learning_item_documents(
    db: Session, learning_item_id: uuid.UUID
) -> list[DocumentRead]:
    docs = (
        db.query(Document)
        .filter(Document.learning_item_id == learning_item_id)
        .order_by(Document.uploaded_at)
        .all()
    )
    return [document_read(d) for d in docs]


def list_standalone_documents(db: Session) -> list[DocumentRead]:
    """Documents not attached to any learning item."""
    docs = (
        db.query(Document)
        .filter(Document.learning_item_id.is_(None))
        .order_by(Document.uploaded_at.desc())
        .all()
    )
    return [document_read(d) for d in docs]


def search_documents(db: Session, keyword: str) -> list[DocumentRead]:
    """Case-insensitive match on title or description."""
    pattern = f"%{keyword}%"
    docs = (
        db.query(Document)
        .filter(or_(Document.title.ilike(pattern), Document.description.ilike(pattern)))
        .order_by(Document.title)
        .all()
    )
    return [document_read(d) for d in docs]


# ── Mutations ─────────────────────────────────────────────────────────────────


def update_document(
    db: Session, document_id: uuid.UUID, body: DocumentUpdate, user: User
) -> DocumentRead:
    doc = _get_owned(db, document_id, user)
    if body.title is not None:
        doc.title = body.title
    if body.description is not None:
        doc.description = body.description
    db.commit()
    db.refresh(doc)
    return document_read(doc)


def associate_with_learning_item(
    db: Session, document_id: uuid.UUID, learning_item_id: uuid.UUID, user: User
) -> DocumentRead:
    doc = _get_owned(db, document_id, user)
    item = _get_learning_item(db, learning_item_id)
    doc.learning_item_id = item.id
    db.commit()
    db.refresh(doc)
    logger.info("Document %s associated with learning item %s", doc.id, item.id)
    return document_read(doc)


def disassociate_from_learning_item(
    db: Session, document_id: uuid.UUID, user: User
) -> DocumentRead:
    doc = _get_owned(db, document_id, user)
    doc.learning_item_id = None
    db.commit()
    db.refresh(doc)
    return document_read(doc)


def remove_document(db: Session, storage: FileStorage, doc: Document) -> None:
    """Delete the stored file and the row (not committed).

    A file the backend cannot remove is logged and the row goes anyway.
    """
    if not storage.delete(doc.file_url):
        logger.warning("Stored file for document %s was not removed: %s", doc.id, doc.file_url)
    db.delete(doc)


def delete_document(
    db: Session, storage: FileStorage, document_id: uuid.UUID, user: User
) -> None:
    doc = _get_owned(db, document_id, user)
    remove_document(db, storage, doc)
    db.commit()
    logger.info("Document %s deleted by %s", document_id, user.username)
