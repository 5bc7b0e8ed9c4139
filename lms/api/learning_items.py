"""Learning item routes, including the item's attached document."""

import uuid

from fastapi import APIRouter, Depends, File, UploadFile, status
from fastapi.responses import RedirectResponse
from sqlalchemy.orm import Session

from lms.api.deps import get_current_user, require_teacher
from lms.db.models import User
from lms.db.session import get_db
from lms.schemas.common import ApiResponse, ok
from lms.schemas.document import DocumentRead
from lms.schemas.learning_item import (
    LearningItemCreate,
    LearningItemRead,
    LearningItemReorder,
    LearningItemType,
    LearningItemUpdate,
)
from lms.services import learning_items as item_service
from lms.services.storage import FileStorage, get_file_storage

router = APIRouter()


@router.post(
    "",
    response_model=ApiResponse[LearningItemRead],
    status_code=status.HTTP_201_CREATED,
)
def create_learning_item(
    body: LearningItemCreate,
    current_user: User = Depends(require_teacher),
    db: Session = Depends(get_db),
):
    return ok(
        "Learning item created successfully",
        item_service.create_learning_item(db, body, current_user),
    )


@router.get("/week/{week_id}", response_model=ApiResponse[list[LearningItemRead]])
def list_week_items(
    week_id: uuid.UUID,
    _: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return ok(
        "Learning items retrieved successfully",
        item_service.list_by_week(db, week_id),
    )


@router.get(
    "/week/{week_id}/type/{item_type}",
    response_model=ApiResponse[list[LearningItemRead]],
)
def list_week_items_by_type(
    week_id: uuid.UUID,
    item_type: LearningItemType,
    _: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return ok(
        "Learning items retrieved successfully",
        item_service.list_by_week_and_type(db, week_id, item_type),
    )


@router.post(
    "/week/{week_id}/reorder",
    response_model=ApiResponse[list[LearningItemRead]],
)
def reorder_week_items(
    week_id: uuid.UUID,
    body: LearningItemReorder,
    current_user: User = Depends(require_teacher),
    db: Session = Depends(get_db),
):
    return ok(
        "Learning items reordered successfully",
        item_service.reorder_learning_items(db, week_id, body.item_ids, current_user),
    )


@router.get("/{item_id}", response_model=ApiResponse[LearningItemRead])
def get_learning_item(
    item_id: uuid.UUID,
    _: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return ok(
        "Learning item retrieved successfully",
        item_service.get_learning_item(db, item_id),
    )


@router.put("/{item_id}", response_model=ApiResponse[LearningItemRead])
def update_learning_item(
    item_id: uuid.UUID,
    body: LearningItemUpdate,
    current_user: User = Depends(require_teacher),
    db: Session = Depends(get_db),
):
    return ok(
        "Learning item updated successfully",
        item_service.update_learning_item(db, item_id, body, current_user),
    )


@router.delete("/{item_id}", response_model=ApiResponse[None])
def delete_learning_item(
    item_id: uuid.UUID,
    current_user: User = Depends(require_teacher),
    db: Session = Depends(get_db),
):
    item_service.delete_learning_item(db, item_id, current_user)
    return ok("Learning item deleted successfully")


# ── Attached document ─────────────────────────────────────────────────────────


@router.post(
    "/{item_id}/documents",
    response_model=ApiResponse[DocumentRead],
    status_code=status.HTTP_201_CREATED,
)
def upload_item_document(
    item_id: uuid.UUID,
    file: UploadFile = File(...),
    current_user: User = Depends(require_teacher),
    db: Session = Depends(get_db),
    storage: FileStorage = Depends(get_file_storage),
):
    """Upload a file for the item, replacing its current document."""
    doc = item_service.upload_item_document(
        db,
        storage,
        item_id,
        filename=file.filename,
        content=file.file.read(),
        content_type=file.content_type,
        user=current_user,
    )
    return ok("Document uploaded successfully", doc)


@router.delete(
    "/{item_id}/documents/{document_id}", response_model=ApiResponse[None]
)
def delete_item_document(
    item_id: uuid.UUID,
    document_id: uuid.UUID,
    current_user: User = Depends(require_teacher),
    db: Session = Depends(get_db),
    storage: FileStorage = Depends(get_file_storage),
):
    item_service.delete_item_document(db, storage, item_id, document_id, current_user)
    return ok("Document deleted successfully")


@router.get("/{item_id}/download")
def download_item_document(
    item_id: uuid.UUID,
    _: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Redirect to the stored file of the item's document."""
    url = item_service.download_url(db, item_id)
    return RedirectResponse(url, status_code=status.HTTP_302_FOUND)
