"""Document upload, lookup and management routes."""

import uuid

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status
from sqlalchemy.orm import Session

from lms.api.deps import get_current_user
from lms.db.models import User
from lms.db.session import get_db
from lms.schemas.common import ApiResponse, ok
from lms.schemas.document import DocumentRead, DocumentUpdate
from lms.services import documents as document_service
from lms.services.storage import FileStorage, get_file_storage

router = APIRouter()


@router.post(
    "/upload",
    response_model=ApiResponse[DocumentRead],
    status_code=status.HTTP_201_CREATED,
)
def upload_document(
    file: UploadFile = File(...),
    title: str | None = Form(None),
    description: str | None = Form(None),
    learning_item_id: uuid.UUID | None = Form(None, alias="learningItemId"),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    storage: FileStorage = Depends(get_file_storage),
):
    """Upload a file, optionally attaching it to a learning item."""
    doc = document_service.upload_document(
        db,
        storage,
        filename=file.filename,
        content=file.file.read(),
        content_type=file.content_type,
        title=title,
        description=description,
        uploader=current_user,
        learning_item_id=learning_item_id,
    )
    return ok("Document uploaded successfully", doc)


@router.get("/user", response_model=ApiResponse[list[DocumentRead]])
def list_my_documents(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return ok(
        "Documents retrieved successfully",
        document_service.list_user_documents(db, current_user),
    )


@router.get(
    "/learning-item/{learning_item_id}",
    response_model=ApiResponse[list[DocumentRead]],
)
def list_learning_item_documents(
    learning_item_id: uuid.UUID,
    _: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return ok(
        "Documents retrieved successfully",
        document_service.list_learning_item_documents(db, learning_item_id),
    )


@router.get("/standalone", response_model=ApiResponse[list[DocumentRead]])
def list_standalone_documents(
    _: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return ok(
        "Documents retrieved successfully",
        document_service.list_standalone_documents(db),
    )


@router.get("/search", response_model=ApiResponse[list[DocumentRead]])
def search_documents(
    keyword: str = Query(..., min_length=1),
    _: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return ok(
        "Documents retrieved successfully",
        document_service.search_documents(db, keyword),
    )


@router.get("/{document_id}", response_model=ApiResponse[DocumentRead])
def get_document(
    document_id: uuid.UUID,
    _: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return ok(
        "Document retrieved successfully",
        document_service.get_document(db, document_id),
    )


@router.put("/{document_id}", response_model=ApiResponse[DocumentRead])
def update_document(
    document_id: uuid.UUID,
    body: DocumentUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return ok(
        "Document updated successfully",
        document_service.update_document(db, document_id, body, current_user),
    )


@router.put(
    "/{document_id}/associate/{learning_item_id}",
    response_model=ApiResponse[DocumentRead],
)
def associate_document(
    document_id: uuid.UUID,
    learning_item_id: uuid.UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return ok(
        "Document associated successfully",
        document_service.associate_with_learning_item(
            db, document_id, learning_item_id, current_user
        ),
    )


@router.put("/{document_id}/disassociate", response_model=ApiResponse[DocumentRead])
def disassociate_document(
    document_id: uuid.UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return ok(
        "Document disassociated successfully",
        document_service.disassociate_from_learning_item(db, document_id, current_user),
    )


@router.delete("/{document_id}", response_model=ApiResponse[None])
def delete_document(
    document_id: uuid.UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    storage: FileStorage = Depends(get_file_storage),
):
    """Delete a document you uploaded, with its stored file."""
    document_service.delete_document(db, storage, document_id, current_user)
    return ok("Document deleted successfully")
