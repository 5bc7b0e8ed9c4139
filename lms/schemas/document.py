"""Document schemas."""

import uuid
from datetime import datetime

from lms.schemas.common import CamelModel


class DocumentUpdate(CamelModel):
    """PUT /documents/{id}: only the provided fields change."""

    title: str | None = None
    description: str | None = None


class DocumentRead(CamelModel):
    """Document row returned from API."""

    id: uuid.UUID
    title: str
    file_name: str
    content_type: str | None = None
    file_size: int
    file_url: str
    description: str | None = None
    is_video: bool = False
    uploaded_at: datetime
    uploaded_by_id: uuid.UUID
    uploaded_by_name: str | None = None
    learning_item_id: uuid.UUID | None = None
