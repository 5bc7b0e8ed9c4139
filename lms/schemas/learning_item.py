"""Learning item schemas."""

import uuid
from enum import Enum

from pydantic import Field

from lms.schemas.common import CamelModel
from lms.schemas.document import DocumentRead


class LearningItemType(str, Enum):
    VIDEO = "VIDEO"
    DOCUMENT = "DOCUMENT"
    EXERCISE = "EXERCISE"
    QUIZ = "QUIZ"


class LearningItemCreate(CamelModel):
    """POST /learning-items: ``orderIndex`` 0 or missing appends to the week."""

    title: str = Field(min_length=1)
    type: LearningItemType
    content: str | None = None
    duration_minutes: int = Field(default=0, ge=0)
    order_index: int | None = Field(default=None, ge=0)
    week_id: uuid.UUID


class LearningItemUpdate(CamelModel):
    title: str | None = Field(default=None, min_length=1)
    type: LearningItemType | None = None
    content: str | None = None
    duration_minutes: int | None = Field(default=None, ge=0)
    order_index: int | None = Field(default=None, ge=0)


class LearningItemReorder(CamelModel):
    """POST /learning-items/week/{weekId}/reorder: ids in their new order."""

    item_ids: list[uuid.UUID]


class LearningItemRead(CamelModel):
    id: uuid.UUID
    title: str
    type: LearningItemType
    content: str | None = None
    duration_minutes: int
    order_index: int
    week_id: uuid.UUID
    week_title: str | None = None
    quiz_bank_id: uuid.UUID | None = None
    documents: list[DocumentRead] = []
