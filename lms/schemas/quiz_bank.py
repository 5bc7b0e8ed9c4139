"""Quiz bank schemas."""

import uuid
from datetime import datetime

from pydantic import Field

from lms.schemas.common import CamelModel


class QuizBankCreate(CamelModel):
    title: str = Field(min_length=1)
    description: str | None = None


class QuizBankUpdate(CamelModel):
    """PUT /api/quiz-banks/{id}: blank titles are ignored."""

    title: str | None = None
    description: str | None = None
    active: bool | None = None


class QuizBankLearningItemAssociation(CamelModel):
    learning_item_id: uuid.UUID


class QuizBankRead(CamelModel):
    id: uuid.UUID
    title: str
    description: str | None = None
    created_by_id: uuid.UUID
    created_by_name: str | None = None
    creation_date: datetime
    last_modified_date: datetime
    active: bool
    question_count: int = 0
