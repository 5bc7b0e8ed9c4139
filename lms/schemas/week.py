"""Week schemas."""

import uuid

from pydantic import Field

from lms.schemas.common import CamelModel
from lms.schemas.learning_item import LearningItemRead


class WeekCreate(CamelModel):
    title: str = Field(min_length=1)
    description: str | None = None
    week_number: int = Field(ge=1)
    course_id: uuid.UUID


class WeekUpdate(CamelModel):
    title: str | None = Field(default=None, min_length=1)
    description: str | None = None
    week_number: int | None = Field(default=None, ge=1)


class WeekRead(CamelModel):
    id: uuid.UUID
    title: str
    description: str | None = None
    week_number: int
    course_id: uuid.UUID
    learning_items: list[LearningItemRead] = []
