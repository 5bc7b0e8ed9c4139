"""Question schemas."""

import uuid
from enum import Enum

from pydantic import Field, field_validator

from lms.schemas.common import CamelModel


class QuestionType(str, Enum):
    MULTIPLE_CHOICE = "MULTIPLE_CHOICE"
    TRUE_FALSE = "TRUE_FALSE"
    SHORT_ANSWER = "SHORT_ANSWER"


class QuestionCreate(CamelModel):
    quiz_bank_id: uuid.UUID
    question_text: str
    question_type: QuestionType = QuestionType.MULTIPLE_CHOICE
    options: list[str] = Field(min_length=1)
    correct_answer: str

    @field_validator("question_text", "correct_answer")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be blank")
        return value


class QuestionUpdate(CamelModel):
    """PUT /api/questions/{id}: only the provided fields change."""

    question_text: str | None = None
    question_type: QuestionType | None = None
    options: list[str] | None = Field(default=None, min_length=1)
    correct_answer: str | None = None

    @field_validator("question_text", "correct_answer")
    @classmethod
    def _not_blank(cls, value: str | None) -> str | None:
        if value is not None and not value.strip():
            raise ValueError("must not be blank")
        return value


class QuestionRead(CamelModel):
    """Question as returned from API; ``correctAnswer`` is null while hidden."""

    id: uuid.UUID
    quiz_bank_id: uuid.UUID
    question_text: str
    question_type: QuestionType
    options: list[str]
    correct_answer: str | None = None
