"""Quiz attempt schemas."""

import uuid
from datetime import datetime
from enum import Enum

from lms.schemas.common import CamelModel
from lms.schemas.question import QuestionRead


class QuizAttemptStatus(str, Enum):
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"


class StartAttemptRequest(CamelModel):
    """POST /api/quizzes/attempt"""

    learning_item_id: uuid.UUID


class AnswerSubmission(CamelModel):
    """One element of PUT /api/quizzes/attempt/{id}/answers"""

    question_id: uuid.UUID
    selected_answer: str


class QuizAttemptRead(CamelModel):
    id: uuid.UUID
    student_id: uuid.UUID
    student_name: str | None = None
    quiz_bank_id: uuid.UUID
    quiz_bank_title: str | None = None
    learning_item_id: uuid.UUID
    start_time: datetime
    end_time: datetime | None = None
    total_score: int | None = None
    max_possible_score: int | None = None
    status: QuizAttemptStatus


class QuizAttemptWithQuestionsRead(QuizAttemptRead):
    questions: list[QuestionRead] = []


class StudentResponseRead(CamelModel):
    """A graded answer."""

    id: uuid.UUID
    quiz_attempt_id: uuid.UUID
    question_id: uuid.UUID
    question_text: str
    selected_answer: str
    is_correct: bool
    points_earned: int


class QuizResultRead(CamelModel):
    """Score summary of an attempt with its per-question breakdown."""

    quiz_attempt_id: uuid.UUID
    quiz_title: str
    start_time: datetime
    end_time: datetime | None = None
    total_score: int | None = None
    max_possible_score: int | None = None
    percentage_score: float
    responses: list[StudentResponseRead] = []
