"""SQLAlchemy ORM models for the learning-management platform.

Tables
------
- users              – students / teachers / admins
- courses            – teacher-owned courses
- enrollments        – student ↔ course many‑to‑many
- weeks              – ordered sections of a course
- learning_items     – videos, documents, exercises and quizzes within a week
- documents          – uploaded files, optionally attached to a learning item
- quiz_banks         – reusable question collections owned by a teacher
- questions          – questions of a quiz bank
- quiz_attempts      – one student's pass through a quiz learning item
- student_responses  – per‑question graded answers in an attempt

Deleting a parent never cascades through the ORM (``passive_deletes="all"``);
the services remove children explicitly.
"""

import enum
import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    JSON,
    Boolean,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
    Uuid,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from lms.db.session import Base


# ── helpers ───────────────────────────────────────────────────────────────────


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _uuid() -> uuid.UUID:
    return uuid.uuid4()


# ── Enums (stored as VARCHAR via SQLAlchemy Enum) ─────────────────────────────


class UserRoleEnum(str, enum.Enum):
    STUDENT = "STUDENT"
    TEACHER = "TEACHER"
    ADMIN = "ADMIN"


class GenderEnum(str, enum.Enum):
    MALE = "MALE"
    FEMALE = "FEMALE"
    OTHER = "OTHER"


class LearningItemTypeEnum(str, enum.Enum):
    VIDEO = "VIDEO"
    DOCUMENT = "DOCUMENT"
    EXERCISE = "EXERCISE"
    QUIZ = "QUIZ"


class QuestionTypeEnum(str, enum.Enum):
    MULTIPLE_CHOICE = "MULTIPLE_CHOICE"
    TRUE_FALSE = "TRUE_FALSE"
    SHORT_ANSWER = "SHORT_ANSWER"


class QuizAttemptStatusEnum(str, enum.Enum):
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"


# ── Users ─────────────────────────────────────────────────────────────────────


class User(Base):
    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=_uuid)
    name: Mapped[str] = mapped_column(String(255))
    username: Mapped[str] = mapped_column(String(100), unique=True, index=True)
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True)
    hashed_password: Mapped[str] = mapped_column(String(255))
    role: Mapped[UserRoleEnum] = mapped_column(
        Enum(UserRoleEnum, name="user_role_enum"), default=UserRoleEnum.STUDENT
    )
    full_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    gender: Mapped[GenderEnum | None] = mapped_column(
        Enum(GenderEnum, name="gender_enum"), nullable=True
    )
    birth_year: Mapped[int | None] = mapped_column(Integer, nullable=True)
    phone_number: Mapped[str | None] = mapped_column(String(30), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    email_verified: Mapped[bool] = mapped_column(Boolean, default=False)
    email_verification_token: Mapped[str | None] = mapped_column(
        String(64), nullable=True, index=True
    )
    email_verification_token_expiry: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow
    )

    courses: Mapped[list["Course"]] = relationship(back_populates="teacher")
    enrollments: Mapped[list["Enrollment"]] = relationship(
        back_populates="student", passive_deletes="all"
    )


# ── Courses ───────────────────────────────────────────────────────────────────


class Course(Base):
    __tablename__ = "courses"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=_uuid)
    name: Mapped[str] = mapped_column(String(255), index=True)
    category: Mapped[str | None] = mapped_column(String(100), nullable=True)
    price: Mapped[float | None] = mapped_column(
        Numeric(10, 2, asdecimal=False), nullable=True
    )
    is_free: Mapped[bool] = mapped_column(Boolean, default=False)
    is_draft: Mapped[bool] = mapped_column(Boolean, default=True, index=True)
    estimated_weeks: Mapped[int | None] = mapped_column(Integer, nullable=True)
    summary: Mapped[str | None] = mapped_column(String(500), nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    thumbnail_url: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    teacher_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("users.id"))
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow
    )

    teacher: Mapped["User"] = relationship(back_populates="courses")
    weeks: Mapped[list["Week"]] = relationship(
        back_populates="course", order_by="Week.week_number", passive_deletes="all"
    )
    enrollments: Mapped[list["Enrollment"]] = relationship(
        back_populates="course", passive_deletes="all"
    )


class Enrollment(Base):
    """Student ↔ course membership."""

    __tablename__ = "enrollments"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=_uuid)
    student_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("users.id"))
    course_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("courses.id"))
    enrolled_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow
    )

    student: Mapped["User"] = relationship(back_populates="enrollments")
    course: Mapped["Course"] = relationship(back_populates="enrollments")

    __table_args__ = (
        UniqueConstraint("student_id", "course_id", name="uq_enrollment_student_course"),
    )


# ── Weeks & learning items ────────────────────────────────────────────────────


class Week(Base):
    __tablename__ = "weeks"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=_uuid)
    title: Mapped[str] = mapped_column(String(255))
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    week_number: Mapped[int] = mapped_column(Integer)
    course_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("courses.id"), index=True
    )

    course: Mapped["Course"] = relationship(back_populates="weeks")
    learning_items: Mapped[list["LearningItem"]] = relationship(
        back_populates="week",
        order_by="LearningItem.order_index",
        passive_deletes="all",
    )


class LearningItem(Base):
    __tablename__ = "learning_items"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=_uuid)
    title: Mapped[str] = mapped_column(String(255))
    type: Mapped[LearningItemTypeEnum] = mapped_column(
        Enum(LearningItemTypeEnum, name="learning_item_type_enum")
    )
    content: Mapped[str | None] = mapped_column(Text, nullable=True)
    duration_minutes: Mapped[int] = mapped_column(Integer, default=0)
    order_index: Mapped[int] = mapped_column(Integer, default=0)
    week_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("weeks.id"), index=True)
    quiz_bank_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("quiz_banks.id"), nullable=True
    )

    week: Mapped["Week"] = relationship(back_populates="learning_items")
    quiz_bank: Mapped["QuizBank | None"] = relationship(back_populates="learning_items")
    documents: Mapped[list["Document"]] = relationship(
        back_populates="learning_item", passive_deletes="all"
    )


# ── Documents ─────────────────────────────────────────────────────────────────


class Document(Base):
    __tablename__ = "documents"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=_uuid)
    title: Mapped[str] = mapped_column(String(255))
    file_name: Mapped[str] = mapped_column(String(500))
    content_type: Mapped[str | None] = mapped_column(String(255), nullable=True)
    file_size: Mapped[int] = mapped_column(Integer, default=0)
    file_url: Mapped[str] = mapped_column(String(1000))
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_video: Mapped[bool] = mapped_column(Boolean, default=False)
    uploaded_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow
    )
    uploaded_by: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("users.id"))
    learning_item_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("learning_items.id"), nullable=True, index=True
    )

    uploader: Mapped["User"] = relationship("User")
    learning_item: Mapped["LearningItem | None"] = relationship(
        back_populates="documents"
    )


# ── Quiz banks & questions ────────────────────────────────────────────────────


class QuizBank(Base):
    __tablename__ = "quiz_banks"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=_uuid)
    title: Mapped[str] = mapped_column(String(255))
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_by: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("users.id"))
    creation_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow
    )
    last_modified_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow
    )
    active: Mapped[bool] = mapped_column(Boolean, default=True, index=True)

    creator: Mapped["User"] = relationship("User")
    questions: Mapped[list["Question"]] = relationship(
        back_populates="quiz_bank", passive_deletes="all"
    )
    learning_items: Mapped[list["LearningItem"]] = relationship(
        back_populates="quiz_bank"
    )


class Question(Base):
    __tablename__ = "questions"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=_uuid)
    quiz_bank_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("quiz_banks.id"), index=True
    )
    question_text: Mapped[str] = mapped_column(Text)
    question_type: Mapped[QuestionTypeEnum] = mapped_column(
        Enum(QuestionTypeEnum, name="question_type_enum"),
        default=QuestionTypeEnum.MULTIPLE_CHOICE,
    )
    options: Mapped[list[str]] = mapped_column(JSON, default=list)
    correct_answer: Mapped[str] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow
    )

    quiz_bank: Mapped["QuizBank"] = relationship(back_populates="questions")


# ── Quiz attempts ─────────────────────────────────────────────────────────────


class QuizAttempt(Base):
    __tablename__ = "quiz_attempts"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=_uuid)
    student_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id"), index=True
    )
    quiz_bank_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("quiz_banks.id"))
    learning_item_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("learning_items.id"), index=True
    )
    start_time: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow
    )
    end_time: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    total_score: Mapped[int | None] = mapped_column(Integer, nullable=True)
    max_possible_score: Mapped[int | None] = mapped_column(Integer, nullable=True)
    status: Mapped[QuizAttemptStatusEnum] = mapped_column(
        Enum(QuizAttemptStatusEnum, name="quiz_attempt_status_enum"),
        default=QuizAttemptStatusEnum.IN_PROGRESS,
    )

    student: Mapped["User"] = relationship("User")
    quiz_bank: Mapped["QuizBank"] = relationship("QuizBank")
    learning_item: Mapped["LearningItem"] = relationship("LearningItem")
    responses: Mapped[list["StudentResponse"]] = relationship(
        back_populates="quiz_attempt",
        order_by="StudentResponse.answered_at",
        passive_deletes="all",
    )

    __table_args__ = (
        # At most one open attempt per student and learning item.
        Index(
            "uq_quiz_attempt_in_progress",
            "student_id",
            "learning_item_id",
            unique=True,
            sqlite_where=text("status = 'IN_PROGRESS'"),
            postgresql_where=text("status = 'IN_PROGRESS'"),
        ),
    )


class StudentResponse(Base):
    """One graded answer within an attempt."""

    __tablename__ = "student_responses"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=_uuid)
    quiz_attempt_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("quiz_attempts.id"), index=True
    )
    question_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("questions.id"))
    selected_answer: Mapped[str] = mapped_column(Text)
    is_correct: Mapped[bool] = mapped_column(Boolean, default=False)
    points_earned: Mapped[int] = mapped_column(Integer, default=0)
    answered_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow
    )

    quiz_attempt: Mapped["QuizAttempt"] = relationship(back_populates="responses")
    question: Mapped["Question"] = relationship("Question")

    __table_args__ = (
        UniqueConstraint(
            "quiz_attempt_id", "question_id", name="uq_student_response_attempt_question"
        ),
    )
