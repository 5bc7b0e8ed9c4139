"""Initial migration - create all base tables

Revision ID: 0_initial
Revises:
Create Date: 2026-01-01 00:00:00.000000
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '0_initial'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


user_role_enum = sa.Enum('STUDENT', 'TEACHER', 'ADMIN', name='user_role_enum')
gender_enum = sa.Enum('MALE', 'FEMALE', 'OTHER', name='gender_enum')
learning_item_type_enum = sa.Enum(
    'VIDEO', 'DOCUMENT', 'EXERCISE', 'QUIZ', name='learning_item_type_enum'
)
question_type_enum = sa.Enum(
    'MULTIPLE_CHOICE', 'TRUE_FALSE', 'SHORT_ANSWER', name='question_type_enum'
)
quiz_attempt_status_enum = sa.Enum(
    'IN_PROGRESS', 'COMPLETED', name='quiz_attempt_status_enum'
)


def upgrade() -> None:
    # ── users table ───────────────────────────────────────────────────
    op.create_table(
        'users',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('username', sa.String(100), nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('hashed_password', sa.String(255), nullable=False),
        sa.Column('role', user_role_enum, nullable=False),
        sa.Column('full_name', sa.String(255), nullable=True),
        sa.Column('gender', gender_enum, nullable=True),
        sa.Column('birth_year', sa.Integer(), nullable=True),
        sa.Column('phone_number', sa.String(30), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default='true'),
        sa.Column('email_verified', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('email_verification_token', sa.String(64), nullable=True),
        sa.Column('email_verification_token_expiry', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_users_username', 'users', ['username'], unique=True)
    op.create_index('ix_users_email', 'users', ['email'], unique=True)
    op.create_index(
        'ix_users_email_verification_token', 'users', ['email_verification_token']
    )

    # ── courses & enrollments ─────────────────────────────────────────
    op.create_table(
        'courses',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('category', sa.String(100), nullable=True),
        sa.Column('price', sa.Numeric(10, 2), nullable=True),
        sa.Column('is_free', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('is_draft', sa.Boolean(), nullable=False, server_default='true'),
        sa.Column('estimated_weeks', sa.Integer(), nullable=True),
        sa.Column('summary', sa.String(500), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('thumbnail_url', sa.String(1000), nullable=True),
        sa.Column('teacher_id', sa.Uuid(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['teacher_id'], ['users.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_courses_name', 'courses', ['name'])
    op.create_index('ix_courses_is_draft', 'courses', ['is_draft'])

    op.create_table(
        'enrollments',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('student_id', sa.Uuid(), nullable=False),
        sa.Column('course_id', sa.Uuid(), nullable=False),
        sa.Column('enrolled_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['student_id'], ['users.id']),
        sa.ForeignKeyConstraint(['course_id'], ['courses.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('student_id', 'course_id', name='uq_enrollment_student_course'),
    )

    # ── weeks ─────────────────────────────────────────────────────────
    op.create_table(
        'weeks',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('week_number', sa.Integer(), nullable=False),
        sa.Column('course_id', sa.Uuid(), nullable=False),
        sa.ForeignKeyConstraint(['course_id'], ['courses.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_weeks_course_id', 'weeks', ['course_id'])

    # ── quiz banks & questions ────────────────────────────────────────
    op.create_table(
        'quiz_banks',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('created_by', sa.Uuid(), nullable=False),
        sa.Column('creation_date', sa.DateTime(timezone=True), nullable=False),
        sa.Column('last_modified_date', sa.DateTime(timezone=True), nullable=False),
        sa.Column('active', sa.Boolean(), nullable=False, server_default='true'),
        sa.ForeignKeyConstraint(['created_by'], ['users.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_quiz_banks_active', 'quiz_banks', ['active'])

    op.create_table(
        'questions',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('quiz_bank_id', sa.Uuid(), nullable=False),
        sa.Column('question_text', sa.Text(), nullable=False),
        sa.Column('question_type', question_type_enum, nullable=False),
        sa.Column('options', sa.JSON(), nullable=False),
        sa.Column('correct_answer', sa.Text(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['quiz_bank_id'], ['quiz_banks.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_questions_quiz_bank_id', 'questions', ['quiz_bank_id'])

    # ── learning items & documents ────────────────────────────────────
    op.create_table(
        'learning_items',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('type', learning_item_type_enum, nullable=False),
        sa.Column('content', sa.Text(), nullable=True),
        sa.Column('duration_minutes', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('order_index', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('week_id', sa.Uuid(), nullable=False),
        sa.Column('quiz_bank_id', sa.Uuid(), nullable=True),
        sa.ForeignKeyConstraint(['week_id'], ['weeks.id']),
        sa.ForeignKeyConstraint(['quiz_bank_id'], ['quiz_banks.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_learning_items_week_id', 'learning_items', ['week_id'])

    op.create_table(
        'documents',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('file_name', sa.String(500), nullable=False),
        sa.Column('content_type', sa.String(255), nullable=True),
        sa.Column('file_size', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('file_url', sa.String(1000), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('is_video', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('uploaded_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('uploaded_by', sa.Uuid(), nullable=False),
        sa.Column('learning_item_id', sa.Uuid(), nullable=True),
        sa.ForeignKeyConstraint(['uploaded_by'], ['users.id']),
        sa.ForeignKeyConstraint(['learning_item_id'], ['learning_items.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_documents_learning_item_id', 'documents', ['learning_item_id'])

    # ── quiz attempts & responses ─────────────────────────────────────
    op.create_table(
        'quiz_attempts',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('student_id', sa.Uuid(), nullable=False),
        sa.Column('quiz_bank_id', sa.Uuid(), nullable=False),
        sa.Column('learning_item_id', sa.Uuid(), nullable=False),
        sa.Column('start_time', sa.DateTime(timezone=True), nullable=False),
        sa.Column('end_time', sa.DateTime(timezone=True), nullable=True),
        sa.Column('total_score', sa.Integer(), nullable=True),
        sa.Column('max_possible_score', sa.Integer(), nullable=True),
        sa.Column('status', quiz_attempt_status_enum, nullable=False),
        sa.ForeignKeyConstraint(['student_id'], ['users.id']),
        sa.ForeignKeyConstraint(['quiz_bank_id'], ['quiz_banks.id']),
        sa.ForeignKeyConstraint(['learning_item_id'], ['learning_items.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_quiz_attempts_student_id', 'quiz_attempts', ['student_id'])
    op.create_index(
        'ix_quiz_attempts_learning_item_id', 'quiz_attempts', ['learning_item_id']
    )
    # At most one open attempt per student and learning item
    op.create_index(
        'uq_quiz_attempt_in_progress',
        'quiz_attempts',
        ['student_id', 'learning_item_id'],
        unique=True,
        postgresql_where=sa.text("status = 'IN_PROGRESS'"),
        sqlite_where=sa.text("status = 'IN_PROGRESS'"),
    )

    op.create_table(
        'student_responses',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('quiz_attempt_id', sa.Uuid(), nullable=False),
        sa.Column('question_id', sa.Uuid(), nullable=False),
        sa.Column('selected_answer', sa.Text(), nullable=False),
        sa.Column('is_correct', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('points_earned', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('answered_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['quiz_attempt_id'], ['quiz_attempts.id']),
        sa.ForeignKeyConstraint(['question_id'], ['questions.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint(
            'quiz_attempt_id', 'question_id', name='uq_student_response_attempt_question'
        ),
    )
    op.create_index(
        'ix_student_responses_quiz_attempt_id', 'student_responses', ['quiz_attempt_id']
    )


def downgrade() -> None:
    op.drop_table('student_responses')
    op.drop_index('uq_quiz_attempt_in_progress', table_name='quiz_attempts')
    op.drop_table('quiz_attempts')
    op.drop_table('documents')
    op.drop_table('learning_items')
    op.drop_table('questions')
    op.drop_table('quiz_banks')
    op.drop_table('weeks')
    op.drop_table('enrollments')
    op.drop_table('courses')
    op.drop_table('users')

    bind = op.get_bind()
    for enum in (
        quiz_attempt_status_enum,
        question_type_enum,
        learning_item_type_enum,
        gender_enum,
        user_role_enum,
    ):
        enum.drop(bind, checkfirst=True)
