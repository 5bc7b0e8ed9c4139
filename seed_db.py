"""One-time DB setup: create tables and seed demo records."""
from lms.db.session import Base, get_engine, session_scope
from lms.db.models import (
    Course,
    LearningItem,
    LearningItemTypeEnum,
    Question,
    QuestionTypeEnum,
    QuizBank,
    User,
    UserRoleEnum,
    Week,
)
from lms.core.security import hash_password

# 1. Create all tables
engine = get_engine()
Base.metadata.create_all(bind=engine)
print("✅ All tables created")

with session_scope() as db:
    # 2. Demo teacher
    teacher = db.query(User).filter(User.username == "teacher").first()
    if not teacher:
        teacher = User(
            name="Teacher",
            username="teacher",
            email="teacher@example.com",
            hashed_password=hash_password("teacher123"),
            full_name="Demo Teacher",
            role=UserRoleEnum.TEACHER,
            email_verified=True,
        )
        db.add(teacher)
        db.commit()
        db.refresh(teacher)
        print("✅ Created teacher: teacher / teacher123")
    else:
        print("  Teacher user already exists")

    # 3. Demo student
    student = db.query(User).filter(User.username == "student").first()
    if not student:
        student = User(
            name="Student",
            username="student",
            email="student@example.com",
            hashed_password=hash_password("student123"),
            full_name="Demo Student",
            role=UserRoleEnum.STUDENT,
            email_verified=True,
        )
        db.add(student)
        db.commit()
        print("✅ Created student: student / student123")
    else:
        print("  Student user already exists")

    # 4. Quiz bank with a few programming questions
    bank = db.query(QuizBank).filter(QuizBank.title == "Programming Fundamentals Quiz").first()
    if not bank:
        bank = QuizBank(
            title="Programming Fundamentals Quiz",
            description="Test your knowledge of basic programming concepts",
            created_by=teacher.id,
            active=True,
        )
        db.add(bank)
        db.flush()
        for text, options, answer in [
            (
                "What does HTML stand for?",
                [
                    "Hyper Text Markup Language",
                    "High Tech Machine Learning",
                    "Home Tool Management Language",
                    "Hyperlink Text Management Layer",
                ],
                "Hyper Text Markup Language",
            ),
            (
                "Which of the following is NOT a programming language?",
                ["Java", "Python", "HTML", "C++"],
                "HTML",
            ),
            (
                "What does CSS stand for?",
                [
                    "Cascading Style Sheets",
                    "Computer Style Syntax",
                    "Creative Style System",
                    "Colorful Style Sheets",
                ],
                "Cascading Style Sheets",
            ),
        ]:
            db.add(
                Question(
                    quiz_bank_id=bank.id,
                    question_text=text,
                    question_type=QuestionTypeEnum.MULTIPLE_CHOICE,
                    options=options,
                    correct_answer=answer,
                )
            )
        db.commit()
        db.refresh(bank)
        print("✅ Created quiz bank with 3 questions")
    else:
        print("  Quiz bank already exists")

    # 5. Published course with one quiz week
    course = db.query(Course).filter(Course.name == "Web Development Basics").first()
    if not course:
        course = Course(
            name="Web Development Basics",
            category="Programming",
            is_free=True,
            is_draft=False,
            estimated_weeks=1,
            summary="HTML, CSS and a first quiz",
            teacher_id=teacher.id,
        )
        db.add(course)
        db.flush()
        week = Week(title="Getting started", week_number=1, course_id=course.id)
        db.add(week)
        db.flush()
        db.add(
            LearningItem(
                title="Fundamentals quiz",
                type=LearningItemTypeEnum.QUIZ,
                duration_minutes=15,
                order_index=0,
                week_id=week.id,
                quiz_bank_id=bank.id,
            )
        )
        db.commit()
        print("✅ Created course 'Web Development Basics' with a quiz week")
    else:
        print("  Demo course already exists")

print("\n🎉 Database seeded successfully!")
