"""Tests for the quiz attempt lifecycle: start → answer → complete → score."""

import uuid

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from lms.core.exceptions import BadRequestError, NotFoundError
from lms.db.models import (
    Course,
    LearningItem,
    LearningItemTypeEnum,
    Question,
    QuizAttempt,
    QuizAttemptStatusEnum,
    QuizBank,
    StudentResponse,
    User,
    UserRoleEnum,
    Week,
)
from lms.schemas.quiz import AnswerSubmission
from lms.services import quiz_attempts


def _start(client: TestClient, student, item_id: str):
    return client.post(
        "/api/quizzes/attempt", json={"learningItemId": item_id}, headers=student.headers
    )


def _answers(quiz_setup, *selected: str) -> list[dict]:
    return [
        {"questionId": q["id"], "selectedAnswer": answer}
        for q, answer in zip(quiz_setup.questions, selected)
    ]


# ── HTTP flow ─────────────────────────────────────────────────────────────────


class TestStartAttempt:
    def test_start(self, client: TestClient, student, quiz_setup):
        r = _start(client, student, quiz_setup.item["id"])
        assert r.status_code == 201
        attempt = r.json()["data"]
        assert attempt["status"] == "IN_PROGRESS"
        assert attempt["studentId"] == student.id
        assert attempt["quizBankId"] == quiz_setup.bank["id"]
        assert attempt["totalScore"] is None
        assert attempt["endTime"] is None

    def test_second_start_rejected_while_in_progress(
        self, client: TestClient, student, quiz_setup
    ):
        _start(client, student, quiz_setup.item["id"])
        r = _start(client, student, quiz_setup.item["id"])
        assert r.status_code == 400
        assert r.json()["status"] == "ERROR"

    def test_restart_allowed_after_completion(self, client: TestClient, student, quiz_setup):
        first = _start(client, student, quiz_setup.item["id"]).json()["data"]
        client.put(f"/api/quizzes/attempt/{first['id']}/complete", headers=student.headers)

        r = _start(client, student, quiz_setup.item["id"])
        assert r.status_code == 201

    def test_item_must_be_quiz(
        self, client: TestClient, teacher, student, make_course, make_week, make_item
    ):
        course = make_course(teacher)
        week = make_week(teacher, course["id"])
        video = make_item(teacher, week["id"], "VIDEO")
        r = _start(client, student, video["id"])
        assert r.status_code == 400

    def test_quiz_needs_bank(
        self, client: TestClient, teacher, student, make_course, make_week, make_item
    ):
        course = make_course(teacher)
        week = make_week(teacher, course["id"])
        quiz = make_item(teacher, week["id"], "QUIZ")
        r = _start(client, student, quiz["id"])
        assert r.status_code == 400

    def test_unknown_item(self, client: TestClient, student):
        r = _start(client, student, str(uuid.uuid4()))
        assert r.status_code == 404

    def test_teachers_cannot_start(self, client: TestClient, teacher, quiz_setup):
        r = _start(client, teacher, quiz_setup.item["id"])
        assert r.status_code == 403


class TestAnswering:
    def test_worked_example(self, client: TestClient, student, quiz_setup):
        attempt = _start(client, student, quiz_setup.item["id"]).json()["data"]

        r = client.put(
            f"/api/quizzes/attempt/{attempt['id']}/answers",
            json=_answers(quiz_setup, "A", "X", "C"),
            headers=student.headers,
        )
        assert r.status_code == 200
        graded = r.json()["data"]
        assert [g["isCorrect"] for g in graded] == [True, False, True]
        assert [g["pointsEarned"] for g in graded] == [1, 0, 1]

        r = client.put(
            f"/api/quizzes/attempt/{attempt['id']}/complete", headers=student.headers
        )
        assert r.status_code == 200
        completed = r.json()["data"]
        assert completed["quizAttemptId"] == attempt["id"]
        assert completed["totalScore"] == 2
        assert completed["maxPossibleScore"] == 3
        assert completed["percentageScore"] == pytest.approx(66.67)
        assert completed["endTime"] is not None
        assert len(completed["responses"]) == 3

        r = client.get(f"/api/quizzes/attempt/{attempt['id']}", headers=student.headers)
        assert r.json()["data"]["status"] == "COMPLETED"

        r = client.get(
            f"/api/quizzes/attempt/{attempt['id']}/results", headers=student.headers
        )
        results = r.json()["data"]
        assert results["percentageScore"] == pytest.approx(66.67)
        assert results["quizTitle"] == "Algebra basics"
        assert len(results["responses"]) == 3

    def test_single_answer(self, client: TestClient, student, quiz_setup):
        attempt = _start(client, student, quiz_setup.item["id"]).json()["data"]
        r = client.put(
            f"/api/quizzes/attempt/{attempt['id']}/answer",
            json={"questionId": quiz_setup.questions[1]["id"], "selectedAnswer": "B"},
            headers=student.headers,
        )
        assert r.status_code == 200
        assert r.json()["data"]["isCorrect"] is True

    def test_answer_is_case_sensitive(self, client: TestClient, student, quiz_setup):
        attempt = _start(client, student, quiz_setup.item["id"]).json()["data"]
        r = client.put(
            f"/api/quizzes/attempt/{attempt['id']}/answer",
            json={"questionId": quiz_setup.questions[0]["id"], "selectedAnswer": "a"},
            headers=student.headers,
        )
        assert r.json()["data"]["isCorrect"] is False

    def test_duplicate_answer_rejected(self, client: TestClient, student, quiz_setup):
        attempt = _start(client, student, quiz_setup.item["id"]).json()["data"]
        url = f"/api/quizzes/attempt/{attempt['id']}/answers"
        client.put(url, json=_answers(quiz_setup, "A"), headers=student.headers)

        r = client.put(url, json=_answers(quiz_setup, "B"), headers=student.headers)
        assert r.status_code == 400

    def test_duplicate_within_batch_keeps_earlier_answers(
        self, client: TestClient, db: Session, student, quiz_setup
    ):
        attempt = _start(client, student, quiz_setup.item["id"]).json()["data"]
        q1, q2, _ = quiz_setup.questions
        r = client.put(
            f"/api/quizzes/attempt/{attempt['id']}/answers",
            json=[
                {"questionId": q1["id"], "selectedAnswer": "A"},
                {"questionId": q2["id"], "selectedAnswer": "B"},
                {"questionId": q1["id"], "selectedAnswer": "C"},
            ],
            headers=student.headers,
        )
        assert r.status_code == 400

        saved = (
            db.query(StudentResponse)
            .filter(StudentResponse.quiz_attempt_id == uuid.UUID(attempt["id"]))
            .count()
        )
        assert saved == 2

    def test_empty_batch_rejected(self, client: TestClient, student, quiz_setup):
        attempt = _start(client, student, quiz_setup.item["id"]).json()["data"]
        r = client.put(
            f"/api/quizzes/attempt/{attempt['id']}/answers",
            json=[],
            headers=student.headers,
        )
        assert r.status_code == 400

    def test_malformed_entry_rejected(self, client: TestClient, student, quiz_setup):
        attempt = _start(client, student, quiz_setup.item["id"]).json()["data"]
        r = client.put(
            f"/api/quizzes/attempt/{attempt['id']}/answers",
            json=[{"questionId": quiz_setup.questions[0]["id"]}],
            headers=student.headers,
        )
        assert r.status_code == 400

    def test_question_from_other_bank(
        self, client: TestClient, teacher, student, quiz_setup
    ):
        other = client.post(
            "/api/quiz-banks", json={"title": "Other"}, headers=teacher.headers
        ).json()["data"]
        foreign = client.post(
            "/api/questions",
            json={
                "quizBankId": other["id"],
                "questionText": "Elsewhere?",
                "options": ["yes", "no"],
                "correctAnswer": "yes",
            },
            headers=teacher.headers,
        ).json()["data"]

        attempt = _start(client, student, quiz_setup.item["id"]).json()["data"]
        r = client.put(
            f"/api/quizzes/attempt/{attempt['id']}/answer",
            json={"questionId": foreign["id"], "selectedAnswer": "yes"},
            headers=student.headers,
        )
        assert r.status_code == 400

    def test_unknown_question(self, client: TestClient, student, quiz_setup):
        attempt = _start(client, student, quiz_setup.item["id"]).json()["data"]
        r = client.put(
            f"/api/quizzes/attempt/{attempt['id']}/answer",
            json={"questionId": str(uuid.uuid4()), "selectedAnswer": "A"},
            headers=student.headers,
        )
        assert r.status_code == 404

    def test_no_answers_after_completion(self, client: TestClient, student, quiz_setup):
        attempt = _start(client, student, quiz_setup.item["id"]).json()["data"]
        client.put(f"/api/quizzes/attempt/{attempt['id']}/complete", headers=student.headers)

        r = client.put(
            f"/api/quizzes/attempt/{attempt['id']}/answers",
            json=_answers(quiz_setup, "A"),
            headers=student.headers,
        )
        assert r.status_code == 400

    def test_other_student_cannot_answer(
        self, client: TestClient, student, register_and_login, quiz_setup
    ):
        attempt = _start(client, student, quiz_setup.item["id"]).json()["data"]
        intruder_headers, _ = register_and_login("student")
        r = client.put(
            f"/api/quizzes/attempt/{attempt['id']}/answers",
            json=_answers(quiz_setup, "A"),
            headers=intruder_headers,
        )
        assert r.status_code == 403


class TestCompletion:
    def test_double_complete_rejected(self, client: TestClient, student, quiz_setup):
        attempt = _start(client, student, quiz_setup.item["id"]).json()["data"]
        url = f"/api/quizzes/attempt/{attempt['id']}/complete"
        assert client.put(url, headers=student.headers).status_code == 200
        assert client.put(url, headers=student.headers).status_code == 400

    def test_complete_without_answers(self, client: TestClient, student, quiz_setup):
        attempt = _start(client, student, quiz_setup.item["id"]).json()["data"]
        client.put(f"/api/quizzes/attempt/{attempt['id']}/complete", headers=student.headers)

        r = client.get(
            f"/api/quizzes/attempt/{attempt['id']}/results", headers=student.headers
        )
        results = r.json()["data"]
        assert results["totalScore"] == 0
        assert results["maxPossibleScore"] == 0
        assert results["percentageScore"] == 0

    def test_unknown_attempt(self, client: TestClient, student):
        r = client.put(
            f"/api/quizzes/attempt/{uuid.uuid4()}/complete", headers=student.headers
        )
        assert r.status_code == 404


class TestReads:
    def test_questions_hide_answers_until_completed(
        self, client: TestClient, student, quiz_setup
    ):
        attempt = _start(client, student, quiz_setup.item["id"]).json()["data"]
        url = f"/api/quizzes/attempt/{attempt['id']}/questions"

        r = client.get(url, headers=student.headers)
        assert r.status_code == 200
        questions = r.json()["data"]["questions"]
        assert len(questions) == 3
        assert all(q["correctAnswer"] is None for q in questions)

        client.put(f"/api/quizzes/attempt/{attempt['id']}/complete", headers=student.headers)
        questions = client.get(url, headers=student.headers).json()["data"]["questions"]
        assert [q["correctAnswer"] for q in questions] == ["A", "B", "C"]

    def test_history_lists_completed_newest_first(
        self, client: TestClient, student, quiz_setup
    ):
        item_id = quiz_setup.item["id"]
        first = _start(client, student, item_id).json()["data"]
        client.put(f"/api/quizzes/attempt/{first['id']}/complete", headers=student.headers)
        second = _start(client, student, item_id).json()["data"]
        client.put(
            f"/api/quizzes/attempt/{second['id']}/answers",
            json=_answers(quiz_setup, "A", "X", "C"),
            headers=student.headers,
        )
        client.put(f"/api/quizzes/attempt/{second['id']}/complete", headers=student.headers)
        open_attempt = _start(client, student, item_id).json()["data"]

        r = client.get(
            f"/api/quizzes/student/{student.id}/history",
            params={"learningItemId": item_id},
            headers=student.headers,
        )
        history = r.json()["data"]
        assert [h["quizAttemptId"] for h in history] == [second["id"], first["id"]]
        latest, earliest = history
        assert latest["percentageScore"] == pytest.approx(66.67)
        assert latest["quizTitle"] == "Algebra basics"
        assert len(latest["responses"]) == 3
        assert sum(resp["pointsEarned"] for resp in latest["responses"]) == 2
        assert earliest["percentageScore"] == 0
        assert earliest["responses"] == []

        r = client.get(f"/api/quizzes/student/{student.id}/attempts", headers=student.headers)
        assert open_attempt["id"] in [a["id"] for a in r.json()["data"]]
        assert len(r.json()["data"]) == 3

    def test_students_only_see_their_own(
        self, client: TestClient, teacher, student, register_and_login, quiz_setup
    ):
        attempt = _start(client, student, quiz_setup.item["id"]).json()["data"]
        other_headers, _ = register_and_login("student")

        r = client.get(f"/api/quizzes/attempt/{attempt['id']}", headers=other_headers)
        assert r.status_code == 403
        r = client.get(f"/api/quizzes/student/{student.id}/attempts", headers=other_headers)
        assert r.status_code == 403

        r = client.get(f"/api/quizzes/attempt/{attempt['id']}", headers=teacher.headers)
        assert r.status_code == 200

    def test_attempts_of_unknown_student(self, client: TestClient, teacher):
        r = client.get(
            f"/api/quizzes/student/{uuid.uuid4()}/attempts", headers=teacher.headers
        )
        assert r.status_code == 404
        assert r.json()["status"] == "ERROR"
        assert "Student not found" in r.json()["message"]


# ── Service level ─────────────────────────────────────────────────────────────


@pytest.fixture
def quiz_world(db: Session):
    """A student and a QUIZ item whose bank holds questions answered A, B, C."""
    teacher = User(
        name="Teacher", username="t", email="t@ex.com", hashed_password="x",
        role=UserRoleEnum.TEACHER,
    )
    student = User(
        name="Student", username="s", email="s@ex.com", hashed_password="x",
        role=UserRoleEnum.STUDENT,
    )
    db.add_all([teacher, student])
    db.flush()

    course = Course(name="Course", teacher_id=teacher.id, is_draft=False)
    db.add(course)
    db.flush()
    week = Week(title="Week 1", week_number=1, course_id=course.id)
    bank = QuizBank(title="Bank", created_by=teacher.id)
    db.add_all([week, bank])
    db.flush()

    questions = [
        Question(
            quiz_bank_id=bank.id,
            question_text=f"Q{n}",
            options=["A", "B", "C"],
            correct_answer=answer,
        )
        for n, answer in enumerate("ABC", start=1)
    ]
    item = LearningItem(
        title="Quiz",
        type=LearningItemTypeEnum.QUIZ,
        week_id=week.id,
        quiz_bank_id=bank.id,
    )
    db.add_all(questions + [item])
    db.commit()
    return student, item, questions


class TestQuizAttemptService:
    def test_scoring(self, db: Session, quiz_world):
        student, item, questions = quiz_world
        attempt = quiz_attempts.start_quiz_attempt(db, student.id, item.id)

        quiz_attempts.submit_all_answers(
            db,
            attempt.id,
            [
                AnswerSubmission(question_id=q.id, selected_answer=answer)
                for q, answer in zip(questions, ["A", "X", "C"])
            ],
        )
        completed = quiz_attempts.complete_quiz_attempt(db, attempt.id)
        assert completed.total_score == 2
        assert completed.max_possible_score == 3

        results = quiz_attempts.get_quiz_results(db, attempt.id)
        assert results.percentage_score == 66.67

    def test_unknown_student(self, db: Session, quiz_world):
        _, item, _ = quiz_world
        with pytest.raises(NotFoundError):
            quiz_attempts.start_quiz_attempt(db, uuid.uuid4(), item.id)

    def test_open_attempt_index_backs_the_check(self, db: Session, quiz_world):
        student, item, _ = quiz_world
        quiz_attempts.start_quiz_attempt(db, student.id, item.id)

        # bypass the service check, as a concurrent request would
        db.add(
            QuizAttempt(
                student_id=student.id,
                quiz_bank_id=item.quiz_bank_id,
                learning_item_id=item.id,
                status=QuizAttemptStatusEnum.IN_PROGRESS,
            )
        )
        with pytest.raises(IntegrityError):
            db.commit()
        db.rollback()

    def test_duplicate_answer_index(self, db: Session, quiz_world):
        student, item, questions = quiz_world
        attempt = quiz_attempts.start_quiz_attempt(db, student.id, item.id)
        quiz_attempts.submit_answer(db, attempt.id, questions[0].id, "A")

        with pytest.raises(BadRequestError):
            quiz_attempts.submit_answer(db, attempt.id, questions[0].id, "B")

    def test_foreign_question_rejected_before_duplicate_check(
        self, db: Session, quiz_world
    ):
        student, item, _ = quiz_world
        other_bank = QuizBank(title="Other", created_by=student.id)
        db.add(other_bank)
        db.flush()
        foreign = Question(
            quiz_bank_id=other_bank.id,
            question_text="Elsewhere?",
            options=["yes", "no"],
            correct_answer="yes",
        )
        db.add(foreign)
        db.commit()
        attempt = quiz_attempts.start_quiz_attempt(db, student.id, item.id)

        # a stray row for the foreign question, written outside the service
        db.add(
            StudentResponse(
                quiz_attempt_id=attempt.id,
                question_id=foreign.id,
                selected_answer="yes",
            )
        )
        db.commit()

        with pytest.raises(BadRequestError, match="does not belong to this quiz"):
            quiz_attempts.submit_answer(db, attempt.id, foreign.id, "yes")

    def test_unknown_question_rejected_before_duplicate_check(
        self, db: Session, quiz_world
    ):
        student, item, _ = quiz_world
        attempt = quiz_attempts.start_quiz_attempt(db, student.id, item.id)
        missing = uuid.uuid4()
        # sqlite leaves foreign keys unchecked here
        db.add(
            StudentResponse(
                quiz_attempt_id=attempt.id, question_id=missing, selected_answer="A"
            )
        )
        db.commit()

        with pytest.raises(NotFoundError, match="Question not found"):
            quiz_attempts.submit_answer(db, attempt.id, missing, "A")

    def test_attempts_of_unknown_student(self, db: Session, quiz_world):
        with pytest.raises(NotFoundError, match="Student not found"):
            quiz_attempts.get_quiz_attempts_by_student_id(db, uuid.uuid4())

    def test_history_carries_results(self, db: Session, quiz_world):
        student, item, questions = quiz_world
        attempt = quiz_attempts.start_quiz_attempt(db, student.id, item.id)
        quiz_attempts.submit_answer(db, attempt.id, questions[0].id, "A")
        quiz_attempts.submit_answer(db, attempt.id, questions[1].id, "X")
        quiz_attempts.complete_quiz_attempt(db, attempt.id)

        (result,) = quiz_attempts.get_student_quiz_history(db, student.id, item.id)
        assert result.quiz_attempt_id == attempt.id
        assert result.percentage_score == 50.0
        assert len(result.responses) == 2

    def test_percentage_score(self):
        assert quiz_attempts.percentage_score(2, 3) == 66.67
        assert quiz_attempts.percentage_score(0, 0) == 0.0
        assert quiz_attempts.percentage_score(None, None) == 0.0
        assert quiz_attempts.percentage_score(3, 3) == 100.0
