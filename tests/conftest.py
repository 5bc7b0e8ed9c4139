"""Shared pytest fixtures for backend tests."""

import uuid
from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from lms.db.session import Base, get_db
from lms.main import app
from lms.services.storage import LocalFileStorage, get_file_storage


# Use an in-memory SQLite database for testing with static pool
SQLALCHEMY_TEST_URL = "sqlite:///:memory:"
engine = create_engine(
    SQLALCHEMY_TEST_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,  # Use StaticPool to keep connection alive
    echo=False,
)
TestSession = sessionmaker(bind=engine, autocommit=False, autoflush=False)

PASSWORD = "secret123"


@pytest.fixture(autouse=True)
def mock_celery_tasks():
    """Mock Celery tasks for all tests to prevent Redis / SMTP connections."""
    mock_task = MagicMock(return_value=MagicMock(id="fake-task-id"))
    mock_task.delay = MagicMock(return_value=MagicMock(id="fake-task-id"))

    # Patch at the import point in the users service
    with patch("lms.services.users.send_verification_email_task", mock_task):
        yield mock_task


@pytest.fixture(scope="function")
def db():
    """Fresh schema and DB session for each test (services commit)."""
    Base.metadata.create_all(bind=engine)
    session = TestSession()
    try:
        yield session
    finally:
        session.rollback()
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def storage(tmp_path):
    return LocalFileStorage(tmp_path / "uploads")


@pytest.fixture(scope="function")
def client(db: Session, storage: LocalFileStorage):
    """FastAPI test client with overridden DB and file-storage dependencies."""

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_file_storage] = lambda: storage

    # Remove TrustedHostMiddleware for tests to allow 'testserver' host
    app.user_middleware = [m for m in app.user_middleware if "TrustedHost" not in str(m)]

    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


# ── Users ─────────────────────────────────────────────────────────────────────


def registration_body(username: str, **overrides) -> dict:
    body = {
        "name": username.title(),
        "email": f"{username}@ex.com",
        "username": username,
        "password": PASSWORD,
        "fullName": f"{username.title()} Tester",
        "gender": "OTHER",
        "birthYear": 2000,
        "phoneNumber": "0780000000",
    }
    body.update(overrides)
    return body


@pytest.fixture
def register_and_login(client: TestClient):
    """Factory: register a user with *role* and return (auth headers, user json)."""

    def _register_and_login(role: str = "student", username: str | None = None):
        username = username or f"{role}_{uuid.uuid4().hex[:8]}"
        r = client.post(f"/register/{role}", json=registration_body(username))
        assert r.status_code == 201, r.text

        r = client.post("/login", json={"username": username, "password": PASSWORD})
        assert r.status_code == 200, r.text
        data = r.json()["data"]
        return {"Authorization": f"Bearer {data['accessToken']}"}, data["user"]

    return _register_and_login


@pytest.fixture
def teacher(register_and_login):
    headers, user = register_and_login("teacher")
    return SimpleNamespace(headers=headers, user=user, id=user["id"])


@pytest.fixture
def student(register_and_login):
    headers, user = register_and_login("student")
    return SimpleNamespace(headers=headers, user=user, id=user["id"])


# ── Course content ────────────────────────────────────────────────────────────


@pytest.fixture
def make_course(client: TestClient):
    """Factory: create a course as *owner* and return its json."""

    def _make_course(owner, name: str = "Algebra", is_draft: bool = False, **fields):
        body = {"name": name, "category": "Maths", "isFree": True, "isDraft": is_draft}
        body.update(fields)
        r = client.post("/courses", json=body, headers=owner.headers)
        assert r.status_code == 201, r.text
        return r.json()["data"]

    return _make_course


@pytest.fixture
def make_week(client: TestClient):
    def _make_week(owner, course_id: str, week_number: int = 1, title: str = "Week"):
        r = client.post(
            "/weeks",
            json={"title": f"{title} {week_number}", "weekNumber": week_number, "courseId": course_id},
            headers=owner.headers,
        )
        assert r.status_code == 201, r.text
        return r.json()["data"]

    return _make_week


@pytest.fixture
def make_item(client: TestClient):
    def _make_item(owner, week_id: str, item_type: str = "VIDEO", **fields):
        body = {"title": f"{item_type.title()} item", "type": item_type, "weekId": week_id}
        body.update(fields)
        r = client.post("/learning-items", json=body, headers=owner.headers)
        assert r.status_code == 201, r.text
        return r.json()["data"]

    return _make_item


@pytest.fixture
def quiz_setup(client: TestClient, teacher, make_course, make_week, make_item):
    """Published course → week 1 → QUIZ item backed by a bank of three questions.

    Correct answers are "A", "B" and "C" in question order.
    """
    course = make_course(teacher)
    week = make_week(teacher, course["id"])
    item = make_item(teacher, week["id"], "QUIZ", durationMinutes=15)

    r = client.post(
        "/api/quiz-banks",
        json={"title": "Algebra basics", "description": "Week 1 quiz"},
        headers=teacher.headers,
    )
    assert r.status_code == 201, r.text
    bank = r.json()["data"]

    questions = []
    for number, answer in enumerate(["A", "B", "C"], start=1):
        r = client.post(
            "/api/questions",
            json={
                "quizBankId": bank["id"],
                "questionText": f"Question {number}?",
                "questionType": "MULTIPLE_CHOICE",
                "options": ["A", "B", "C", "D"],
                "correctAnswer": answer,
            },
            headers=teacher.headers,
        )
        assert r.status_code == 201, r.text
        questions.append(r.json()["data"])

    r = client.put(
        f"/api/quiz-banks/{bank['id']}/learning-items",
        json={"learningItemId": item["id"]},
        headers=teacher.headers,
    )
    assert r.status_code == 200, r.text

    return SimpleNamespace(
        course=course, week=week, item=item, bank=bank, questions=questions
    )
