"""Integration tests for registration, email verification and login."""

from datetime import datetime, timedelta, timezone

from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from lms.config import settings
from lms.db.models import User


def _body(username: str, **overrides) -> dict:
    body = {
        "name": "Ada",
        "email": f"{username}@ex.com",
        "username": username,
        "password": "secret123",
        "fullName": "Ada Lovelace",
        "gender": "FEMALE",
        "birthYear": 1995,
        "phoneNumber": "0781234567",
    }
    body.update(overrides)
    return body


class TestRegistration:
    def test_register_student(self, client: TestClient, db: Session):
        r = client.post("/register/student", json=_body("ada"))
        assert r.status_code == 201
        payload = r.json()
        assert payload["status"] == "SUCCESS"
        assert payload["data"]["username"] == "ada"
        assert payload["data"]["role"] == "STUDENT"
        assert payload["data"]["emailVerified"] is False
        assert "password" not in payload["data"]
        assert "hashedPassword" not in payload["data"]

        user = db.query(User).filter(User.username == "ada").one()
        assert user.hashed_password != "secret123"
        assert user.email_verification_token

    def test_register_teacher(self, client: TestClient):
        r = client.post("/register/teacher", json=_body("grace"))
        assert r.status_code == 201
        assert r.json()["data"]["role"] == "TEACHER"

    def test_duplicate_username_rejected(self, client: TestClient):
        client.post("/register/student", json=_body("ada"))
        r = client.post(
            "/register/student", json=_body("ada", email="other@ex.com")
        )
        assert r.status_code == 400
        assert r.json()["status"] == "ERROR"
        assert "username" in r.json()["message"].lower()

    def test_duplicate_email_rejected(self, client: TestClient):
        client.post("/register/student", json=_body("ada"))
        r = client.post("/register/teacher", json=_body("ada2", email="ada@ex.com"))
        assert r.status_code == 400
        assert "email" in r.json()["message"].lower()

    def test_invalid_body_is_400(self, client: TestClient):
        r = client.post("/register/student", json=_body("ada", email="not-an-email"))
        assert r.status_code == 400
        assert r.json()["status"] == "ERROR"

    def test_verification_email_dispatched(
        self, client: TestClient, db: Session, mock_celery_tasks, monkeypatch
    ):
        monkeypatch.setattr(settings, "CELERY_TASK_ALWAYS_EAGER", False)
        client.post("/register/student", json=_body("ada"))

        user = db.query(User).filter(User.username == "ada").one()
        mock_celery_tasks.delay.assert_called_once_with(
            "ada@ex.com", user.email_verification_token
        )

    def test_email_failure_does_not_fail_registration(
        self, client: TestClient, mock_celery_tasks, monkeypatch
    ):
        monkeypatch.setattr(settings, "CELERY_TASK_ALWAYS_EAGER", False)
        mock_celery_tasks.delay.side_effect = ConnectionError("broker down")

        r = client.post("/register/student", json=_body("ada"))
        assert r.status_code == 201


class TestEmailVerification:
    def _token(self, db: Session, username: str) -> str:
        return db.query(User).filter(User.username == username).one().email_verification_token

    def test_verify_email(self, client: TestClient, db: Session):
        client.post("/register/student", json=_body("ada"))
        token = self._token(db, "ada")

        r = client.get("/verify-email", params={"token": token})
        assert r.status_code == 200
        db.expire_all()
        user = db.query(User).filter(User.username == "ada").one()
        assert user.email_verified is True
        assert user.email_verification_token is None

    def test_unknown_token(self, client: TestClient):
        r = client.get("/verify-email", params={"token": "nope"})
        assert r.status_code == 400

    def test_token_cannot_be_reused(self, client: TestClient, db: Session):
        client.post("/register/student", json=_body("ada"))
        token = self._token(db, "ada")
        client.get("/verify-email", params={"token": token})

        r = client.get("/verify-email", params={"token": token})
        assert r.status_code == 400

    def test_expired_token(self, client: TestClient, db: Session):
        client.post("/register/student", json=_body("ada"))
        user = db.query(User).filter(User.username == "ada").one()
        user.email_verification_token_expiry = datetime.now(timezone.utc) - timedelta(hours=1)
        db.commit()

        r = client.get("/verify-email", params={"token": user.email_verification_token})
        assert r.status_code == 400
        assert "expired" in r.json()["message"].lower()


class TestLogin:
    def test_login_returns_token(self, client: TestClient):
        client.post("/register/student", json=_body("ada"))
        r = client.post("/login", json={"username": "ada", "password": "secret123"})
        assert r.status_code == 200
        data = r.json()["data"]
        assert data["accessToken"]
        assert data["tokenType"] == "bearer"
        assert data["user"]["username"] == "ada"

    def test_wrong_password(self, client: TestClient):
        client.post("/register/student", json=_body("ada"))
        r = client.post("/login", json={"username": "ada", "password": "wrong"})
        assert r.status_code == 401
        assert r.json()["status"] == "ERROR"

    def test_unknown_user(self, client: TestClient):
        r = client.post("/login", json={"username": "ghost", "password": "secret123"})
        assert r.status_code == 401

    def test_me(self, client: TestClient, student):
        r = client.get("/users/me", headers=student.headers)
        assert r.status_code == 200
        assert r.json()["data"]["id"] == student.id

    def test_me_requires_token(self, client: TestClient):
        r = client.get("/users/me")
        assert r.status_code == 401

    def test_me_rejects_garbage_token(self, client: TestClient):
        r = client.get("/users/me", headers={"Authorization": "Bearer not-a-jwt"})
        assert r.status_code == 401
