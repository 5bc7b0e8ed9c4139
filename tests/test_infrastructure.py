"""Tests for the session helpers and Celery wiring."""

import pytest
from sqlalchemy.orm import sessionmaker

from lms.celery_app import celery_app
from lms.config import settings
from lms.db.models import User, UserRoleEnum
from lms.db.session import engine_options, session_scope
from lms.tasks import send_verification_email_task


class TestEngineOptions:
    def test_sqlite_allows_threadpool_access(self):
        assert engine_options("sqlite://") == {
            "connect_args": {"check_same_thread": False}
        }

    def test_postgres_pings_pooled_connections(self):
        opts = engine_options("postgresql+psycopg://lms:pw@localhost/lms")
        assert opts == {"pool_pre_ping": True}


class TestSessionScope:
    def _user(self, username: str) -> User:
        return User(
            name="Scoped",
            username=username,
            email=f"{username}@ex.com",
            hashed_password="x",
            role=UserRoleEnum.STUDENT,
        )

    def test_commits_on_success(self, db):
        factory = sessionmaker(bind=db.get_bind())
        with session_scope(factory) as session:
            session.add(self._user("scoped"))

        assert db.query(User).filter(User.username == "scoped").count() == 1

    def test_rolls_back_on_error(self, db):
        factory = sessionmaker(bind=db.get_bind())
        with pytest.raises(RuntimeError):
            with session_scope(factory) as session:
                session.add(self._user("doomed"))
                session.flush()
                raise RuntimeError("boom")

        assert db.query(User).filter(User.username == "doomed").count() == 0


class TestCeleryRouting:
    def test_verification_email_goes_to_email_queue(self):
        routes = celery_app.conf.task_routes
        assert routes[send_verification_email_task.name] == {
            "queue": settings.CELERY_EMAIL_QUEUE
        }

    def test_default_queue(self):
        assert celery_app.conf.task_default_queue == settings.CELERY_DEFAULT_QUEUE
