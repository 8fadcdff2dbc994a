import os

import pytest
from fastapi.testclient import TestClient

# Point the app at an in-memory database before anything imports settings
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("REDIS_HOST", "localhost")
os.environ.setdefault("STREAK_POLICY", "rolling_window")

from app.database import Base, get_db, get_engine, get_session_local  # noqa: E402
from app.main import app  # noqa: E402
from app.middleware.rate_limit import limiter  # noqa: E402
from app.models import User  # noqa: E402


@pytest.fixture()
def db_session():
    """A fresh schema and session per test."""
    engine = get_engine()
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)

    session = get_session_local()()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def client(db_session):
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    limiter.enabled = False
    try:
        yield TestClient(app)
    finally:
        limiter.enabled = True
        app.dependency_overrides.clear()


def _make_user(db, user_id, username, email):
    user = User(id=user_id, username=username, email=email, full_name=username.title())
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture()
def alice(db_session):
    return _make_user(db_session, "uid-alice", "alice", "alice@learninglog.app")


@pytest.fixture()
def bob(db_session):
    return _make_user(db_session, "uid-bob", "bob", "bob@learninglog.app")


@pytest.fixture()
def carol(db_session):
    return _make_user(db_session, "uid-carol", "carol", "carol@learninglog.app")


def auth_headers(user):
    """Authenticate through the X-User-ID fallback."""
    return {"X-User-ID": user.id}


def log_payload(**overrides):
    payload = {
        "content_type": "book",
        "title": "Deep Work",
        "creator": "Cal Newport",
        "consumed_date": "2026-10-01",
        "key_points": "Focus is a skill",
        "practical_application": "Block mornings for deep work",
        "summary": "Guard attention",
        "is_shared": True,
    }
    payload.update(overrides)
    return payload
