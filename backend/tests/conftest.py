import os

# Importing tasktrack.main builds a module-level app from the environment.
os.environ.setdefault("TASKTRACK_DATABASE_URL", "sqlite://")
os.environ.setdefault("TASKTRACK_JWT_SECRET", "test-secret-key-for-the-test-suite")

from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from tasktrack.config import Settings
from tasktrack.databases.database import Base, build_engine, build_session_factory
from tasktrack.main import create_app
from tasktrack.models.user import User
from tasktrack.utils.sessions import SessionStore
from tasktrack.utils.tokens import TokenIssuer

SECRET = "unit-test-secret-0123456789"


class FrozenClock:
    def __init__(self, start: datetime) -> None:
        self.current = start

    def __call__(self) -> datetime:
        return self.current

    def advance(self, **kwargs) -> None:
        self.current += timedelta(**kwargs)


@pytest.fixture
def clock():
    return FrozenClock(datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc))


@pytest.fixture
def sessions():
    return SessionStore()


@pytest.fixture
def issuer(sessions, clock):
    return TokenIssuer(SECRET, sessions, clock=clock)


@pytest.fixture
def db():
    engine = build_engine("sqlite://")
    Base.metadata.create_all(bind=engine)
    session = build_session_factory(engine)()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture
def make_user(db):
    counter = {"n": 0}

    def _make(email=None):
        counter["n"] += 1
        user = User(
            username=f"user{counter['n']}",
            email=email or f"user{counter['n']}@example.com",
            password="not-a-real-hash",
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make


@pytest.fixture
def app(clock):
    settings = Settings(database_url="sqlite://", jwt_secret=SECRET, max_page_size=50)
    application = create_app(settings)
    # same store and lifetimes, but on the frozen test clock
    application.state.token_issuer = TokenIssuer(SECRET, SessionStore(), clock=clock)
    return application


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def register(client):
    """Register a user and return (access_token, user_json, refresh_token)."""

    def _register(email="alice@example.com", password="secret1", username="alice"):
        r = client.post(
            "/auth/register",
            json={"username": username, "email": email, "password": password},
        )
        assert r.status_code == 201, r.text
        body = r.json()
        return body["accessToken"], body["user"], r.cookies.get("refreshToken")

    return _register
