import os
from dataclasses import dataclass, field
from datetime import datetime, timezone

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret-key")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.rate_limiter import rate_limiter
from app.database import Base, get_db
from app.dependencies import get_current_admin, get_current_user
from app.main import app
from app.models import User, Job, Feedback  # noqa: F401
from app.services.notifier import Notifier, get_notifier


@dataclass
class StubUser:
    id: str = "user-1"
    name: str = "Test User"
    email: str = "user@example.com"
    role: str = "applicant"
    is_active: bool = True
    password_hash: str = "hashed-password"
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime | None = None

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"


class RecordingNotifier(Notifier):
    def __init__(self):
        self.events: list[tuple[str, dict, str | None]] = []

    def emit(self, event, payload, room=None):
        self.events.append((event, payload, room))

    def names(self) -> list[str]:
        return [e[0] for e in self.events]


@pytest.fixture(autouse=True)
def _reset_rate_limits():
    rate_limiter.reset()
    yield
    rate_limiter.reset()


@pytest.fixture
def stub_user() -> StubUser:
    return StubUser()


@pytest.fixture
def admin_user() -> StubUser:
    return StubUser(id="admin-1", name="Admin", email="admin@example.com", role="admin")


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def client(stub_user: StubUser, notifier: RecordingNotifier):
    def _db_override():
        yield object()

    app.dependency_overrides[get_db] = _db_override
    app.dependency_overrides[get_current_user] = lambda: stub_user
    app.dependency_overrides[get_notifier] = lambda: notifier
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def admin_client(admin_user: StubUser, notifier: RecordingNotifier):
    def _db_override():
        yield object()

    app.dependency_overrides[get_db] = _db_override
    app.dependency_overrides[get_current_user] = lambda: admin_user
    app.dependency_overrides[get_current_admin] = lambda: admin_user
    app.dependency_overrides[get_notifier] = lambda: notifier
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def session_factory():
    """Fresh in-memory SQLite database per test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db_session(session_factory):
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def live_client(session_factory, notifier: RecordingNotifier):
    """Real auth and persistence against SQLite; notifications recorded."""

    def _db_override():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = _db_override
    app.dependency_overrides[get_notifier] = lambda: notifier
    yield TestClient(app)
    app.dependency_overrides.clear()


def auth_header(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def register(live_client):
    """Register a user through the API; returns (user_json, auth headers)."""

    def _register(name="Jane Doe", email="jane@example.com", password="secret123", role="applicant"):
        resp = live_client.post(
            "/api/auth/register",
            json={"name": name, "email": email, "password": password, "role": role},
        )
        assert resp.status_code == 201, resp.text
        data = resp.json()["data"]
        return data["user"], auth_header(data["token"])

    return _register
