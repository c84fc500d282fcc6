"""
Shared fixtures: in-memory SQLite database, authenticated TestClient,
mocked outbound clients and small row factories.
"""

import os

# Keep the module-level engine off PostgreSQL during tests
os.environ.setdefault("DATABASE_URL", "sqlite://")

from datetime import datetime, timedelta
from unittest.mock import MagicMock

import jwt
import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from skillsync.api.deps import get_email_client, get_meeting_client, get_push_client
from skillsync.clients.fcm import FCMClient
from skillsync.clients.resend import ResendClient
from skillsync.clients.whereby import WherebyClient
from skillsync.core import config
from skillsync.core.circuit_breaker import limiter
from skillsync.core.security import CurrentUser
from skillsync.infra.postgres import build_engine, get_db, init_db
from skillsync.main import app
from skillsync.models import LearningSession, Profile, Review

TEST_JWT_SECRET = "test-jwt-secret"
TEST_SERVICE_KEY = "test-service-key"

ALICE = "00000000-0000-0000-0000-00000000000a"
BOB = "00000000-0000-0000-0000-00000000000b"
CAROL = "00000000-0000-0000-0000-00000000000c"


@pytest.fixture(autouse=True)
def test_settings(monkeypatch):
    monkeypatch.setattr(config, "JWT_SECRET", TEST_JWT_SECRET)
    monkeypatch.setattr(config, "SERVICE_ROLE_KEY", TEST_SERVICE_KEY)
    monkeypatch.setattr(config, "APP_URL", "https://skillsync.test")
    limiter.enabled = False
    yield
    limiter.enabled = True


@pytest.fixture
def engine():
    engine = build_engine("sqlite://", poolclass=StaticPool)
    init_db(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def meeting_client():
    client = MagicMock(spec=WherebyClient)
    client.create_meeting.return_value = {
        "roomUrl": "https://whereby.com/room-123",
        "hostRoomUrl": "https://whereby.com/room-123?host",
    }
    return client


@pytest.fixture
def email_client():
    client = MagicMock(spec=ResendClient)
    client.send_email.return_value = {"id": "email-1"}
    return client


@pytest.fixture
def push_client():
    client = MagicMock(spec=FCMClient)
    client.configured = True
    client.get_access_token.return_value = "access-token"
    client.send.return_value = True
    return client


@pytest.fixture
def client(session_factory, meeting_client, email_client, push_client):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_meeting_client] = lambda: meeting_client
    app.dependency_overrides[get_email_client] = lambda: email_client
    app.dependency_overrides[get_push_client] = lambda: push_client
    yield TestClient(app)
    app.dependency_overrides.clear()


def make_token(user_id: str, email: str | None = None, full_name: str | None = None,
               expires_in: int = 3600) -> str:
    claims = {
        "sub": user_id,
        "exp": int((datetime.utcnow() + timedelta(seconds=expires_in)).timestamp()),
        "user_metadata": {"full_name": full_name} if full_name else {},
    }
    if email:
        claims["email"] = email
    return jwt.encode(claims, TEST_JWT_SECRET, algorithm="HS256")


def auth(user_id: str, **kwargs) -> dict:
    return {"Authorization": f"Bearer {make_token(user_id, **kwargs)}"}


def as_user(user_id: str) -> CurrentUser:
    return CurrentUser(id=user_id)


def add_profile(db, user_id: str, full_name: str = "", completed: bool = True, **fields) -> Profile:
    profile = Profile(
        id=user_id,
        email=fields.pop("email", f"{user_id[-1]}@example.com"),
        full_name=full_name,
        profile_completed=completed,
        skills_to_teach=fields.pop("skills_to_teach", []),
        skills_to_learn=fields.pop("skills_to_learn", []),
        **fields,
    )
    db.add(profile)
    db.commit()
    return profile


def add_session(db, teacher_id: str, learner_id: str, skill: str = "Python",
                status: str = "pending", scheduled_at: datetime | None = None,
                duration_minutes: int = 60, **fields) -> LearningSession:
    session = LearningSession(
        teacher_id=teacher_id,
        learner_id=learner_id,
        skill=skill,
        status=status,
        scheduled_at=scheduled_at or datetime(2025, 3, 3, 14, 30),
        duration_minutes=duration_minutes,
        **fields,
    )
    db.add(session)
    db.commit()
    return session


def add_review(db, session: LearningSession, reviewer_id: str, reviewee_id: str,
               rating: int, comment: str | None = None, **fields) -> Review:
    review = Review(
        session_id=session.id,
        reviewer_id=reviewer_id,
        reviewee_id=reviewee_id,
        rating=rating,
        comment=comment,
        **fields,
    )
    db.add(review)
    db.commit()
    return review
