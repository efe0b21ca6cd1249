"""
Pytest configuration and fixtures.

Every test gets a fresh in-memory SQLite schema; the FastAPI app is pointed
at it through ``dependency_overrides``.
"""
import os
from datetime import datetime

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ["JWT_SECRET"] = "test-secret"
os.environ["GEMINI_API_KEY"] = ""
os.environ.setdefault("LOG_DIR", "/tmp/stravalite-test-logs")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.database import Base, get_db
from app.main import app
from app.models import Activity, Profile
from app.services.auth_service import AuthService

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

USER_ID = "user-123"
OTHER_USER_ID = "user-456"


@pytest.fixture
def db_session():
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db_session):
    def _override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = _override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def _make_profile(db_session, user_id, **fields):
    profile = Profile(
        id=user_id,
        email=f"{user_id}@example.com",
        full_name=fields.pop("full_name", "Test Runner"),
        total_distance=0,
        total_time=0,
        total_activities=0,
        avg_speed=0,
        longest_run=0,
        **fields,
    )
    db_session.add(profile)
    db_session.commit()
    db_session.refresh(profile)
    return profile


@pytest.fixture
def profile(db_session):
    return _make_profile(db_session, USER_ID)


@pytest.fixture
def other_profile(db_session):
    return _make_profile(db_session, OTHER_USER_ID, full_name="Someone Else")


def token_for(user_id, email=None):
    data = {"sub": user_id}
    if email:
        data["email"] = email
    return AuthService().create_access_token(data)


@pytest.fixture
def auth_headers():
    return {"Authorization": f"Bearer {token_for(USER_ID, f'{USER_ID}@example.com')}"}


@pytest.fixture
def other_auth_headers():
    return {"Authorization": f"Bearer {token_for(OTHER_USER_ID)}"}


@pytest.fixture
def add_activity(db_session):
    """Insert an activity row directly, bypassing the stats reconciler."""
    def _add(
        user_id=USER_ID,
        type="run",
        distance_km=5.0,
        duration_min=30.0,
        title="Morning Run",
        created_at=None,
        deleted=False,
    ):
        activity = Activity(
            user_id=user_id,
            type=type,
            distance_km=distance_km,
            duration_min=duration_min,
            title=title,
            created_at=created_at or datetime.utcnow(),
            deleted=deleted,
        )
        db_session.add(activity)
        db_session.commit()
        db_session.refresh(activity)
        return activity

    return _add
