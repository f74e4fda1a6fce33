# backend/tests/conftest.py
"""
Pytest configuration.

Every test runs against a fresh in-memory SQLite database; route tests
swap the app's ``get_db`` dependency for the test session.
"""

import os
import sys

# Settings are read at import time, so the environment must be set first
os.environ["is_testing"] = "true"
os.environ["test_database_url"] = "sqlite://"
os.environ["auto_create_tables"] = "false"
os.environ["environment"] = "test"

# Allow running pytest from inside backend/ without the installed package
backend_dir = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if backend_dir not in sys.path:
    sys.path.insert(0, backend_dir)

from datetime import datetime, timedelta, timezone
from decimal import Decimal

from fastapi.testclient import TestClient
import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app import models  # noqa: F401
from app.api.dependencies.database import get_db
from app.auth import create_access_token, get_password_hash
from app.core.constants import DAYS_OF_WEEK
from app.core.enums import RoleName
from app.database import Base
from app.main import app
from app.models.trainer import TrainerProfile, TrainerService
from app.models.user import User

TEST_PASSWORD = "TestPassword123!"

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(
    autocommit=False, autoflush=False, bind=engine, expire_on_commit=False
)


@pytest.fixture(scope="function")
def db():
    """Create a new database session for each test."""
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db: Session):
    """Create a test client with the test database."""

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db

    test_client = TestClient(app)

    yield test_client

    app.dependency_overrides.clear()
    test_client.close()


def next_weekday(weekday: int, hour: int = 10, weeks_ahead: int = 1) -> datetime:
    """A UTC datetime on ``weekday`` (0=Monday) at least a few days in the future."""
    today = datetime.now(timezone.utc).replace(minute=0, second=0, microsecond=0)
    days = (weekday - today.weekday()) % 7 + 7 * weeks_ahead
    return (today + timedelta(days=days)).replace(hour=hour)


def full_week_availability(**overrides):
    availability = {day: {"start": "06:00", "end": "20:00", "available": True} for day in DAYS_OF_WEEK}
    availability.update(overrides)
    return availability


def _create_user(db: Session, name: str, email: str, role: str) -> User:
    user = User(
        name=name,
        email=email,
        hashed_password=get_password_hash(TEST_PASSWORD),
        role=role,
        is_active=True,
    )
    db.add(user)
    db.commit()
    return user


def auth_headers_for(user: User) -> dict:
    token = create_access_token(data={"sub": user.email})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def test_password() -> str:
    """Standard test password for all test users."""
    return TEST_PASSWORD


@pytest.fixture
def test_client_user(db: Session) -> User:
    return _create_user(db, "Casey Client", "casey.client@example.com", RoleName.USER.value)


@pytest.fixture
def test_other_user(db: Session) -> User:
    return _create_user(db, "Robin Other", "robin.other@example.com", RoleName.USER.value)


@pytest.fixture
def test_admin(db: Session) -> User:
    return _create_user(db, "Alex Admin", "alex.admin@example.com", RoleName.ADMIN.value)


@pytest.fixture
def test_trainer(db: Session) -> User:
    return _create_user(db, "Taylor Trainer", "taylor.trainer@example.com", RoleName.TRAINER.value)


@pytest.fixture
def test_trainer_profile(db: Session, test_trainer: User) -> TrainerProfile:
    """Trainer available every day with two services (first one is the pricing fallback)."""
    profile = TrainerProfile(
        user_id=test_trainer.id,
        specialization="Strength Training",
        experience_years=6,
        availability=full_week_availability(),
        city="Austin",
        state="TX",
        latitude=30.2672,
        longitude=-97.7431,
        social_media={},
        tags=["strength"],
    )
    profile.services = [
        TrainerService(name="Personal Training", duration=60, price=Decimal("60.00"), position=0),
        TrainerService(name="Yoga Flow", duration=90, price=Decimal("90.00"), position=1),
    ]
    db.add(profile)
    db.commit()
    return profile


@pytest.fixture
def auth_headers_client(test_client_user: User) -> dict:
    return auth_headers_for(test_client_user)


@pytest.fixture
def auth_headers_other(test_other_user: User) -> dict:
    return auth_headers_for(test_other_user)


@pytest.fixture
def auth_headers_trainer(test_trainer: User) -> dict:
    return auth_headers_for(test_trainer)


@pytest.fixture
def auth_headers_admin(test_admin: User) -> dict:
    return auth_headers_for(test_admin)


@pytest.fixture
def slot_at():
    """Factory for future UTC start times on a given weekday."""
    return next_weekday


@pytest.fixture
def availability_factory():
    return full_week_availability


@pytest.fixture
def headers_for():
    return auth_headers_for
