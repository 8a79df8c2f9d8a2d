"""Pytest configuration and fixtures."""

import os
from datetime import UTC, datetime, timedelta

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from chasing_cats.database import Base, get_db
from chasing_cats.main import app
from chasing_cats.models.enums import UserRole
from chasing_cats.models.user import User

# Fixed reference point for lifecycle tests: start T0, close T0+5d, voting ends T0+7d
T0 = datetime(2026, 3, 1, 12, 0, tzinfo=UTC)


class AuthHeaders(dict):
    """Dict subclass that also stores user_id and email."""

    def __init__(self, *args, user_id: int | None = None, email: str | None = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.user_id = user_id
        self.email = email


# Use test database - PostgreSQL in Docker, SQLite locally
if os.getenv("DATABASE_URL"):
    # Running in Docker - use PostgreSQL test database
    SQLALCHEMY_DATABASE_URL = os.getenv("DATABASE_URL").replace(
        "/chasing_cats", "/chasing_cats_test"
    )
else:
    # Running locally - use SQLite
    SQLALCHEMY_DATABASE_URL = "sqlite:///./test.db"

connect_args = {"check_same_thread": False} if "sqlite" in SQLALCHEMY_DATABASE_URL else {}
engine = create_engine(SQLALCHEMY_DATABASE_URL, connect_args=connect_args)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="session", autouse=True)
def setup_test_database():
    """Create test database schema once at the start of the test session."""
    if "postgresql" in SQLALCHEMY_DATABASE_URL:
        from sqlalchemy_utils import create_database, database_exists

        if not database_exists(SQLALCHEMY_DATABASE_URL):
            create_database(SQLALCHEMY_DATABASE_URL)

    from chasing_cats import models  # noqa: F401

    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture(scope="function", autouse=True)
def db():
    """Create a fresh database session for each test with cleanup."""
    session = TestingSessionLocal()

    yield session

    # Clean up all data after test
    session.rollback()
    for table in reversed(Base.metadata.sorted_tables):
        session.execute(table.delete())
    session.commit()
    session.close()


@pytest.fixture(scope="function")
def client(db):
    """Create a test client with database override."""

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def register(client, email: str, name: str) -> AuthHeaders:
    """Register a user through the API and return bearer headers for them."""
    response = client.post(
        "/api/v1/auth/register",
        json={"email": email, "password": "testpass123", "name": name},
    )
    assert response.status_code == 201
    data = response.json()
    return AuthHeaders(
        {"Authorization": f"Bearer {data['access_token']}"},
        user_id=data["user"]["id"],
        email=email,
    )


@pytest.fixture
def auth_headers(client):
    """Create a member and return auth headers with user info."""
    return register(client, "test@example.com", "Test User")


@pytest.fixture
def other_headers(client):
    """Create a second member."""
    return register(client, "other@example.com", "Other User")


@pytest.fixture
def admin_headers(client, db):
    """Create an administrator."""
    headers = register(client, "admin@example.com", "Admin User")
    db.query(User).filter(User.id == headers.user_id).update({"role": UserRole.ADMIN.value})
    db.commit()
    return headers


@pytest.fixture
def make_users(db):
    """Factory creating users directly in the database."""

    def _make_users(count: int, prefix: str = "user") -> list[User]:
        users = [
            User(email=f"{prefix}{i}@example.com", name=f"{prefix} {i}", password_hash="fake")
            for i in range(count)
        ]
        db.add_all(users)
        db.commit()
        for user in users:
            db.refresh(user)
        return users

    return _make_users


@pytest.fixture
def t0():
    """Reference start time for lifecycle tests."""
    return T0


@pytest.fixture
def challenge_dates():
    """Dates for a challenge open T0..T0+5d with voting until T0+7d."""
    return {
        "start_date": T0,
        "end_date": T0 + timedelta(days=5),
        "voting_end": T0 + timedelta(days=7),
    }
