"""Shared fixtures: an in-memory database per test and an API client bound to it."""

import os
import sys

import pytest

# Add parent dir to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ENVIRONMENT"] = "development"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["EMAIL_HOST"] = ""
os.environ["OPENWEATHERMAP_API_KEY"] = ""

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from planner import models  # noqa: F401  (registers tables)
from planner.database import Base, get_db
from planner.models.user import User


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def make_user(db):
    """Insert a user directly; password hashing is irrelevant for service tests."""
    counter = {"n": 0}

    def _make(email=None, first_name="Test", last_name="Student"):
        counter["n"] += 1
        user = User(
            email=email or f"student{counter['n']}@example.edu",
            password_hash="not-a-real-hash",
            first_name=first_name,
            last_name=last_name,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make


@pytest.fixture
def client(session_factory):
    from planner.main import app

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


STRONG_PASSWORD = "Str0ng!Pass"


@pytest.fixture
def register_and_login(client):
    """Register an account through the API and return its auth headers."""

    def _register(email, first_name="Test", last_name="Student", password=STRONG_PASSWORD):
        resp = client.post("/api/auth/register", json={
            "email": email,
            "password": password,
            "first_name": first_name,
            "last_name": last_name,
        })
        assert resp.status_code == 201, resp.text
        token = client.post("/api/auth/login", json={"email": email, "password": password}).json()["access_token"]
        return {"Authorization": f"Bearer {token}"}

    return _register
