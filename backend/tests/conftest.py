"""Pytest fixtures — throwaway SQLite database for fast, isolated tests."""
import os
import tempfile
from datetime import datetime, timezone, timedelta

os.environ.setdefault("DATABASE_URL", "sqlite:///./test.db")
os.environ.setdefault("SECRET_KEY", "test-secret")
os.environ.setdefault("UPLOAD_DIR", tempfile.mkdtemp(prefix="eventify-uploads-"))

import pytest
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from fastapi.testclient import TestClient

from eventify.database import Base, get_db
from eventify.main import app

# Import all models so they register with Base.metadata
from eventify.models.user import User                    # noqa: F401
from eventify.models.event import Event                  # noqa: F401
from eventify.models.participation import Participation  # noqa: F401

SQLITE_URL = "sqlite:///./test.db"


@pytest.fixture(scope="function")
def db_engine():
    """Create a fresh SQLite engine for each test."""
    engine = create_engine(SQLITE_URL, connect_args={"check_same_thread": False})

    # Enable WAL mode for better concurrency
    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_conn, connection_record):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.close()

    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def session_factory(db_engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=db_engine)


@pytest.fixture(scope="function")
def db(session_factory):
    """Yield a database session, closed after the test."""
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(scope="function")
def client(session_factory):
    """FastAPI TestClient with the database dependency overridden to use SQLite."""

    def _override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Helpers: register users and create events via the API
# ---------------------------------------------------------------------------
def register_user(client: TestClient, email: str, name: str = "Test User", password: str = "secret123") -> dict:
    """Helper — POST /api/auth/register and return {user, token, headers}."""
    resp = client.post("/api/auth/register", json={
        "email": email,
        "password": password,
        "name": name,
    })
    assert resp.status_code == 201, resp.text
    data = resp.json()
    data["headers"] = auth_headers(data["token"])
    return data


def auth_headers(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def event_payload(title: str = "Test Event", start_offset_hours: int = 24, duration_hours: int = 2, **overrides) -> dict:
    start = datetime.now(timezone.utc) + timedelta(hours=start_offset_hours)
    end = start + timedelta(hours=duration_hours)
    payload = {
        "title": title,
        "description": "An event for tests",
        "start_date": start.isoformat(),
        "end_date": end.isoformat(),
        "location": "Milan",
        "category": "music",
    }
    payload.update(overrides)
    return payload


def create_event(client: TestClient, organizer: dict, **kwargs) -> dict:
    """Helper — POST /api/events and return response JSON."""
    resp = client.post("/api/events/", json=event_payload(**kwargs), headers=organizer["headers"])
    assert resp.status_code == 201, resp.text
    return resp.json()


def participant_ids(event: dict) -> list[str]:
    return [p["user_id"] for p in event["participants"]]
