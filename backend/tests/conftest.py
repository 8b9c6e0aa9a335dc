"""Pytest fixtures: a fresh SQLite database per test."""
import os
from datetime import datetime, timedelta, timezone

os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

import eventhub.models  # noqa: F401
from eventhub.database import Base, build_engine, get_db
from eventhub.identity import Identity
from eventhub.main import app
from eventhub.services import event_service, profile_service


@pytest.fixture(scope="function")
def db_engine(tmp_path):
    """Create a fresh SQLite engine (foreign keys on) for each test."""
    engine = build_engine(f"sqlite:///{tmp_path / 'test.db'}")
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def session_factory(db_engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=db_engine)


@pytest.fixture(scope="function")
def db(session_factory):
    """Yield a database session for service-level tests."""
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


@pytest.fixture
def alice(db):
    return Identity(profile_service.register_identity(db, "alice-id", {"full_name": "Alice"}).id)


@pytest.fixture
def bob(db):
    return Identity(profile_service.register_identity(db, "bob-id", {"full_name": "Bob"}).id)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------
def hours_from_now(hours: float) -> datetime:
    return datetime.now(timezone.utc) + timedelta(hours=hours)


def make_event(db, identity, title="Board Games Night", start=None, end=None, is_public=True,
               description="Bring your favourite game", location="Community Hall"):
    """Create an event through the service; defaults to tomorrow, one hour long."""
    start = start or hours_from_now(24)
    end = end or start + timedelta(hours=1)
    return event_service.create_event(
        db, identity,
        title=title, description=description, location=location,
        start_time=start, end_time=end, is_public=is_public,
    )


def make_past_event(db, identity, **kwargs):
    """Create an event that ended an hour ago, so it can be reviewed."""
    return make_event(db, identity, start=hours_from_now(-3), end=hours_from_now(-1), **kwargs)


def auth(user_id: str) -> dict:
    """Headers the auth collaborator would forward for ``user_id``."""
    return {"X-User-Id": user_id}


def register_via_api(client: TestClient, user_id: str, full_name: str = None) -> dict:
    """POST /api/profiles/register and return response JSON."""
    body = {"full_name": full_name} if full_name else {}
    resp = client.post("/api/profiles/register", json=body, headers=auth(user_id))
    assert resp.status_code == 201, resp.text
    return resp.json()
