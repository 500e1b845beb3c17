from __future__ import annotations

import os

# Keep the app's own engine off the filesystem; tests use the engine below.
os.environ.setdefault("DB_URL", "sqlite://")

import random

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from pokernight.core.db import enable_sqlite_foreign_keys
from pokernight.core.deps import get_db, get_seating_engine
from pokernight.main import app
from pokernight.models.db import Base
from pokernight.services.seating import SeatingAssignmentEngine


engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
enable_sqlite_foreign_keys(engine)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(autouse=True)
def _schema():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    def override_get_db():
        session = TestingSessionLocal()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_seating_engine] = lambda: SeatingAssignmentEngine(random.Random(1234).randrange)
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def make_player(client):
    def _make(name: str, **extra) -> dict:
        r = client.post("/api/players", json={"name": name, **extra})
        assert r.status_code == 201, r.text
        return r.json()

    return _make


@pytest.fixture
def make_session(client):
    def _make(name: str = "Friday game", player_ids: list[int] | None = None) -> dict:
        r = client.post(
            "/api/sessions",
            json={
                "name": name,
                "scheduledDateTime": "2026-10-23T19:30:00",
                "playerIds": player_ids or [],
            },
        )
        assert r.status_code == 201, r.text
        return r.json()

    return _make
