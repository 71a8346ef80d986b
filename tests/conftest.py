"""Shared test fixtures for backend tests.

Uses an in-memory SQLite database so tests run without Postgres.
"""
from __future__ import annotations

import os

# Must be set before auth.config is imported.
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("API_ACCESS_TOKEN", "test-token")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from db.database import Base, get_db
from db.models import CameraPin, UserMap


# ---------- Database fixtures ----------

@pytest.fixture()
def db_engine():
    engine = create_engine(
        "sqlite://",
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    # SQLite does not enforce foreign keys by default.
    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_conn, _connection_record):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture()
def db_session(db_engine):
    TestSession = sessionmaker(bind=db_engine, autocommit=False, autoflush=False, class_=Session)
    session = TestSession()
    try:
        yield session
    finally:
        session.close()


# ---------- Map / camera fixtures ----------

@pytest.fixture()
def user_map(db_session: Session) -> UserMap:
    user_map = UserMap(name="Barangay 630", access_code="BRGY630")
    db_session.add(user_map)
    db_session.commit()
    db_session.refresh(user_map)
    return user_map


@pytest.fixture()
def camera_pin(db_session: Session, user_map: UserMap) -> CameraPin:
    camera = CameraPin(
        camera_name="Gate 1",
        hls_url="http://cctv.local:8888/gate-1/index.m3u8",
        latitude=14.5995,
        longitude=120.9842,
        direction=90,
        user_map_id=user_map.id,
    )
    db_session.add(camera)
    db_session.commit()
    db_session.refresh(camera)
    return camera


# ---------- FastAPI test client ----------

@pytest.fixture()
def auth_headers() -> dict[str, str]:
    from auth.config import settings

    return {"Authorization": f"Bearer {settings.api_access_token}"}


@pytest.fixture()
def client(db_session: Session, monkeypatch):
    """TestClient for api.app with get_db bound to the in-memory SQLite session."""
    import api

    # Tables are created by the db_engine fixture.
    monkeypatch.setattr(api, "init_db", lambda: None)
    api.limiter.reset()

    def _override_get_db():
        try:
            yield db_session
        finally:
            pass  # session lifetime managed by the db_session fixture

    api.app.dependency_overrides[get_db] = _override_get_db

    with TestClient(api.app) as c:
        yield c

    api.app.dependency_overrides.clear()
