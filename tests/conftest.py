"""
Common test fixtures.

Provides an isolated in-memory database session, a FastAPI test client
wired to it, and small factories for users, tags and events.
"""
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from eventhub import models
from eventhub.core.config import settings
from eventhub.core.database import Base, get_db
from eventhub.main import app


@pytest.fixture
def db():
    """Fresh in-memory SQLite database per test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def media_dirs(tmp_path, monkeypatch):
    """Point media storage at a temporary directory."""
    media_root = tmp_path / "media"
    upload_root = tmp_path / "uploads"
    monkeypatch.setattr(settings, "media_root", str(media_root))
    monkeypatch.setattr(settings, "media_upload_root", str(upload_root))
    return media_root, upload_root


@pytest.fixture
def client(db, media_dirs):
    """Test client using the test database session."""
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def make_user(db):
    def _make_user(first_name="Ada", lat=None, lon=None, favourite_tags=(), followees=()):
        user = models.User(first_name=first_name, lat=lat, lon=lon)
        user.favourite_tags = list(favourite_tags)
        user.followees = list(followees)
        db.add(user)
        db.commit()
        db.refresh(user)
        return user
    return _make_user


@pytest.fixture
def make_tag(db):
    def _make_tag(name):
        tag = models.Tag(name=name)
        db.add(tag)
        db.commit()
        return tag
    return _make_tag


@pytest.fixture
def make_event(db):
    def _make_event(host, name="Party", lat=0.0, lon=0.0, status="scheduled", tags=(), attendees=()):
        event = models.Event(name=name, host_id=host.id, lat=lat, lon=lon, status=status)
        event.tags = list(tags)
        db.add(event)
        db.flush()
        for user, rating in attendees:
            db.add(models.EventAttendee(user_id=user.id, event_id=event.id, status="attending", rating=rating))
        db.commit()
        db.refresh(event)
        return event
    return _make_event
