"""Root conftest: shared fixtures for all recruit_chat tests."""

from __future__ import annotations

import sys
from datetime import timedelta
from pathlib import Path

# Ensure recruit_chat/ is on sys.path
_app_dir = str(Path(__file__).resolve().parent)
if _app_dir not in sys.path:
    sys.path.insert(0, _app_dir)

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from database import Base, utcnow
import models  # noqa: F401  register all models with Base

# In-memory SQLite for tests; StaticPool makes all connections share one DB
TEST_ENGINE = create_engine(
    "sqlite:///:memory:",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestSession = sessionmaker(bind=TEST_ENGINE, autoflush=False, expire_on_commit=False)

ADMIN_USERNAME = "admin"
ADMIN_PASSWORD = "s3cret"
STATS_TOKEN = "stats-token-123"


@pytest.fixture(autouse=True)
def _setup_db():
    """Create all tables before each test, drop after."""
    Base.metadata.create_all(bind=TEST_ENGINE)
    yield
    Base.metadata.drop_all(bind=TEST_ENGINE)


@pytest.fixture(autouse=True)
def _reset_caches():
    """History and system prompt caches are process-wide; start each test empty."""
    from services.history import history_cache
    from services.knowledge_base import prompt_cache

    history_cache.clear()
    prompt_cache.invalidate()
    yield
    history_cache.clear()
    prompt_cache.invalidate()


@pytest.fixture(autouse=True)
def _settings(monkeypatch, tmp_path):
    from config import settings

    monkeypatch.setattr(settings, "ADMIN_USERNAME", ADMIN_USERNAME)
    monkeypatch.setattr(settings, "ADMIN_PASSWORD", ADMIN_PASSWORD)
    monkeypatch.setattr(settings, "ADMIN_ACCESS_TOKEN", STATS_TOKEN)
    monkeypatch.setattr(settings, "APP_URL", "https://chat.example.com")
    monkeypatch.setattr(settings, "VERCEL_URL", "")
    monkeypatch.setattr(settings, "ENVIRONMENT", "development")
    monkeypatch.setattr(settings, "KNOWLEDGE_BASE_CONTENT", "")
    monkeypatch.setattr(settings, "KNOWLEDGE_BASE_FILE", str(tmp_path / "knowledge-base.md"))
    monkeypatch.setattr(settings, "CANDIDATE_NAME", "Alex")
    return settings


@pytest.fixture
def db():
    """Yield a test database session."""
    session = TestSession()
    try:
        yield session
    finally:
        session.close()


def _make_token(db, **overrides):
    from models.token import Token

    now = utcnow()
    fields = {
        "label": "Acme recruiter",
        "company": "Acme",
        "max_messages": 30,
        "used_messages": 0,
        "created_at": now,
        "expires_at": now + timedelta(days=30),
    }
    fields.update(overrides)
    token = Token(**fields)
    db.add(token)
    db.commit()
    db.refresh(token)
    return token


@pytest.fixture
def make_token(db):
    def _factory(**overrides):
        return _make_token(db, **overrides)
    return _factory


@pytest.fixture
def token(db):
    return _make_token(db)


@pytest.fixture
def expired_token(db):
    now = utcnow()
    return _make_token(
        db,
        label="Expired",
        created_at=now - timedelta(days=40),
        expires_at=now - timedelta(days=10),
    )


@pytest.fixture
def exhausted_token(db):
    return _make_token(db, label="Exhausted", max_messages=5, used_messages=5)
