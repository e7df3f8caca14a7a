"""
Pytest Configuration File
-------------------------
Shared fixtures for the fraud risk engine tests.

- Forces a test environment before any familyfund module reads its config
- Provides a fixed reference clock and an evidence factory
- In-memory SQLite engine/session for persistence and API tests
"""

import os

os.environ.setdefault("ENV", "test")
os.environ.setdefault("DEBUG", "False")
os.environ.setdefault("DB_URL", "sqlite://")

from datetime import datetime, timezone
from decimal import Decimal

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from familyfund.fraud_engine.history import InMemorySubmissionHistory
from familyfund.models.claim import ClaimEvidence, SubmissionChannel
from familyfund.utils.db import init_db

NOW = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)


# =========================================================
# ⏱️ Clock + Evidence
# =========================================================
@pytest.fixture
def now():
    return NOW


@pytest.fixture
def make_evidence():
    """Factory for a clean, zero-risk claim; override any field per test."""

    def _make(**overrides) -> ClaimEvidence:
        fields = {
            "actor_id": "user_1",
            "family_id": "fam_1",
            "amount": Decimal("150.00"),
            "payment_date": NOW,
            "submission_channel": SubmissionChannel.IMAGE,
            "parser_confidence": None,
            "has_proof": True,
        }
        fields.update(overrides)
        return ClaimEvidence(**fields)

    return _make


@pytest.fixture
def history():
    return InMemorySubmissionHistory()


# =========================================================
# 🗄️ Database
# =========================================================
@pytest.fixture
def db_engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=db_engine)


@pytest.fixture
def db_session(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


# =========================================================
# 🌐 FastAPI Test Client
# =========================================================
@pytest.fixture
def client(session_factory):
    from fastapi.testclient import TestClient
    from familyfund.api.dependencies import get_now
    from familyfund.main import app
    from familyfund.utils.db import get_db

    def _override_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _override_db
    app.dependency_overrides[get_now] = lambda: NOW
    yield TestClient(app)
    app.dependency_overrides.clear()
