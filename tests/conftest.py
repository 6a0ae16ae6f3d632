"""
Shared pytest fixtures for all test modules.

Uses an in-memory SQLite database (StaticPool) so every test
function gets a clean, isolated database — no disk I/O, no state leakage.
The provider dependency is replaced with a demo provider or a mock.
"""
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from unittest.mock import AsyncMock

from stk_relay.database import Base, get_db
from stk_relay.providers.base import StkPushResult
from stk_relay.providers.factory import get_provider
from stk_relay.providers.simulated import SimulatedProvider
from stk_relay import models


# ---------------------------------------------------------------------------
# StaticPool forces all SQLAlchemy connections to reuse the same underlying
# sqlite3 connection, which is required for in-memory SQLite.
# ---------------------------------------------------------------------------
TEST_ENGINE = create_engine(
    "sqlite:///:memory:",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=TEST_ENGINE)


@pytest.fixture(autouse=True)
def reset_db():
    """Drop and recreate all tables before each test for full isolation."""
    Base.metadata.drop_all(bind=TEST_ENGINE)
    Base.metadata.create_all(bind=TEST_ENGINE)
    yield
    Base.metadata.drop_all(bind=TEST_ENGINE)


@pytest.fixture
def db(reset_db):
    """Yield a SQLAlchemy session backed by the in-memory test database."""
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def provider():
    return SimulatedProvider()


@pytest.fixture
def client(db, provider):
    """
    FastAPI TestClient with the store and provider dependencies overridden.
    The TestClient is NOT used as a context manager so the lifespan hook
    (which needs DATABASE_URL) is skipped.
    """
    from stk_relay.main import app

    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_provider] = lambda: provider
    yield TestClient(app)
    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Helpers — not fixtures — so any test file can import and call them directly.
# ---------------------------------------------------------------------------
def mock_provider(result: StkPushResult) -> AsyncMock:
    """Return an AsyncMock provider whose stk_push returns result."""
    m = AsyncMock()
    m.stk_push = AsyncMock(return_value=result)
    return m


def all_transactions(db):
    db.expire_all()
    return db.query(models.Transaction).all()


def valid_body(**overrides):
    body = {"phone": "0712345678", "amount": 100, "type": "airtime", "offerName": "Test"}
    body.update(overrides)
    return body
