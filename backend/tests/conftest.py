"""Pytest configuration and fixtures for tests."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from crm.database import Base
from crm.services.notifications import Notifier
from crm.store.sql_store import SqlDocumentStore


@pytest.fixture
def engine():
    """Create an in-memory SQLite database for each test."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    # Import all models so they're registered
    import crm.models  # noqa: F401

    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine)


@pytest.fixture
def store(session_factory) -> SqlDocumentStore:
    """A SQL document store on the in-memory database."""
    return SqlDocumentStore(session_factory)


@pytest.fixture
def notifier() -> Notifier:
    return Notifier(display_seconds=5)


@pytest.fixture
def llm() -> MagicMock:
    """An LLM provider whose extraction result each test sets."""
    provider = MagicMock()
    provider.provider_name = "fake"
    provider.model_name = "fake-model"
    provider.extract_fields = AsyncMock(return_value={})
    return provider
