"""
Pytest configuration and fixtures.

This file provides pytest-specific configuration and fixtures.
Repository, pipeline and API tests run against in-memory SQLite; a single
shared connection (StaticPool) keeps every session on the same database.
"""

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from database.models import Base
from database.uow import marketplace_uow
from tests.fixtures.marketplace import MarketplaceFactory, FIXED_NOW


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line(
        "markers", "db: marks tests as requiring a database (SQLite in-memory)"
    )


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture
def uow_factory(session_factory):
    def factory():
        return marketplace_uow(session_factory)
    return factory


@pytest.fixture
def factory(session_factory):
    return MarketplaceFactory(session_factory)


@pytest.fixture
def fixed_now():
    return FIXED_NOW
