"""
Test configuration and fixtures for the short link service.
This centralizes all test setup, making individual tests clean.
"""

import os

# Must be set before the app (and its settings) are imported
os.environ.setdefault("STORE_BACKEND", "memory")
os.environ.setdefault("CACHE_BACKEND", "memory")
os.environ.setdefault("VISIT_DISPATCH_MODE", "inline")
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("DEBUG", "false")

import pytest
from fastapi.testclient import TestClient

from main import app
from shortlink_app.cache.strategies import InMemoryCache
from shortlink_app.database.connection import Base, build_engine, build_session_factory
from shortlink_app.dependencies import get_record_store
from shortlink_app.store.strategies import InMemoryRecordStore, SQLRecordStore
import shortlink_app.models  # noqa: F401  (registers tables)


class FakeClock:
    """Manually advanced monotonic clock for TTL tests."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def cache(clock):
    return InMemoryCache(ttl=3600, check_period=120, clock=clock)


@pytest.fixture
def memory_store():
    return InMemoryRecordStore()


@pytest.fixture
def sql_store():
    """
    SQL store on a private in-memory SQLite database.
    Fresh schema per test so tests are isolated.
    """
    engine = build_engine("sqlite:///:memory:")
    Base.metadata.create_all(bind=engine)
    try:
        yield SQLRecordStore(build_session_factory(engine))
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture(params=["memory", "sql"])
def record_store(request):
    """Runs a test against both store backends."""
    return request.getfixturevalue(f"{request.param}_store")


@pytest.fixture(scope="function")
def client(memory_store):
    """
    Create a test client with the record store dependency overridden.
    The lifespan builds a fresh cache and dispatcher for every test.
    """
    app.dependency_overrides[get_record_store] = lambda: memory_store

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()
