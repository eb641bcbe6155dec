"""Shared fixtures for proxy tests."""

from __future__ import annotations

from collections.abc import Generator

import pytest

from ethermint_proxy.query import QueryService
from ethermint_proxy.storage import HashTranslationStore, SQLiteDatabase
from ethermint_proxy.sync import SyncService

from tests.ethermint_proxy.helpers import FakeUpstream


@pytest.fixture
def db() -> Generator[SQLiteDatabase, None, None]:
    """Create an in-memory SQLite database for testing."""
    database = SQLiteDatabase(":memory:")
    yield database
    database.close()


@pytest.fixture
def store(db: SQLiteDatabase) -> HashTranslationStore:
    """Translation store over the in-memory database."""
    return HashTranslationStore(db)


@pytest.fixture
def upstream() -> FakeUpstream:
    """Synthetic chain with blocks 0..4 produced."""
    return FakeUpstream(head=5)


@pytest.fixture
def sync_service(store: HashTranslationStore, upstream: FakeUpstream) -> SyncService:
    """Synchronizer with a short poll interval."""
    return SyncService(store=store, upstream=upstream, poll_interval=0.01)


@pytest.fixture
def query_service(store: HashTranslationStore, upstream: FakeUpstream) -> QueryService:
    """Query service over the same store and upstream."""
    return QueryService(store=store, upstream=upstream)
