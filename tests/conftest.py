"""
pytest Fixtures for the Catalog Tests

FIXTURE LAYOUT:
- store: a fresh in-memory SQLite catalog per test (isolation without
  rollback tricks; the repository commits for real)
- db_session / repository: a session on that store and a repository with
  a deterministic clock
- client: a TestClient for an app built with its own Settings, backed by
  a SQLite file in the test's tmp_path
- book_data: a valid payload factory

SQLite stands in for PostgreSQL here. The unique constraint on ISBN
behaves the same way on both.
"""

from collections.abc import Callable, Generator
from datetime import datetime, timedelta, timezone
from typing import Any

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from bookstore.config import Settings
from bookstore.database import CatalogStore
from bookstore.main import create_app
from bookstore.services import BookRepository


class StepClock:
    """Clock that advances one second on every call."""

    def __init__(self, start: datetime | None = None) -> None:
        self.current = start or datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        self.current += timedelta(seconds=1)
        return self.current


# =============================================================================
# STORE FIXTURES
# =============================================================================
@pytest.fixture
def store() -> Generator[CatalogStore, None, None]:
    """In-memory catalog store with the books table created."""
    store = CatalogStore("sqlite://")
    store.open()
    store.create_tables()

    yield store

    store.drop_tables()
    store.close()


@pytest.fixture
def db_session(store: CatalogStore) -> Generator[Session, None, None]:
    session = store.session()
    yield session
    session.close()


@pytest.fixture
def clock() -> StepClock:
    return StepClock()


@pytest.fixture
def repository(db_session: Session, clock: StepClock) -> BookRepository:
    return BookRepository(db_session, clock=clock)


# =============================================================================
# APPLICATION FIXTURES
# =============================================================================
@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        database_url=f"sqlite:///{tmp_path / 'catalog.db'}",
        environment="development",
        debug=False,
        log_level="WARNING",
    )


@pytest.fixture
def client(settings: Settings) -> Generator[TestClient, None, None]:
    """
    Test client for a fully configured app.

    Entering the TestClient runs the lifespan, which opens the store and
    creates the table; leaving it closes the store.
    """
    app = create_app(settings)
    with TestClient(app) as test_client:
        yield test_client


# =============================================================================
# SAMPLE DATA FIXTURES
# =============================================================================
@pytest.fixture
def book_data() -> Callable[..., dict[str, Any]]:
    """
    Factory for valid book payloads.

    Usage:
        book_data(isbn="1234567890", title="Other")
    """

    def make(**overrides: Any) -> dict[str, Any]:
        data = {
            "title": "War and Peace",
            "author": "Leo Tolstoy",
            "isbn": "978-0-14-044793-4",
            "publishedYear": 1869,
            "genre": "Fiction",
            "price": 14.5,
            "inStock": True,
        }
        data.update(overrides)
        return data

    return make


@pytest.fixture
def sample_book(client: TestClient, book_data) -> dict[str, Any]:
    """A book created through the API; returns the response data."""
    response = client.post("/api/v1/books/", json=book_data())
    assert response.status_code == 201
    return response.json()["data"]
