"""
Pytest configuration and shared fixtures.
"""

from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from api.main import create_app
from library.store import BookStore
from utilities.config import ServiceConfig


class FakeClock:
    """Deterministic clock that advances one second per reading."""

    def __init__(self, start: datetime = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)):
        self.current = start

    def __call__(self) -> datetime:
        now = self.current
        self.current = self.current + timedelta(seconds=1)
        return now


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def book_store(fake_clock):
    """Create an empty store driven by the fake clock."""
    return BookStore(clock=fake_clock)


@pytest.fixture
def settings():
    return ServiceConfig(host="0.0.0.0", port=3001, debug=False)


@pytest.fixture
def app(book_store, settings):
    return create_app(store=book_store, settings=settings)


@pytest.fixture
def client(app):
    """Create test client bound to a fresh store."""
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client


@pytest.fixture
def sample_books():
    return [
        {"title": "The Hobbit", "author": "J.R.R. Tolkien"},
        {"title": "The Great Gatsby", "author": "F. Scott Fitzgerald"},
        {"title": "Nineteen Eighty-Four", "author": "George Orwell"},
    ]


@pytest.fixture
def populated_store(book_store, sample_books):
    for book in sample_books:
        book_store.insert(book["title"], book["author"])
    return book_store
