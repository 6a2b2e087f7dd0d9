"""
Pytest configuration and shared fixtures.
"""

from collections import Counter
from decimal import Decimal

import pytest
from bson import ObjectId
from redis.exceptions import ConnectionError as RedisConnectionError

from api.interfaces import BookStore, CacheService
from api.models import BookRequest
from api.service import BooksService


class FakeBookStore(BookStore):
    """In-memory book store that counts calls per operation."""

    def __init__(self):
        self.documents = {}
        self.calls = Counter()

    async def insert(self, document):
        self.calls["insert"] += 1
        stored = dict(document, _id=ObjectId())
        self.documents[str(stored["_id"])] = stored
        return dict(stored)

    async def find_by_id(self, book_id):
        self.calls["find_by_id"] += 1
        document = self.documents.get(book_id)
        return dict(document) if document else None

    async def find_all(self):
        self.calls["find_all"] += 1
        return [dict(d) for d in self.documents.values()]

    async def replace_by_id(self, book_id, document):
        self.calls["replace_by_id"] += 1
        if book_id not in self.documents:
            return 0
        self.documents[book_id] = dict(document, _id=ObjectId(book_id))
        return 1

    async def delete_by_id(self, book_id):
        self.calls["delete_by_id"] += 1
        return 1 if self.documents.pop(book_id, None) else 0


class FakeCache(CacheService):
    """Dictionary cache; set ``available`` to False to simulate an outage."""

    def __init__(self):
        self.entries = {}
        self.ttls = {}
        self.calls = Counter()
        self.available = True

    def _check(self):
        if not self.available:
            raise RedisConnectionError("Error connecting to redis:6379")

    async def get(self, key):
        self.calls["get"] += 1
        self._check()
        return self.entries.get(key)

    async def set(self, key, value, ttl_seconds):
        self.calls["set"] += 1
        self._check()
        self.entries[key] = value
        self.ttls[key] = ttl_seconds

    async def remove(self, key):
        self.calls["remove"] += 1
        self._check()
        self.ttls.pop(key, None)
        return self.entries.pop(key, None) is not None


@pytest.fixture
def fake_store():
    return FakeBookStore()


@pytest.fixture
def fake_cache():
    return FakeCache()


@pytest.fixture
def books_service(fake_store, fake_cache):
    """Service wired to in-memory fakes with a two minute TTL."""
    return BooksService(fake_store, fake_cache, cache_ttl_seconds=120)


@pytest.fixture
def sample_book_request():
    """Create a sample book request for testing."""
    return BookRequest(
        name="1984",
        price=Decimal("9.99"),
        category="Dystopian",
        author="Orwell"
    )


@pytest.fixture
def other_book_request():
    return BookRequest(
        name="Brave New World",
        price=Decimal("12.50"),
        category="Dystopian",
        author="Huxley"
    )
