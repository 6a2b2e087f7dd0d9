"""
Capability interfaces consumed by the books service.

The service only talks to these abstractions, so the MongoDB and Redis
adapters can be swapped for fakes in tests.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional


class BookStore(ABC):
    """Durable CRUD over a single collection of book documents."""

    @abstractmethod
    async def insert(self, document: Dict[str, Any]) -> Dict[str, Any]:
        """Insert a document and return it with its assigned ``_id``."""

    @abstractmethod
    async def find_by_id(self, book_id: str) -> Optional[Dict[str, Any]]:
        """Return the document with ``book_id`` or None."""

    @abstractmethod
    async def find_all(self) -> List[Dict[str, Any]]:
        """Return every document in the collection."""

    @abstractmethod
    async def replace_by_id(self, book_id: str, document: Dict[str, Any]) -> int:
        """Replace the document with ``book_id``; return the matched count."""

    @abstractmethod
    async def delete_by_id(self, book_id: str) -> int:
        """Delete the document with ``book_id``; return the deleted count."""


class CacheService(ABC):
    """Key-value store with per-entry expiration."""

    @abstractmethod
    async def get(self, key: str) -> Optional[str]:
        """Return the cached value or None on a miss."""

    @abstractmethod
    async def set(self, key: str, value: str, ttl_seconds: int) -> None:
        """Store ``value`` under ``key`` for ``ttl_seconds``."""

    @abstractmethod
    async def remove(self, key: str) -> bool:
        """Delete ``key``; return True if it existed and was removed."""
