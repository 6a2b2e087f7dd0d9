"""
Books service: cache-aside reads and write invalidation over the book store.

Every public method returns a ServiceResponse envelope. Storage errors are
turned into failure envelopes; cache errors are logged and treated as misses.
"""

from typing import Optional, Type

import structlog

from api.interfaces import BookStore, CacheService
from api.mapper import book_request_to_document, document_to_book_response
from api.models import (
    BookEnvelope, BookListEnvelope, BookRequest, RemoveEnvelope,
    ServiceError, ServiceResponse
)

logger = structlog.get_logger(__name__)

BOOK_KEY_PREFIX = "book:"
ALL_BOOKS_KEY = "books:all"
DEFAULT_CACHE_TTL_SECONDS = 120


def book_cache_key(book_id: str) -> str:
    return f"{BOOK_KEY_PREFIX}{book_id}"


def not_found_message(book_id: str) -> str:
    return f"Book with Id {book_id} not found!"


class BooksService:
    """Book CRUD with a read-through cache in front of the store."""

    def __init__(
        self,
        store: BookStore,
        cache: Optional[CacheService] = None,
        cache_ttl_seconds: int = DEFAULT_CACHE_TTL_SECONDS
    ):
        """
        Args:
            store: Document store holding the books
            cache: Optional cache; when None every read goes to the store
            cache_ttl_seconds: Lifetime of cached read results
        """
        self.store = store
        self.cache = cache
        self.cache_ttl_seconds = cache_ttl_seconds

    async def get_books(self) -> BookListEnvelope:
        """Return every book, from the cache when a snapshot is present."""
        cached = await self._cache_get(ALL_BOOKS_KEY, BookListEnvelope)
        if cached is not None:
            return cached

        try:
            documents = await self.store.find_all()
        except Exception as e:
            logger.error("Failed to get books", error=str(e))
            return BookListEnvelope.fail(ServiceError.STORAGE_FAILURE, str(e))

        if not documents:
            return BookListEnvelope.fail(ServiceError.NOT_FOUND, "No books found!")

        response = BookListEnvelope.ok([document_to_book_response(d) for d in documents])
        await self._cache_set(ALL_BOOKS_KEY, response)
        return response

    async def get_book_by_id(self, book_id: str) -> BookEnvelope:
        """Return one book, from the cache when present."""
        key = book_cache_key(book_id)
        cached = await self._cache_get(key, BookEnvelope)
        if cached is not None:
            return cached

        try:
            document = await self.store.find_by_id(book_id)
        except Exception as e:
            logger.error("Failed to get book by ID", book_id=book_id, error=str(e))
            return BookEnvelope.fail(ServiceError.STORAGE_FAILURE, str(e))

        if document is None:
            return BookEnvelope.fail(ServiceError.NOT_FOUND, not_found_message(book_id))

        response = BookEnvelope.ok(document_to_book_response(document))
        await self._cache_set(key, response)
        return response

    async def add_book(self, new_book: BookRequest) -> BookEnvelope:
        """Insert a book and return it with its generated id."""
        try:
            stored = await self.store.insert(book_request_to_document(new_book))
        except Exception as e:
            logger.error("Failed to add book", name=new_book.name, error=str(e))
            return BookEnvelope.fail(ServiceError.STORAGE_FAILURE, str(e))

        await self._invalidate(ALL_BOOKS_KEY)
        created = document_to_book_response(stored)
        logger.info("Book added", book_id=created.id)
        return BookEnvelope.ok(created)

    async def update_book(self, book_id: str, updated_book: BookRequest) -> BookEnvelope:
        """Replace a book entirely. Missing ids are reported, never created."""
        try:
            matched = await self.store.replace_by_id(book_id, book_request_to_document(updated_book))
            if matched == 0:
                return BookEnvelope.fail(ServiceError.NOT_FOUND, not_found_message(book_id))

            await self._invalidate(book_cache_key(book_id), ALL_BOOKS_KEY)

            document = await self.store.find_by_id(book_id)
        except Exception as e:
            logger.error("Failed to update book", book_id=book_id, error=str(e))
            return BookEnvelope.fail(ServiceError.STORAGE_FAILURE, str(e))

        # Removed by a concurrent writer between replace and re-read
        if document is None:
            return BookEnvelope.fail(ServiceError.NOT_FOUND, not_found_message(book_id))

        logger.info("Book updated", book_id=book_id)
        return BookEnvelope.ok(document_to_book_response(document))

    async def remove_book(self, book_id: str) -> RemoveEnvelope:
        """Delete a book and drop every cache entry that could still show it."""
        try:
            deleted = await self.store.delete_by_id(book_id)
        except Exception as e:
            logger.error("Failed to remove book", book_id=book_id, error=str(e))
            return RemoveEnvelope.fail(ServiceError.STORAGE_FAILURE, str(e))

        if deleted == 0:
            return RemoveEnvelope.fail(ServiceError.NOT_FOUND, not_found_message(book_id))

        await self._invalidate(book_cache_key(book_id), ALL_BOOKS_KEY)
        logger.info("Book removed", book_id=book_id)
        return RemoveEnvelope.ok()

    async def _cache_get(self, key: str, envelope_type: Type[ServiceResponse]) -> Optional[ServiceResponse]:
        if self.cache is None:
            return None
        try:
            raw = await self.cache.get(key)
            if raw is None:
                return None
            cached = envelope_type.model_validate_json(raw)
        except Exception as e:
            logger.warning("Cache read failed, treating as miss", key=key, error=str(e))
            return None

        logger.debug("Cache hit", key=key)
        return cached

    async def _cache_set(self, key: str, response: ServiceResponse) -> None:
        if self.cache is None:
            return
        try:
            await self.cache.set(key, response.model_dump_json(), self.cache_ttl_seconds)
        except Exception as e:
            logger.warning("Cache write failed", key=key, error=str(e))

    async def _invalidate(self, *keys: str) -> None:
        if self.cache is None:
            return
        for key in keys:
            try:
                await self.cache.remove(key)
            except Exception as e:
                logger.warning("Cache invalidation failed", key=key, error=str(e))

