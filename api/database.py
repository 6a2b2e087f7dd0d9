"""
MongoDB document store for book records.
Handles connection lifecycle and CRUD operations on the books collection.
"""

from typing import Any, Dict, List, Optional

import structlog
from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorCollection, AsyncIOMotorDatabase
from pymongo.errors import ConnectionFailure

from api.interfaces import BookStore

logger = structlog.get_logger(__name__)


class MongoBookStore(BookStore):
    """
    Async MongoDB store for book documents.

    Identifiers are ObjectId hex strings. Strings that are not valid
    ObjectIds can never match a document, so they behave as absent.
    """

    def __init__(self, connection_url: str, database_name: str, collection_name: str):
        """
        Initialize the store.

        Args:
            connection_url: MongoDB connection URL
            database_name: Name of the database
            collection_name: Name of the books collection
        """
        self.connection_url = connection_url
        self.database_name = database_name
        self.collection_name = collection_name
        self.client: Optional[AsyncIOMotorClient] = None
        self.database: Optional[AsyncIOMotorDatabase] = None
        self.collection: Optional[AsyncIOMotorCollection] = None

    async def connect(self) -> None:
        """Establish connection to MongoDB."""
        try:
            self.client = AsyncIOMotorClient(self.connection_url)
            self.database = self.client[self.database_name]
            self.collection = self.database[self.collection_name]

            # Test connection
            await self.client.admin.command('ping')
            logger.info("Successfully connected to MongoDB",
                        database=self.database_name,
                        collection=self.collection_name)

        except ConnectionFailure as e:
            logger.error("Failed to connect to MongoDB", error=str(e))
            raise

    async def disconnect(self) -> None:
        """Close MongoDB connection."""
        if self.client:
            self.client.close()
            logger.info("Disconnected from MongoDB")

    async def insert(self, document: Dict[str, Any]) -> Dict[str, Any]:
        """
        Insert a new book document.

        Args:
            document: Book fields without an ``_id``

        Returns:
            The stored document including its generated ``_id``
        """
        to_insert = dict(document)
        result = await self.collection.insert_one(to_insert)
        to_insert["_id"] = result.inserted_id
        logger.debug("Book inserted", book_id=str(result.inserted_id))
        return to_insert

    async def find_by_id(self, book_id: str) -> Optional[Dict[str, Any]]:
        if not ObjectId.is_valid(book_id):
            return None
        return await self.collection.find_one({"_id": ObjectId(book_id)})

    async def find_all(self) -> List[Dict[str, Any]]:
        cursor = self.collection.find({})
        return await cursor.to_list(length=None)

    async def replace_by_id(self, book_id: str, document: Dict[str, Any]) -> int:
        """
        Replace a whole book document. Never inserts.

        Returns:
            Number of documents matched (0 or 1)
        """
        if not ObjectId.is_valid(book_id):
            return 0
        replacement = {k: v for k, v in document.items() if k != "_id"}
        result = await self.collection.replace_one({"_id": ObjectId(book_id)}, replacement, upsert=False)
        logger.debug("Book replaced", book_id=book_id, matched=result.matched_count)
        return result.matched_count

    async def delete_by_id(self, book_id: str) -> int:
        """
        Delete a book document.

        Returns:
            Number of documents deleted (0 or 1)
        """
        if not ObjectId.is_valid(book_id):
            return 0
        result = await self.collection.delete_one({"_id": ObjectId(book_id)})
        logger.debug("Book deleted", book_id=book_id, deleted=result.deleted_count)
        return result.deleted_count

    async def health_check(self) -> Dict:
        """
        Perform database health check.

        Returns:
            Dictionary with health status
        """
        try:
            await self.database.command("ping")
            books_count = await self.collection.count_documents({})

            return {
                "status": "healthy",
                "books_collection": "accessible",
                "books_count": books_count
            }
        except Exception as e:
            logger.error("Database health check failed", error=str(e))
            return {
                "status": "unhealthy",
                "error": str(e)
            }
