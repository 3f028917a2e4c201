"""
MongoDB History Repository

Wraps the generation history collection. Every document carries the
owner's identity so that reads and bulk deletes stay scoped to one user.
"""

import logging
from typing import Any, Dict, List, Optional

from pymongo import ASCENDING, DESCENDING, MongoClient
from pymongo.collection import Collection
from pymongo.database import Database

from .base import HistoryRepositoryInterface, WriteResult

logger = logging.getLogger(__name__)


class MongoHistoryRepository(HistoryRepositoryInterface):
    """
    MongoDB-backed history repository.

    Connection Management:
    - Uses a class-level MongoClient for connection pooling
    - Client is created lazily on first use and reused across calls

    Error Handling:
    - Fail-fast: all errors propagate to caller
    """

    _client: Optional[MongoClient] = None
    _db: Optional[Database] = None
    _collection: Optional[Collection] = None

    def __init__(
        self,
        mongodb_uri: str,
        database: str = "resume_studio",
        collection: str = "generation_history",
    ):
        """
        Initialize repository with connection parameters.

        Args:
            mongodb_uri: MongoDB connection string
            database: Database name (default: "resume_studio")
            collection: Collection name (default: "generation_history")
        """
        self._mongodb_uri = mongodb_uri
        self._database_name = database
        self._collection_name = collection

    def _get_collection(self) -> Collection:
        """Get the MongoDB collection, creating the client if needed."""
        if MongoHistoryRepository._collection is None:
            MongoHistoryRepository._client = MongoClient(
                self._mongodb_uri,
                serverSelectionTimeoutMS=5000,
                connectTimeoutMS=5000,
            )
            MongoHistoryRepository._db = MongoHistoryRepository._client[self._database_name]
            MongoHistoryRepository._collection = MongoHistoryRepository._db[self._collection_name]
            MongoHistoryRepository._collection.create_index(
                [("owner_id", ASCENDING), ("created_at", DESCENDING)]
            )
            logger.info(
                f"History repository connected: {self._database_name}.{self._collection_name}"
            )
        return MongoHistoryRepository._collection

    def find(
        self,
        filter: Dict[str, Any],
        sort: Optional[List[tuple]] = None,
        limit: int = 0,
    ) -> List[Dict[str, Any]]:
        """Find history documents."""
        collection = self._get_collection()
        cursor = collection.find(filter)

        if sort:
            cursor = cursor.sort(sort)
        if limit > 0:
            cursor = cursor.limit(limit)

        return list(cursor)

    def insert_one(self, document: Dict[str, Any]) -> WriteResult:
        """Insert a single history document."""
        collection = self._get_collection()
        result = collection.insert_one(document)

        return WriteResult(
            matched_count=0,
            modified_count=0,
            upserted_id=str(result.inserted_id) if result.inserted_id else None,
        )

    def delete_many(self, filter: Dict[str, Any]) -> WriteResult:
        """Delete all documents matching the filter."""
        collection = self._get_collection()
        result = collection.delete_many(filter)

        return WriteResult(
            matched_count=result.deleted_count,
            modified_count=result.deleted_count,
        )

    @classmethod
    def reset_connection(cls) -> None:
        """
        Reset the connection pool.

        Used for testing or connection recovery.
        """
        if cls._client:
            cls._client.close()
        cls._client = None
        cls._db = None
        cls._collection = None
        logger.info("History repository connection reset")
