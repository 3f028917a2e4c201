"""
Repository Interface Definitions

Defines the abstract interface for generation history storage.
This enables swapping implementations (MongoDB, in-memory fakes for tests)
without changing the history store adapter.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, List, Optional


@dataclass
class WriteResult:
    """
    Result of a write operation.

    Attributes:
        matched_count: Number of documents that matched the filter
        modified_count: Number of documents actually modified or deleted
        upserted_id: ID of the inserted document (if any)
    """
    matched_count: int
    modified_count: int
    upserted_id: Optional[str] = None


class HistoryRepositoryInterface(ABC):
    """
    Abstract interface for the generation history collection.

    Implementations:
    - MongoHistoryRepository: MongoDB collection keyed by owner_id

    All methods follow fail-fast semantics: errors propagate to the caller,
    which decides whether to degrade.
    """

    @abstractmethod
    def find(
        self,
        filter: Dict[str, Any],
        sort: Optional[List[tuple]] = None,
        limit: int = 0,
    ) -> List[Dict[str, Any]]:
        """Find history documents."""
        pass

    @abstractmethod
    def insert_one(self, document: Dict[str, Any]) -> WriteResult:
        """Insert a single history document."""
        pass

    @abstractmethod
    def delete_many(self, filter: Dict[str, Any]) -> WriteResult:
        """Delete all documents matching the filter."""
        pass
