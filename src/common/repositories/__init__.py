"""
Repository Pattern for Generation History

Provides an abstraction layer over the MongoDB history collection.

Public API:
- get_history_repository(): Factory to get the history repository instance
- HistoryRepositoryInterface: Abstract interface for the history collection
- WriteResult: Result dataclass for write operations

Usage:
    from src.common.repositories import get_history_repository

    repo = get_history_repository()
    docs = repo.find({"owner_id": user_id}, sort=[("created_at", -1)])
"""

from .base import HistoryRepositoryInterface, WriteResult
from .config import (
    get_history_repository,
    reset_repository,
    RepositoryConfig,
)

__all__ = [
    "get_history_repository",
    "reset_repository",
    "HistoryRepositoryInterface",
    "WriteResult",
    "RepositoryConfig",
]
