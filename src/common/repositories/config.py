"""
Repository Configuration and Factory

Provides the factory function that returns the history repository
implementation based on environment configuration.
"""

import os
import logging
from dataclasses import dataclass
from typing import Optional

from .base import HistoryRepositoryInterface

logger = logging.getLogger(__name__)


@dataclass
class RepositoryConfig:
    """
    Configuration for repository initialization.

    Loaded from environment variables with sensible defaults.
    """
    mongodb_uri: str
    database: str = "resume_studio"
    collection: str = "generation_history"

    @classmethod
    def from_env(cls) -> "RepositoryConfig":
        """
        Load configuration from environment variables.

        Environment variables:
        - MONGODB_URI (required): MongoDB connection string
        - HISTORY_DATABASE: Database name
        - HISTORY_COLLECTION: Collection name
        """
        mongodb_uri = os.getenv("MONGODB_URI")
        if not mongodb_uri:
            raise ValueError("MONGODB_URI environment variable is required")

        return cls(
            mongodb_uri=mongodb_uri,
            database=os.getenv("HISTORY_DATABASE", "resume_studio"),
            collection=os.getenv("HISTORY_COLLECTION", "generation_history"),
        )


# Singleton repository instance
_repository_instance: Optional[HistoryRepositoryInterface] = None


def get_history_repository() -> HistoryRepositoryInterface:
    """
    Get the history repository instance.

    Uses singleton pattern for connection pooling.

    Raises:
        ValueError: If MONGODB_URI is not configured
    """
    global _repository_instance

    if _repository_instance is None:
        config = RepositoryConfig.from_env()

        from .mongo_history_repository import MongoHistoryRepository
        _repository_instance = MongoHistoryRepository(
            mongodb_uri=config.mongodb_uri,
            database=config.database,
            collection=config.collection,
        )
        logger.info("Initialized MongoDB history repository")

    return _repository_instance


def reset_repository() -> None:
    """Reset the repository singleton."""
    global _repository_instance

    if _repository_instance is not None:
        from .mongo_history_repository import MongoHistoryRepository
        if isinstance(_repository_instance, MongoHistoryRepository):
            MongoHistoryRepository.reset_connection()

    _repository_instance = None
    logger.info("Repository singleton reset")
