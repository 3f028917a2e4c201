"""
Global fixtures for all unit tests.

This conftest provides autouse fixtures that prevent real external service calls:
- MongoDB connection attempts (would cause 5-30s timeout per test)
- Environment variable isolation (prevents credential leakage)

It also provides in-memory fakes for the history repository and the auth
provider so workflow tests never touch MongoDB or Supabase.
"""

import os
from typing import Any, Dict, List, Optional
from unittest.mock import MagicMock, patch

import pytest

# Set test environment BEFORE any imports to prevent Config from loading real values
os.environ.pop("MONGODB_URI", None)
os.environ.pop("SUPABASE_URL", None)
os.environ.pop("SUPABASE_ANON_KEY", None)

from src.common.repositories import HistoryRepositoryInterface, WriteResult, reset_repository
from src.common.repositories.mongo_history_repository import MongoHistoryRepository
from src.common.types import Identity
from src.workflow.auth import AuthProvider


@pytest.fixture(autouse=True)
def mock_mongodb():
    """
    Prevent MongoDB connection attempts in all unit tests.

    MongoClient("") defaults to localhost:27017, causing 5-30s timeout per test.
    """
    with patch("pymongo.MongoClient") as mock_client, \
            patch("src.common.repositories.mongo_history_repository.MongoClient", mock_client):
        mock_instance = MagicMock()
        mock_db = MagicMock()
        mock_collection = MagicMock()

        # Setup chain: client["db"]["collection"]
        mock_instance.__getitem__ = MagicMock(return_value=mock_db)
        mock_db.__getitem__ = MagicMock(return_value=mock_collection)
        mock_collection.find = MagicMock(return_value=[])

        mock_client.return_value = mock_instance
        yield mock_client

    MongoHistoryRepository._client = None
    MongoHistoryRepository._db = None
    MongoHistoryRepository._collection = None
    reset_repository()


@pytest.fixture(autouse=True)
def isolate_environment(monkeypatch):
    """
    Isolate test environment from real credentials and configurations.

    This prevents:
    - Real API keys being used if tests accidentally call the LLM
    - MongoDB and Supabase connections
    """
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test-mock-key")
    monkeypatch.delenv("MONGODB_URI", raising=False)
    monkeypatch.delenv("SUPABASE_URL", raising=False)
    monkeypatch.delenv("SUPABASE_ANON_KEY", raising=False)


class FakeHistoryRepository(HistoryRepositoryInterface):
    """In-memory stand-in for the MongoDB history collection."""

    def __init__(self):
        self.documents: List[Dict[str, Any]] = []
        self.fail = False
        self._next_id = 0

    def _check(self):
        if self.fail:
            raise ConnectionError("connection refused")

    @staticmethod
    def _matches(document: Dict[str, Any], filter: Dict[str, Any]) -> bool:
        return all(document.get(key) == value for key, value in filter.items())

    def find(self, filter, sort=None, limit=0):
        self._check()
        documents = [dict(d) for d in self.documents if self._matches(d, filter)]
        for key, direction in reversed(sort or []):
            documents.sort(key=lambda d: d[key], reverse=direction < 0)
        return documents[:limit] if limit > 0 else documents

    def insert_one(self, document):
        self._check()
        self._next_id += 1
        stored = dict(document, _id=f"doc-{self._next_id}")
        self.documents.append(stored)
        return WriteResult(matched_count=0, modified_count=0, upserted_id=stored["_id"])

    def delete_many(self, filter):
        self._check()
        kept = [d for d in self.documents if not self._matches(d, filter)]
        deleted = len(self.documents) - len(kept)
        self.documents = kept
        return WriteResult(matched_count=deleted, modified_count=deleted)


class FakeAuthProvider(AuthProvider):
    """Auth provider whose identity changes are driven by the test."""

    def __init__(self, identity: Optional[Identity] = None, fail_lookup: bool = False):
        self.identity = identity
        self.fail_lookup = fail_lookup
        self.listeners = []
        self.unsubscribe_calls = 0
        self.oauth_calls = []
        self.signed_out = False

    def get_user(self):
        if self.fail_lookup:
            raise ConnectionError("auth service unavailable")
        return self.identity

    def on_auth_state_change(self, listener):
        self.listeners.append(listener)

        def unsubscribe():
            self.unsubscribe_calls += 1
            if listener in self.listeners:
                self.listeners.remove(listener)

        return unsubscribe

    def sign_in_with_oauth(self, provider, redirect_to=None):
        self.oauth_calls.append((provider, redirect_to))
        return f"https://auth.example.com/authorize?provider={provider}"

    def sign_out(self):
        self.signed_out = True
        self.emit(None)

    def emit(self, identity: Optional[Identity]):
        for listener in list(self.listeners):
            listener(identity)


@pytest.fixture
def fake_repository():
    return FakeHistoryRepository()


@pytest.fixture
def fake_auth():
    return FakeAuthProvider()


@pytest.fixture
def alice():
    return Identity(user_id="user-alice", email="alice@example.com")


@pytest.fixture
def bob():
    return Identity(user_id="user-bob", email="bob@example.com")
