"""
History Store Adapter.

CRUD facade over generation history, scoped by the signed-in identity:

- No identity: an in-process list capped at ``local_limit`` entries,
  newest first; the oldest entries are evicted by insertion order.
- Identity present: the MongoDB history collection, filtered by
  ``owner_id`` and ordered by ``created_at`` descending.

Remote failures are logged and reported through the return value
(``None`` / ``False``); nothing is retried and nothing is raised.
Storage field names are confined to ``to_document`` / ``from_document``.
"""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pymongo import DESCENDING

from src.common.config import Config
from src.common.error_handling import HistoryStoreError, safe_execute_async
from src.common.repositories import HistoryRepositoryInterface
from src.common.types import ArtifactKind, HistoryEntry, Session

logger = logging.getLogger(__name__)


def to_document(entry: HistoryEntry, owner_id: str) -> Dict[str, Any]:
    """Canonical entry -> MongoDB document."""
    return {
        "owner_id": owner_id,
        "type": entry.kind.value,
        "created_at": entry.created_at,
        "resume": entry.resume_text,
        "job_description": entry.job_description_text,
        "output": entry.output_text,
    }


def from_document(document: Dict[str, Any]) -> HistoryEntry:
    """
    MongoDB document -> canonical entry.

    Raises:
        HistoryStoreError: If the document has an unknown type
    """
    try:
        kind = ArtifactKind(document.get("type"))
    except ValueError as e:
        raise HistoryStoreError("Unknown history entry type", detail=str(document.get("type"))) from e

    created_at = document.get("created_at")
    if isinstance(created_at, str):
        created_at = datetime.fromisoformat(created_at)
    if not isinstance(created_at, datetime):
        created_at = datetime.now(timezone.utc)
    elif created_at.tzinfo is None:
        # PyMongo returns naive UTC datetimes by default
        created_at = created_at.replace(tzinfo=timezone.utc)

    return HistoryEntry(
        id=str(document.get("_id", "")),
        kind=kind,
        created_at=created_at,
        resume_text=document.get("resume") or "",
        job_description_text=document.get("job_description") or "",
        output_text=document.get("output") or "",
        owner_id=document.get("owner_id"),
    )


class HistoryStore:
    """
    The only writer to the history store.

    Args:
        repository: Remote repository, or None when no remote store is
            configured (remote operations then fail and are logged)
        local_limit: Maximum number of entries kept for anonymous sessions
    """

    def __init__(
        self,
        repository: Optional[HistoryRepositoryInterface] = None,
        local_limit: Optional[int] = None,
    ):
        self._repository = repository
        self.local_limit = local_limit if local_limit is not None else Config.HISTORY_LOCAL_LIMIT
        self._local: List[HistoryEntry] = []

    def _require_repository(self) -> HistoryRepositoryInterface:
        if self._repository is None:
            raise HistoryStoreError("History store is not configured", detail="MONGODB_URI is not set")
        return self._repository

    async def list(self, scope: Session) -> Optional[List[HistoryEntry]]:
        """
        Entries for a scope, newest first.

        Returns:
            The entries, or None if the remote read failed
        """
        if not scope.is_authenticated:
            return list(self._local)

        owner_id = scope.owner_id
        return await safe_execute_async(
            self._list_remote,
            owner_id,
            operation_name=f"history list for {owner_id}",
            logger=logger,
            fallback=None,
        )

    async def _list_remote(self, owner_id: str) -> List[HistoryEntry]:
        repository = self._require_repository()
        documents = await asyncio.to_thread(
            repository.find,
            {"owner_id": owner_id},
            sort=[("created_at", DESCENDING)],
        )
        return [from_document(doc) for doc in documents]

    async def append(self, entry: HistoryEntry, scope: Session) -> Optional[HistoryEntry]:
        """
        Persist one entry.

        Returns:
            The stored entry (remote entries carry the store's id and the
            owner), or None if the remote insert failed
        """
        if not scope.is_authenticated:
            self._local.insert(0, entry)
            del self._local[self.local_limit:]
            return entry

        owner_id = scope.owner_id
        return await safe_execute_async(
            self._append_remote,
            entry,
            owner_id,
            operation_name=f"history append for {owner_id}",
            logger=logger,
            fallback=None,
        )

    async def _append_remote(self, entry: HistoryEntry, owner_id: str) -> HistoryEntry:
        repository = self._require_repository()
        result = await asyncio.to_thread(repository.insert_one, to_document(entry, owner_id))
        return HistoryEntry(
            id=result.upserted_id or entry.id,
            kind=entry.kind,
            created_at=entry.created_at,
            resume_text=entry.resume_text,
            job_description_text=entry.job_description_text,
            output_text=entry.output_text,
            owner_id=owner_id,
        )

    async def clear_all(self, scope: Session) -> bool:
        """
        Delete every entry for a scope.

        Returns:
            True on success, False if the remote delete failed
        """
        if not scope.is_authenticated:
            self._local.clear()
            return True

        owner_id = scope.owner_id
        return await safe_execute_async(
            self._clear_remote,
            owner_id,
            operation_name=f"history clear for {owner_id}",
            logger=logger,
            fallback=False,
        )

    async def _clear_remote(self, owner_id: str) -> bool:
        repository = self._require_repository()
        result = await asyncio.to_thread(repository.delete_many, {"owner_id": owner_id})
        logger.info(f"Cleared {result.modified_count} history entries for {owner_id}")
        return True

    def discard_local(self) -> None:
        """Drop anonymous history (session end). Remote history is untouched."""
        self._local.clear()
