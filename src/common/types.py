"""
Canonical Types for Resume Studio

This module defines the data structures shared by the generation gateway,
the history store adapter and the generation workflow. Storage-specific
field names never appear here; the history store adapter normalizes them
at the persistence boundary.
"""

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Optional


class ArtifactKind(str, Enum):
    """The two generated documents."""
    RESUME = "resume"
    COVER = "cover"

    @property
    def label(self) -> str:
        """Human-readable name used in notices and error messages."""
        return "resume" if self is ArtifactKind.RESUME else "cover letter"


@dataclass(frozen=True)
class GenerationRequest:
    """Inputs for one generation call. Both fields must be non-empty to dispatch."""
    resume_text: str
    job_description_text: str

    @property
    def is_complete(self) -> bool:
        return bool(self.resume_text) and bool(self.job_description_text)

    def to_payload(self) -> dict:
        """Wire shape expected by the generation endpoints."""
        return {"resume": self.resume_text, "jobDescription": self.job_description_text}


@dataclass
class GenerationResult:
    """Generated text for one artifact. Editable in place, not versioned."""
    kind: ArtifactKind
    text: str


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _new_entry_id() -> str:
    return uuid.uuid4().hex


@dataclass(frozen=True)
class HistoryEntry:
    """
    One successful generation.

    Entries are never mutated and never deleted individually; only the
    whole scope is cleared. Lists of entries are ordered newest-first.
    """
    kind: ArtifactKind
    resume_text: str
    job_description_text: str
    output_text: str
    id: str = field(default_factory=_new_entry_id)
    created_at: datetime = field(default_factory=_utcnow)
    owner_id: Optional[str] = None


@dataclass(frozen=True)
class Identity:
    """A signed-in user as reported by the auth provider."""
    user_id: str
    email: Optional[str] = None


@dataclass(frozen=True)
class Session:
    """Current session. No identity means local, ephemeral history."""
    identity: Optional[Identity] = None

    @property
    def is_authenticated(self) -> bool:
        return self.identity is not None

    @property
    def owner_id(self) -> Optional[str]:
        return self.identity.user_id if self.identity else None
