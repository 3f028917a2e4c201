"""
State held by the generation workflow for each artifact, plus the
user-facing notices (toast messages) it emits.
"""

from dataclasses import dataclass
from enum import Enum

from src.common.types import ArtifactKind


class ArtifactStatus(str, Enum):
    """idle -> generating -> ready | failed; editing is a flag on ready."""
    IDLE = "idle"
    GENERATING = "generating"
    READY = "ready"
    FAILED = "failed"


@dataclass
class ArtifactState:
    kind: ArtifactKind
    status: ArtifactStatus = ArtifactStatus.IDLE
    text: str = ""
    error: str = ""
    editing: bool = False
    # Bumped on every dispatch; a response is applied only if its token is current
    request_token: int = 0

    @property
    def is_generating(self) -> bool:
        return self.status is ArtifactStatus.GENERATING

    @property
    def has_result(self) -> bool:
        return bool(self.text)


class NoticeLevel(str, Enum):
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class Notice:
    level: NoticeLevel
    message: str
