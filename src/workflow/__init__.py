"""
Client-side generation workflow: the state machine that ties inputs,
generation requests, results, edit mode, uploads, export and history
together, plus the session and history adapters it depends on.
"""

from src.workflow.history_store import HistoryStore
from src.workflow.session_manager import SessionManager
from src.workflow.state import ArtifactState, ArtifactStatus, Notice, NoticeLevel
from src.workflow.workflow import GenerationWorkflow

__all__ = [
    "GenerationWorkflow",
    "HistoryStore",
    "SessionManager",
    "ArtifactState",
    "ArtifactStatus",
    "Notice",
    "NoticeLevel",
]
