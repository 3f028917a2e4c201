"""
Generation Workflow.

The state machine behind the dashboard. It owns the inputs, the per-artifact
state (status, result text, error, edit flag), the active tab and the
in-memory history list, and is the only thing that mutates them.

Per artifact, independently:

    idle --submit--> generating --success--> ready (<-> editing)
                                `--failure--> failed
    ready | failed --submit--> generating

Rules:
- A submit with an empty input, while that artifact is generating, or
  while an upload is running, is a no-op and issues no request.
- Both artifacts may be generating at the same time.
- Switching tabs turns both edit flags off.
- History is appended by a tracked background task after the UI has
  already moved to ready; a persistence failure is only logged.
- Each dispatch takes a request token. A response whose token is no longer
  current (the workflow was closed, or a history entry was loaded over it)
  is discarded instead of overwriting newer state.
"""

import asyncio
import inspect
from pathlib import Path
from typing import Any, Awaitable, Callable, Dict, List, Optional, Set, Union

from src.common.error_handling import ExportError, ExtractionError, GatewayError
from src.common.logger import get_logger
from src.common.types import ArtifactKind, GenerationRequest, GenerationResult, HistoryEntry, Session
from src.workflow.export import EXPORT_FAILED_MESSAGE, ExportAdapter
from src.workflow.extraction_client import UNREADABLE_MESSAGE, ExtractionClient
from src.workflow.gateway_client import GatewayClient
from src.workflow.history_store import HistoryStore
from src.workflow.state import ArtifactState, ArtifactStatus, Notice, NoticeLevel

logger = get_logger(__name__)

Clipboard = Callable[[str], Union[None, Awaitable[None]]]
NoticeListener = Callable[[Notice], None]

GENERIC_FAILURE_MESSAGE = "Something went wrong"
COPY_FAILED_MESSAGE = "Failed to copy"
CLEAR_FAILED_MESSAGE = "Failed to clear history"

_GENERATED_MESSAGES = {
    ArtifactKind.RESUME: "Generated optimized resume",
    ArtifactKind.COVER: "Generated tailored cover letter",
}


class GenerationWorkflow:
    """
    One instance per active page session.

    Collaborators are injected so each can be replaced independently;
    defaults talk to the configured services.
    """

    def __init__(
        self,
        gateway: Optional[GatewayClient] = None,
        history_store: Optional[HistoryStore] = None,
        extraction: Optional[ExtractionClient] = None,
        exporter: Optional[ExportAdapter] = None,
        clipboard: Optional[Clipboard] = None,
        on_notice: Optional[NoticeListener] = None,
    ):
        self._gateway = gateway or GatewayClient()
        self._history_store = history_store or HistoryStore()
        self._extraction = extraction or ExtractionClient()
        self._exporter = exporter or ExportAdapter()
        self._clipboard = clipboard
        self._on_notice = on_notice

        self.resume_text = ""
        self.job_description_text = ""
        self.artifacts: Dict[ArtifactKind, ArtifactState] = {
            kind: ArtifactState(kind=kind) for kind in ArtifactKind
        }
        self.active_tab = ArtifactKind.RESUME
        self.error = ""

        self.uploading = False
        self.uploaded_file_name = ""
        self.downloading_pdf = False

        self.session = Session()
        self.history: List[HistoryEntry] = []
        self._history_scope: Optional[Session] = None
        self._reload_token = 0

        self.notices: List[Notice] = []
        self._background: Set[asyncio.Task] = set()
        self._closed = False

    # ------------------------------------------------------------------
    # Inputs and selection
    # ------------------------------------------------------------------

    def set_inputs(self, resume: Optional[str] = None, job_description: Optional[str] = None) -> None:
        if resume is not None:
            self.resume_text = resume
        if job_description is not None:
            self.job_description_text = job_description

    def current_request(self) -> GenerationRequest:
        return GenerationRequest(
            resume_text=self.resume_text,
            job_description_text=self.job_description_text,
        )

    def state(self, kind: ArtifactKind) -> ArtifactState:
        return self.artifacts[ArtifactKind(kind)]

    def status(self, kind: ArtifactKind) -> ArtifactStatus:
        return self.state(kind).status

    def result(self, kind: ArtifactKind) -> str:
        return self.state(kind).text

    @property
    def active_text(self) -> str:
        return self.state(self.active_tab).text

    def set_active_tab(self, kind: ArtifactKind) -> None:
        """Select a tab. Always turns both edit flags off."""
        self.active_tab = ArtifactKind(kind)
        for state in self.artifacts.values():
            state.editing = False

    # ------------------------------------------------------------------
    # Generation
    # ------------------------------------------------------------------

    def can_submit(self, kind: ArtifactKind) -> bool:
        """Whether the generate action for ``kind`` is enabled."""
        return (
            not self._closed
            and self.current_request().is_complete
            and not self.state(kind).is_generating
            and not self.uploading
        )

    async def submit(self, kind: ArtifactKind) -> bool:
        """
        Generate one artifact from the current inputs.

        Returns:
            True if a result was applied; False for a disabled submit, a
            failure (recorded on the artifact), or a superseded response.
        """
        kind = ArtifactKind(kind)
        if not self.can_submit(kind):
            logger.bind(artifact=kind.value).debug("Submit ignored: action disabled")
            return False

        state = self.state(kind)
        state.editing = False
        state.error = ""
        state.text = ""
        state.status = ArtifactStatus.GENERATING
        state.request_token += 1
        token = state.request_token
        self.error = ""

        log = logger.bind(artifact=kind.value, request_token=token)
        request = self.current_request()
        log.info("Dispatching generation request")

        try:
            text = await self._gateway.generate(kind, request)
        except GatewayError as e:
            return self._apply_failure(kind, token, e.message)
        except Exception as e:
            log.exception(f"Unexpected generation failure: {e}")
            return self._apply_failure(kind, token, GENERIC_FAILURE_MESSAGE)

        if state.request_token != token:
            log.warning("Discarding superseded generation response")
            return False

        result = GenerationResult(kind=kind, text=text)
        state.text = result.text
        state.status = ArtifactStatus.READY
        self.set_active_tab(kind)
        self._notify(NoticeLevel.SUCCESS, _GENERATED_MESSAGES[kind])
        log.info(f"Generation succeeded ({len(text)} chars)")

        self._spawn(self._persist_history(self._history_entry(request, result), self.session))
        return True

    def _history_entry(self, request: GenerationRequest, result: GenerationResult) -> HistoryEntry:
        return HistoryEntry(
            kind=result.kind,
            resume_text=request.resume_text,
            job_description_text=request.job_description_text,
            output_text=result.text,
            owner_id=self.session.owner_id,
        )

    def _apply_failure(self, kind: ArtifactKind, token: int, message: str) -> bool:
        state = self.state(kind)
        log = logger.bind(artifact=kind.value, request_token=token)
        if state.request_token != token:
            log.warning(f"Discarding superseded generation failure: {message}")
            return False

        state.status = ArtifactStatus.FAILED
        state.error = message
        self.error = message
        self._notify(NoticeLevel.ERROR, message)
        log.warning(f"Generation failed: {message}")
        return False

    # ------------------------------------------------------------------
    # Editing
    # ------------------------------------------------------------------

    def toggle_edit(self, kind: Optional[ArtifactKind] = None) -> bool:
        """
        Flip edit mode for an artifact (default: the active tab).

        Returns:
            The new edit flag; always False when there is no result to edit
        """
        state = self.state(kind if kind is not None else self.active_tab)
        if not state.has_result:
            state.editing = False
            return False
        state.editing = not state.editing
        return state.editing

    def update_result(self, kind: ArtifactKind, text: str) -> bool:
        """Overwrite a result in place. Only allowed while editing."""
        state = self.state(kind)
        if not state.editing:
            return False
        state.text = text
        return True

    # ------------------------------------------------------------------
    # History
    # ------------------------------------------------------------------

    async def on_session_change(self, session: Session) -> None:
        """SessionManager listener: switch scope and reload history."""
        self.session = session
        await self.reload_history()

    async def reload_history(self) -> bool:
        """
        Replace the in-memory history with the store's list for the
        current scope.

        Returns:
            False if the load failed or was superseded by a newer reload
        """
        self._reload_token += 1
        token = self._reload_token
        scope = self.session

        entries = await self._history_store.list(scope)
        if token != self._reload_token:
            logger.debug("Discarding superseded history reload")
            return False

        if entries is None:
            if self._history_scope != scope:
                # Never show another scope's entries
                self.history = []
                self._history_scope = scope
            logger.warning("History reload failed; keeping the current list")
            return False

        self.history = list(entries)
        self._history_scope = scope
        return True

    async def _persist_history(self, entry: HistoryEntry, scope: Session) -> None:
        stored = await self._history_store.append(entry, scope)
        if stored is None:
            logger.bind(artifact=entry.kind.value).warning("History entry was not saved")
            return
        if scope != self.session:
            return

        entries = [stored] + [e for e in self.history if e.id != stored.id]
        entries.sort(key=lambda e: e.created_at, reverse=True)
        if not scope.is_authenticated:
            del entries[self._history_store.local_limit:]
        self.history = entries
        self._history_scope = scope

    def load_from_history(self, entry: HistoryEntry) -> None:
        """Restore an entry's inputs and output and select its tab."""
        self.resume_text = entry.resume_text or ""
        self.job_description_text = entry.job_description_text or ""

        state = self.state(entry.kind)
        state.request_token += 1
        state.text = entry.output_text or ""
        state.error = ""
        state.status = ArtifactStatus.READY if state.text else ArtifactStatus.IDLE
        self.set_active_tab(entry.kind)

        self._notify(NoticeLevel.SUCCESS, f"Loaded {entry.kind.label} from history")

    async def clear_history(self) -> bool:
        """Delete every entry in the current scope."""
        ok = await self._history_store.clear_all(self.session)
        if not ok:
            self._notify(NoticeLevel.ERROR, CLEAR_FAILED_MESSAGE)
            return False

        # Invalidate in-flight reloads so cleared entries cannot come back
        self._reload_token += 1
        self.history = []
        self._history_scope = self.session
        self._notify(NoticeLevel.SUCCESS, "Cleared history")
        return True

    # ------------------------------------------------------------------
    # Upload, clipboard, export
    # ------------------------------------------------------------------

    async def upload_resume(self, filename: str, content: bytes, content_type: Optional[str] = None) -> bool:
        """
        Replace the resume text with the contents of an uploaded file.

        On any failure the previous resume text is kept.
        """
        if self.uploading:
            return False

        self.error = ""
        self.uploading = True
        self.uploaded_file_name = filename
        try:
            text = await self._extraction.extract_text(filename, content, content_type)
        except ExtractionError as e:
            logger.warning(f"Upload of {filename} failed: {e.detail or e.message}")
            self.error = e.message
            self._notify(NoticeLevel.ERROR, e.message)
            return False
        except Exception as e:
            logger.exception(f"Unexpected upload failure for {filename}: {e}")
            self.error = UNREADABLE_MESSAGE
            self._notify(NoticeLevel.ERROR, UNREADABLE_MESSAGE)
            return False
        finally:
            self.uploading = False

        self.resume_text = text
        self._notify(NoticeLevel.SUCCESS, "Loaded resume from file")
        return True

    async def copy_active(self) -> bool:
        """Copy the active artifact's text to the clipboard."""
        text = self.active_text
        if not text:
            return False

        try:
            if self._clipboard is None:
                raise RuntimeError("No clipboard available")
            outcome = self._clipboard(text)
            if inspect.isawaitable(outcome):
                await outcome
        except Exception as e:
            logger.warning(f"Copy to clipboard failed: {e}")
            self._notify(NoticeLevel.ERROR, COPY_FAILED_MESSAGE)
            return False

        self._notify(NoticeLevel.SUCCESS, f"Copied {self.active_tab.label} to clipboard")
        return True

    async def download_pdf(self, directory: Union[str, Path]) -> Optional[Path]:
        """Export the active artifact to a PDF file in ``directory``."""
        kind = self.active_tab
        text = self.active_text
        if not text:
            return None

        self.downloading_pdf = True
        self.error = ""
        try:
            path = await asyncio.to_thread(self._exporter.export, kind, text, directory)
        except ExportError as e:
            logger.warning(f"PDF export failed: {e.detail or e.message}")
            self.error = EXPORT_FAILED_MESSAGE
            self._notify(NoticeLevel.ERROR, EXPORT_FAILED_MESSAGE)
            return None
        except Exception as e:
            logger.exception(f"Unexpected PDF export failure: {e}")
            self.error = EXPORT_FAILED_MESSAGE
            self._notify(NoticeLevel.ERROR, EXPORT_FAILED_MESSAGE)
            return None
        finally:
            self.downloading_pdf = False

        self._notify(NoticeLevel.SUCCESS, f"Downloaded {kind.label} PDF")
        return path

    # ------------------------------------------------------------------
    # Background tasks and lifecycle
    # ------------------------------------------------------------------

    def _spawn(self, coro: Awaitable[Any]) -> asyncio.Task:
        task = asyncio.ensure_future(coro)
        self._background.add(task)
        task.add_done_callback(self._on_background_done)
        return task

    def _on_background_done(self, task: asyncio.Task) -> None:
        self._background.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error(f"Background task failed: {exc}", exc_info=exc)

    async def drain(self) -> None:
        """Wait for pending background work (history writes)."""
        while self._background:
            await asyncio.gather(*list(self._background), return_exceptions=True)

    async def close(self) -> None:
        """
        End the page session: supersede in-flight requests, finish pending
        writes and discard local-only history.
        """
        self._closed = True
        for state in self.artifacts.values():
            state.request_token += 1
        self._reload_token += 1
        await self.drain()
        self._history_store.discard_local()

    def _notify(self, level: NoticeLevel, message: str) -> None:
        notice = Notice(level=level, message=message)
        self.notices.append(notice)
        if self._on_notice is not None:
            try:
                self._on_notice(notice)
            except Exception as e:
                logger.warning(f"Notice listener failed: {e}")
