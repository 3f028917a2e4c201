"""
Session Manager.

Tracks the current identity: a one-shot lookup at start, then a live
subscription to identity-change notifications. Every change replaces the
session and hands it to ``on_session_change`` (the workflow's history
reload). ``stop()`` unsubscribes so no notification outlives the session.
"""

import asyncio
import logging
from typing import Awaitable, Callable, Optional, Set

from src.common.config import Config
from src.common.error_handling import safe_execute
from src.common.types import Identity, Session
from src.workflow.auth import AuthProvider, Unsubscribe

logger = logging.getLogger(__name__)

SessionListener = Callable[[Session], Awaitable[None]]


class SessionManager:
    """Owns the current Session and its lifecycle."""

    def __init__(
        self,
        auth: AuthProvider,
        on_session_change: SessionListener,
        site_url: Optional[str] = None,
        oauth_provider: Optional[str] = None,
    ):
        self._auth = auth
        self._on_session_change = on_session_change
        self.site_url = site_url if site_url is not None else Config.SITE_URL
        self.oauth_provider = oauth_provider or Config.OAUTH_PROVIDER

        self._session = Session()
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._unsubscribe: Optional[Unsubscribe] = None
        self._pending: Set[asyncio.Task] = set()

    @property
    def session(self) -> Session:
        return self._session

    @property
    def is_started(self) -> bool:
        return self._unsubscribe is not None

    async def start(self) -> Session:
        """Resolve the initial identity, load its history, then subscribe."""
        self._loop = asyncio.get_running_loop()

        try:
            identity = await asyncio.to_thread(self._auth.get_user)
        except Exception as e:
            logger.warning(f"Initial identity lookup failed, continuing signed out: {e}")
            identity = None

        await self._apply(identity)
        self._unsubscribe = self._auth.on_auth_state_change(self._on_identity_change)
        logger.info(f"Session started ({'signed in' if identity else 'anonymous'})")
        return self._session

    def _on_identity_change(self, identity: Optional[Identity]) -> None:
        # Auth clients may notify from their own thread
        if self._loop is None or self._loop.is_closed():
            return
        self._loop.call_soon_threadsafe(self._schedule_apply, identity)

    def _schedule_apply(self, identity: Optional[Identity]) -> None:
        if self._unsubscribe is None:
            return
        task = asyncio.ensure_future(self._apply(identity))
        self._pending.add(task)
        task.add_done_callback(self._on_apply_done)

    def _on_apply_done(self, task: asyncio.Task) -> None:
        self._pending.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error(f"Session change handling failed: {exc}", exc_info=exc)

    async def _apply(self, identity: Optional[Identity]) -> None:
        self._session = Session(identity=identity)
        await self._on_session_change(self._session)

    async def sign_in(self, provider: Optional[str] = None) -> str:
        """
        Start OAuth sign-in.

        Returns:
            The provider's authorization URL; the identity change arrives
            later through the subscription.
        """
        return await asyncio.to_thread(
            self._auth.sign_in_with_oauth,
            provider or self.oauth_provider,
            self.site_url or None,
        )

    async def sign_out(self) -> None:
        await asyncio.to_thread(self._auth.sign_out)

    async def wait_for_pending(self) -> None:
        """Wait until queued identity changes have been applied."""
        # Let call_soon_threadsafe callbacks run first
        await asyncio.sleep(0)
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    async def stop(self) -> None:
        """Unsubscribe and drop queued changes. Safe to call more than once."""
        if self._unsubscribe is not None:
            unsubscribe, self._unsubscribe = self._unsubscribe, None
            safe_execute(unsubscribe, operation_name="auth unsubscribe", logger=logger)

        for task in list(self._pending):
            task.cancel()
        if self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)
        self._pending.clear()
