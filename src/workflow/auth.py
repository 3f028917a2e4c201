"""
Auth provider interface and the Supabase implementation.

The workflow only needs four things from an identity provider: a one-shot
"who is signed in" lookup, change notifications, OAuth sign-in with a
selectable provider, and sign-out.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Callable, Optional

from supabase import Client, create_client

from src.common.config import Config
from src.common.types import Identity

logger = logging.getLogger(__name__)

IdentityListener = Callable[[Optional[Identity]], None]
Unsubscribe = Callable[[], None]


class AuthProvider(ABC):
    """Abstract identity provider."""

    @abstractmethod
    def get_user(self) -> Optional[Identity]:
        """Return the currently signed-in identity, if any."""
        pass

    @abstractmethod
    def on_auth_state_change(self, listener: IdentityListener) -> Unsubscribe:
        """
        Register a listener for identity changes.

        The listener may be invoked from any thread.

        Returns:
            A callable that removes the listener
        """
        pass

    @abstractmethod
    def sign_in_with_oauth(self, provider: str, redirect_to: Optional[str] = None) -> str:
        """Start an OAuth flow and return the authorization URL."""
        pass

    @abstractmethod
    def sign_out(self) -> None:
        pass


def _identity_from_user(user: Any) -> Optional[Identity]:
    if user is None:
        return None
    return Identity(user_id=str(user.id), email=getattr(user, "email", None))


class SupabaseAuthProvider(AuthProvider):
    """Supabase Auth (GoTrue) backed provider."""

    def __init__(self, client: Optional[Client] = None):
        self._client = client

    @classmethod
    def from_config(cls) -> "SupabaseAuthProvider":
        if not Config.SUPABASE_URL or not Config.SUPABASE_ANON_KEY:
            raise ValueError("SUPABASE_URL and SUPABASE_ANON_KEY are required for sign-in")
        return cls(create_client(Config.SUPABASE_URL, Config.SUPABASE_ANON_KEY))

    @property
    def client(self) -> Client:
        if self._client is None:
            self._client = create_client(Config.SUPABASE_URL, Config.SUPABASE_ANON_KEY)
        return self._client

    def get_user(self) -> Optional[Identity]:
        response = self.client.auth.get_user()
        return _identity_from_user(response.user if response else None)

    def on_auth_state_change(self, listener: IdentityListener) -> Unsubscribe:
        def _callback(event, session):
            logger.debug(f"Auth state change: {event}")
            listener(_identity_from_user(session.user if session else None))

        subscription = self.client.auth.on_auth_state_change(_callback)
        return subscription.unsubscribe

    def sign_in_with_oauth(self, provider: str, redirect_to: Optional[str] = None) -> str:
        credentials = {"provider": provider}
        if redirect_to:
            credentials["options"] = {"redirect_to": redirect_to}
        response = self.client.auth.sign_in_with_oauth(credentials)
        return response.url

    def sign_out(self) -> None:
        self.client.auth.sign_out()
