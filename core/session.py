"""
Session Authority - single source of truth for who is signed in
"""

import logging
from typing import Callable, Optional

from core.events import EventChannel
from core.identity import IdentityProvider
from core.notifications import Notifier
from data.models import Identity, Session, is_admin_email

logger = logging.getLogger(__name__)

__all__ = ['SessionAuthority', 'is_admin_email']


class SessionAuthority:
    """
    Maps identity-provider state changes to an immutable Session value

    Subscribers receive session_changed(Session) synchronously and in the
    order they subscribed. The session is never changed from anywhere but
    on_identity_changed().
    """

    def __init__(self, admin_email: Optional[str], notifier: Optional[Notifier] = None):
        self.admin_email = admin_email
        self.notifier = notifier or Notifier()
        self._session = Session()
        self._changed = EventChannel('session_changed')
        self._provider: Optional[IdentityProvider] = None
        self._provider_unsubscribe: Optional[Callable[[], None]] = None

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def session(self) -> Session:
        return self._session

    @property
    def current_user(self) -> Optional[Identity]:
        return self._session.user

    @property
    def is_authenticated(self) -> bool:
        return self._session.is_authenticated

    @property
    def is_admin(self) -> bool:
        return self._session.is_admin

    def subscribe(self, handler: Callable[[Session], None]) -> Callable[[], None]:
        return self._changed.subscribe(handler)

    # ------------------------------------------------------------------
    # Provider wiring
    # ------------------------------------------------------------------

    def attach(self, provider: IdentityProvider):
        """Follow a provider's auth state feed (replaces any earlier provider)"""
        self.detach()
        self._provider = provider
        self._provider_unsubscribe = provider.on_auth_state_changed(self.on_identity_changed)

    def detach(self):
        if self._provider_unsubscribe:
            self._provider_unsubscribe()
        self._provider_unsubscribe = None
        self._provider = None

    def on_identity_changed(self, identity: Optional[Identity]):
        """Replace the session and notify every subscriber exactly once"""
        self._session = Session.for_user(identity, self.admin_email)

        if identity:
            logger.info("User authenticated: %s (admin=%s)", identity.email, self._session.is_admin)
        else:
            logger.info("User signed out")

        self._changed.emit(self._session)

    async def sign_out(self):
        """
        Ask the provider to end the session

        The session itself is cleared only by the provider's follow-up
        on_identity_changed(None) callback.
        """
        if self._provider is None:
            raise RuntimeError("No identity provider attached")
        await self._provider.sign_out()

    # ------------------------------------------------------------------
    # Guards
    # ------------------------------------------------------------------

    def require_auth(self, action_label: str) -> bool:
        if not self._session.is_authenticated:
            self.notifier.login_required(action_label)
            return False
        return True

    def require_admin(self, action_label: str) -> bool:
        if not self._session.is_authenticated:
            self.notifier.login_required(action_label)
            return False

        if not self._session.is_admin:
            self.notifier.admin_denied(action_label)
            return False

        return True
