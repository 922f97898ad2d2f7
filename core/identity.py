"""
Identity provider adapter
Base class for authentication backends and the error-code message table
"""

import logging
from typing import Callable, List, Optional

from data.models import Identity

logger = logging.getLogger(__name__)

AUTH_ERROR_MESSAGES = {
    'auth/invalid-email': 'Invalid email address',
    'auth/user-disabled': 'This account has been disabled',
    'auth/user-not-found': 'No account found with this email',
    'auth/wrong-password': 'Incorrect password',
    'auth/email-already-in-use': 'Email already in use',
    'auth/weak-password': 'Password is too weak',
    'auth/network-request-failed': 'Network error. Please check your connection',
    'auth/too-many-requests': 'Too many attempts. Please try again later',
    'auth/invalid-credential': 'Invalid login credentials',
    'auth/account-exists-with-different-credential': 'An account already exists with the same email address'
}

DEFAULT_AUTH_ERROR = 'Authentication failed. Please try again'

POPUP_CLOSED = 'auth/popup-closed-by-user'


class AuthProviderError(Exception):
    """Provider-side failure carrying an auth/... error code"""

    def __init__(self, code: str, message: Optional[str] = None):
        self.code = code
        super().__init__(message or code)


def auth_error_message(error) -> str:
    """Translate an AuthProviderError (or bare code) into a user-facing message"""
    code = getattr(error, 'code', error)
    return AUTH_ERROR_MESSAGES.get(code, DEFAULT_AUTH_ERROR)


class IdentityProvider:
    """
    Base identity provider

    Subclasses implement the async account operations and call
    _set_current_user() whenever sign-in state changes. New subscribers get the
    current state replayed exactly once.
    """

    def __init__(self):
        self._current_user: Optional[Identity] = None
        self._listeners: List[Callable[[Optional[Identity]], None]] = []

    @property
    def current_user(self) -> Optional[Identity]:
        return self._current_user

    def on_auth_state_changed(self, callback: Callable[[Optional[Identity]], None]) -> Callable[[], None]:
        """
        Subscribe to sign-in state changes

        Returns:
            Function that cancels the subscription
        """
        self._listeners.append(callback)

        def unsubscribe():
            if callback in self._listeners:
                self._listeners.remove(callback)

        callback(self._current_user)
        return unsubscribe

    def _set_current_user(self, user: Optional[Identity]):
        self._current_user = user
        logger.info("Auth state changed: %s", user.email if user else 'signed out')
        for callback in list(self._listeners):
            callback(user)

    async def sign_in_with_password(self, email: str, password: str) -> Identity:
        raise NotImplementedError

    async def sign_up_with_password(self, email: str, password: str) -> Identity:
        raise NotImplementedError

    async def sign_in_with_popup(self, provider_kind: str) -> Identity:
        raise NotImplementedError

    async def send_password_reset_email(self, email: str):
        raise NotImplementedError

    async def sign_out(self):
        raise NotImplementedError
