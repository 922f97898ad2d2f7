"""
Account flows: sign in, sign up, social sign in, password reset, sign out
Provider errors never escape; they become notifications
"""

import logging
import time
from typing import Optional

from config.settings import AUTH_CONFIG
from core.identity import AuthProviderError, IdentityProvider, POPUP_CLOSED, auth_error_message
from core.notifications import Notifier
from core.session import SessionAuthority
from data.remote_store import RemoteDocumentStore, RemoteStoreError

logger = logging.getLogger(__name__)


class AuthService:
    """User-facing wrapper around the identity provider"""

    def __init__(self, provider: IdentityProvider, authority: SessionAuthority,
                 remote_store: RemoteDocumentStore, notifier: Optional[Notifier] = None):
        self.provider = provider
        self.authority = authority
        self.remote_store = remote_store
        self.notifier = notifier or authority.notifier

    async def sign_in(self, email: str, password: str) -> bool:
        try:
            user = await self.provider.sign_in_with_password(email, password)
        except AuthProviderError as e:
            logger.error("Login error: %s", e.code)
            self.notifier.error(auth_error_message(e))
            return False

        logger.info("User logged in: %s", user.email)
        return True

    async def sign_up(self, name: str, email: str, password: str, confirm_password: str) -> bool:
        if password != confirm_password:
            self.notifier.error('Passwords do not match!')
            return False

        if len(password) < AUTH_CONFIG['min_password_length']:
            self.notifier.error(f"Password must be at least {AUTH_CONFIG['min_password_length']} characters!")
            return False

        try:
            user = await self.provider.sign_up_with_password(email, password)
        except AuthProviderError as e:
            logger.error("Signup error: %s", e.code)
            self.notifier.error(auth_error_message(e))
            return False

        try:
            await self.remote_store.set(f"users/{user.uid}", {
                'name': name,
                'email': email,
                'createdAt': int(time.time() * 1000)
            })
        except RemoteStoreError as e:
            # The account exists either way; only the profile record is missing
            logger.error("Could not save profile for %s: %s", user.uid, e)
            self.notifier.warning('⚠️ Account created, but your profile could not be saved')

        logger.info("User created: %s", user.email)
        self.notifier.success('Account created successfully!')
        return True

    async def sign_in_with_google(self) -> bool:
        try:
            user = await self.provider.sign_in_with_popup('google')
        except AuthProviderError as e:
            logger.error("Google login error: %s", e.code)
            if e.code == POPUP_CLOSED:
                self.notifier.info('Google login was cancelled')
            else:
                self.notifier.error(auth_error_message(e))
            return False

        logger.info("Google login successful: %s", user.email)
        return True

    async def send_password_reset(self, email: str) -> bool:
        if not email or '@' not in email:
            self.notifier.error('Please enter a valid email address')
            return False

        try:
            await self.provider.send_password_reset_email(email)
        except AuthProviderError as e:
            logger.error("Password reset error: %s", e.code)
            self.notifier.error(auth_error_message(e))
            return False

        self.notifier.success('Password reset email sent! Check your inbox.')
        return True

    async def sign_out(self) -> bool:
        try:
            await self.authority.sign_out()
        except (AuthProviderError, RuntimeError) as e:
            logger.error("Logout error: %s", e)
            self.notifier.error('Error during logout')
            return False

        self.notifier.info('Successfully logged out!')
        return True
