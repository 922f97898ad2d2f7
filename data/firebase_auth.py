"""
Firebase identity provider
Email/password accounts through the Identity Toolkit REST endpoints
"""

import asyncio
import logging
from typing import Any, Dict, Optional

import requests

from config.settings import AUTH_CONFIG
from core.identity import AuthProviderError, IdentityProvider
from data.models import Identity

logger = logging.getLogger(__name__)

# REST error strings -> client SDK style codes
REST_ERROR_CODES = {
    'INVALID_EMAIL': 'auth/invalid-email',
    'MISSING_EMAIL': 'auth/invalid-email',
    'USER_DISABLED': 'auth/user-disabled',
    'EMAIL_NOT_FOUND': 'auth/user-not-found',
    'INVALID_PASSWORD': 'auth/wrong-password',
    'MISSING_PASSWORD': 'auth/wrong-password',
    'EMAIL_EXISTS': 'auth/email-already-in-use',
    'WEAK_PASSWORD': 'auth/weak-password',
    'TOO_MANY_ATTEMPTS_TRY_LATER': 'auth/too-many-requests',
    'INVALID_LOGIN_CREDENTIALS': 'auth/invalid-credential',
    'INVALID_IDP_RESPONSE': 'auth/invalid-credential',
    'FEDERATED_USER_ID_ALREADY_LINKED': 'auth/account-exists-with-different-credential'
}


def rest_error_code(message: str) -> str:
    # Messages look like "WEAK_PASSWORD : Password should be at least 6 characters"
    key = (message or '').split(':')[0].strip()
    return REST_ERROR_CODES.get(key, f"auth/{key.lower().replace('_', '-')}" if key else 'auth/internal-error')


class FirebaseAuthProvider(IdentityProvider):
    """Identity provider backed by Firebase Authentication"""

    def __init__(self, api_key: str, base_url: Optional[str] = None,
                 timeout: Optional[float] = None, session: Optional[requests.Session] = None):
        super().__init__()
        self.api_key = api_key
        self.base_url = (base_url or AUTH_CONFIG['identity_toolkit_url']).rstrip('/')
        self.timeout = timeout or AUTH_CONFIG['timeout']
        self.session = session or requests.Session()
        self.id_token: Optional[str] = None

    def _post(self, endpoint: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        try:
            response = self.session.post(
                f"{self.base_url}/accounts:{endpoint}",
                params={'key': self.api_key},
                json=payload,
                timeout=self.timeout
            )
        except requests.RequestException as e:
            raise AuthProviderError('auth/network-request-failed', str(e)) from e

        try:
            data = response.json()
        except ValueError:
            data = {}

        if not response.ok:
            message = (data.get('error') or {}).get('message', '') if isinstance(data, dict) else ''
            raise AuthProviderError(rest_error_code(message), message or f"HTTP {response.status_code}")

        return data

    def _sign_in_from(self, data: Dict[str, Any]) -> Identity:
        identity = Identity(uid=data['localId'], email=data.get('email', ''),
                            display_name=data.get('displayName') or None)
        self.id_token = data.get('idToken')
        self._set_current_user(identity)
        return identity

    async def sign_in_with_password(self, email: str, password: str) -> Identity:
        data = await asyncio.to_thread(self._post, 'signInWithPassword', {
            'email': email,
            'password': password,
            'returnSecureToken': True
        })
        return self._sign_in_from(data)

    async def sign_up_with_password(self, email: str, password: str) -> Identity:
        data = await asyncio.to_thread(self._post, 'signUp', {
            'email': email,
            'password': password,
            'returnSecureToken': True
        })
        return self._sign_in_from(data)

    async def sign_in_with_popup(self, provider_kind: str) -> Identity:
        raise AuthProviderError('auth/operation-not-supported-in-this-environment',
                                f"{provider_kind} popup sign-in needs a browser")

    async def send_password_reset_email(self, email: str):
        await asyncio.to_thread(self._post, 'sendOobCode', {
            'requestType': 'PASSWORD_RESET',
            'email': email
        })

    async def sign_out(self):
        self.id_token = None
        self._set_current_user(None)
