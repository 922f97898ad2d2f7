"""
Backend API client
Payment verification and service health checks
"""

import asyncio
import logging
from typing import Any, Dict, Optional

import requests

from config.settings import BACKEND_CONFIG

logger = logging.getLogger(__name__)


class BackendError(Exception):
    """Backend unreachable or returned something we cannot use"""


class BackendClient:
    """Client for the storefront backend (verification, health, Paystack probe)"""

    def __init__(self, base_url: Optional[str] = None, timeout: Optional[float] = None,
                 session: Optional[requests.Session] = None):
        self.base_url = (base_url or BACKEND_CONFIG['base_url']).rstrip('/')
        self.timeout = timeout or BACKEND_CONFIG['timeout']
        self.session = session or requests.Session()

    def _request(self, method: str, endpoint: str, body: Optional[dict] = None) -> Dict[str, Any]:
        url = f"{self.base_url}/{endpoint.lstrip('/')}"
        try:
            response = self.session.request(
                method,
                url,
                json=body,
                headers={'Content-Type': 'application/json'},
                timeout=self.timeout
            )
            data = response.json()
        except requests.RequestException as e:
            raise BackendError(f"{method} {endpoint} failed: {e}") from e
        except ValueError as e:
            raise BackendError(f"{method} {endpoint} returned non-JSON") from e

        if not isinstance(data, dict):
            raise BackendError(f"{method} {endpoint} returned unexpected payload")

        return data

    async def verify_payment(self, reference: str) -> Dict[str, Any]:
        """
        Ask the backend to verify a payment reference with the gateway

        Returns:
            Backend payload: {'success': bool, 'data': ...} or {'success': False, 'message': ...}
        """
        data = await asyncio.to_thread(self._request, 'POST', '/verify-payment', {'reference': reference})
        logger.info("Payment %s verification success=%s", reference, data.get('success'))
        return data

    async def health(self) -> Dict[str, Any]:
        return await asyncio.to_thread(self._request, 'GET', '/health')

    async def test_paystack(self) -> bool:
        data = await asyncio.to_thread(self._request, 'GET', '/test-paystack')
        return bool(data.get('success'))
