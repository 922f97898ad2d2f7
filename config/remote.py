"""
Remote configuration loader
Fetches store configuration from the backend and falls back to a fixed safe
configuration whenever the backend cannot be trusted
"""

import logging
from types import MappingProxyType
from typing import Any, Callable, Dict, List, Mapping, Optional

import requests

from config.settings import BACKEND_CONFIG, FALLBACK_CONFIG

logger = logging.getLogger(__name__)


class RemoteConfigLoader:
    """
    Loads configuration from GET /config with bearer-token auth

    Any failure (network error, timeout, non-2xx, malformed payload) results in
    FALLBACK_CONFIG being used. Loading never raises.
    """

    def __init__(self, base_url: Optional[str] = None, api_token: Optional[str] = None,
                 timeout: Optional[float] = None, session: Optional[requests.Session] = None):
        self.base_url = (base_url or BACKEND_CONFIG['base_url']).rstrip('/')
        self.api_token = api_token if api_token is not None else BACKEND_CONFIG['api_token']
        self.timeout = timeout or BACKEND_CONFIG['timeout']
        self.session = session or requests.Session()

        self.config: Optional[Mapping[str, Any]] = None
        self.is_loaded = False
        self.used_fallback = False
        self._ready_callbacks: List[Callable[[Mapping[str, Any]], None]] = []

    def load(self) -> Mapping[str, Any]:
        """
        Load configuration, substituting the fallback on any failure

        Returns:
            Read-only configuration mapping
        """
        try:
            config = self.fetch_from_backend()
            self.used_fallback = False
            logger.info("Connected to backend configuration at %s", self.base_url)
        except (requests.RequestException, ValueError) as e:
            logger.warning("Failed to load remote configuration (%s); using safe fallback", e)
            config = dict(FALLBACK_CONFIG)
            self.used_fallback = True

        self.config = MappingProxyType(config)
        self.is_loaded = True
        logger.info("Configuration loaded for %s", self.config.get('APP_NAME'))

        for callback in list(self._ready_callbacks):
            callback(self.config)

        return self.config

    def fetch_from_backend(self) -> Dict[str, Any]:
        """Fetch and validate the remote configuration payload"""
        headers = {
            'Content-Type': 'application/json'
        }
        if self.api_token:
            headers['Authorization'] = f'Bearer {self.api_token}'

        response = self.session.get(f'{self.base_url}/config', headers=headers, timeout=self.timeout)
        response.raise_for_status()

        data = response.json()
        if not isinstance(data, dict) or not data.get('success') or not isinstance(data.get('config'), dict):
            raise ValueError('Invalid configuration response')

        return dict(data['config'])

    def on_ready(self, callback: Callable[[Mapping[str, Any]], None]):
        """Register a callback for when configuration is available (called immediately if loaded)"""
        self._ready_callbacks.append(callback)
        if self.is_loaded:
            callback(self.config)
