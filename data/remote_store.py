"""
Remote document store adapters
Carts and user profiles live in a hosted JSON document tree
"""

import asyncio
import logging
from typing import Any, Callable, Optional

import requests

from config.settings import BACKEND_CONFIG

logger = logging.getLogger(__name__)


class RemoteStoreError(Exception):
    """Remote document store could not be read or written"""

    def __init__(self, path: str, message: str):
        self.path = path
        super().__init__(f"{path}: {message}")


class RemoteDocumentStore:
    """Async get/set of JSON documents addressed by slash-separated paths"""

    async def get(self, path: str) -> Any:
        """Return the document at path, or None when nothing is stored there"""
        raise NotImplementedError

    async def set(self, path: str, value: Any):
        """Replace the document at path"""
        raise NotImplementedError


class FirebaseRealtimeStore(RemoteDocumentStore):
    """
    Firebase Realtime Database over its REST interface

    Blocking requests calls run in worker threads so the event loop keeps
    dispatching while a read or write is in flight.
    """

    def __init__(self, database_url: str, token_provider: Optional[Callable[[], Optional[str]]] = None,
                 timeout: Optional[float] = None, session: Optional[requests.Session] = None):
        self.database_url = database_url.rstrip('/')
        self.token_provider = token_provider
        self.timeout = timeout or BACKEND_CONFIG['timeout']
        self.session = session or requests.Session()

    def _url(self, path: str) -> str:
        return f"{self.database_url}/{path.strip('/')}.json"

    def _params(self) -> dict:
        token = self.token_provider() if self.token_provider else None
        return {'auth': token} if token else {}

    def _request(self, method: str, path: str, value: Any = None) -> Any:
        try:
            response = self.session.request(
                method,
                self._url(path),
                params=self._params(),
                json=value if method == 'PUT' else None,
                timeout=self.timeout
            )
            response.raise_for_status()
            return response.json()
        except requests.RequestException as e:
            raise RemoteStoreError(path, str(e)) from e
        except ValueError as e:
            raise RemoteStoreError(path, f"invalid JSON response: {e}") from e

    async def get(self, path: str) -> Any:
        return await asyncio.to_thread(self._request, 'GET', path)

    async def set(self, path: str, value: Any):
        await asyncio.to_thread(self._request, 'PUT', path, value)
        logger.debug("Wrote remote document %s", path)
