"""
Event channel used between the session authority, the cart store and the UI
"""

import logging
from typing import Callable, List

logger = logging.getLogger(__name__)


class EventChannel:
    """
    Synchronous publish/subscribe channel

    Handlers run in subscription order before emit() returns. A failing
    handler is logged and does not stop delivery to the ones after it.
    """

    def __init__(self, name: str):
        self.name = name
        self._handlers: List[Callable] = []

    def subscribe(self, handler: Callable) -> Callable[[], None]:
        """
        Register a handler

        Returns:
            Function that removes the handler again (safe to call twice)
        """
        self._handlers.append(handler)

        def unsubscribe():
            if handler in self._handlers:
                self._handlers.remove(handler)

        return unsubscribe

    def emit(self, *args):
        # Snapshot so handlers can unsubscribe while we deliver
        for handler in list(self._handlers):
            try:
                handler(*args)
            except Exception:
                logger.exception("Handler %r failed on %s", handler, self.name)

    def __len__(self):
        return len(self._handlers)
