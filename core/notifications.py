"""
User-facing notifications
The core never draws toasts itself; it emits them here and the UI listens
"""

import logging
from dataclasses import dataclass

from core.events import EventChannel

logger = logging.getLogger(__name__)

SUCCESS = 'success'
ERROR = 'error'
WARNING = 'warning'
INFO = 'info'

# Notification kinds the UI reacts to beyond showing a message
GENERAL = 'general'
LOGIN_REQUIRED = 'login_required'
ADMIN_DENIED = 'admin_denied'


@dataclass(frozen=True)
class Notification:
    message: str
    level: str = INFO
    kind: str = GENERAL


class Notifier:
    """Broadcasts notifications to subscribers (toast renderer, auth overlay, tests)"""

    def __init__(self):
        self.channel = EventChannel('notification')

    def subscribe(self, handler):
        return self.channel.subscribe(handler)

    def notify(self, message: str, level: str = INFO, kind: str = GENERAL) -> Notification:
        notification = Notification(message, level, kind)
        logger.debug("[%s] %s", level, message)
        self.channel.emit(notification)
        return notification

    def success(self, message: str) -> Notification:
        return self.notify(message, SUCCESS)

    def error(self, message: str) -> Notification:
        return self.notify(message, ERROR)

    def warning(self, message: str) -> Notification:
        return self.notify(message, WARNING)

    def info(self, message: str) -> Notification:
        return self.notify(message, INFO)

    def login_required(self, action: str) -> Notification:
        return self.notify(f"🔐 Please log in to {action}", INFO, LOGIN_REQUIRED)

    def admin_denied(self, action: str) -> Notification:
        return self.notify(f"🔒 Admin access required to {action}", ERROR, ADMIN_DENIED)
