"""
Qt bridge for the storefront core
Re-emits session, cart and notification events as Qt signals so widgets can
connect to them; it only reads core state
"""

from PyQt6.QtCore import QObject, pyqtSignal

from core.cart import CartStore
from core.notifications import ADMIN_DENIED, LOGIN_REQUIRED, Notification, Notifier
from core.session import SessionAuthority


class SessionBridge(QObject):
    """
    Subscribes to the core and forwards events as signals

    Must be created after the CartStore so the cart sees each session change
    before the UI does.
    """

    session_changed = pyqtSignal(object)     # Session
    cart_changed = pyqtSignal(object)        # [CartLine]
    notification = pyqtSignal(str, str)      # message, level
    login_requested = pyqtSignal(str)        # message
    admin_denied = pyqtSignal(str)           # message

    def __init__(self, authority: SessionAuthority, cart: CartStore, notifier: Notifier, parent=None):
        super().__init__(parent)
        self.authority = authority
        self.cart = cart

        self._unsubscribers = [
            authority.subscribe(self._on_session_changed),
            cart.subscribe(self._on_cart_changed),
            notifier.subscribe(self._on_notification)
        ]

    def _on_session_changed(self, session):
        self.session_changed.emit(session)

    def _on_cart_changed(self, lines):
        self.cart_changed.emit(lines)

    def _on_notification(self, notification: Notification):
        self.notification.emit(notification.message, notification.level)

        if notification.kind == LOGIN_REQUIRED:
            self.login_requested.emit(notification.message)
        elif notification.kind == ADMIN_DENIED:
            self.admin_denied.emit(notification.message)

    def cart_badge_text(self) -> str:
        """Cart badge: item count, or 0 while signed out"""
        if not self.authority.is_authenticated:
            return '0'
        return str(self.cart.item_count())

    def checkout_enabled(self) -> bool:
        return self.authority.is_authenticated and not self.cart.busy and self.cart.item_count() > 0

    def disconnect_core(self):
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers = []
