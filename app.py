"""
Storefront application - wires the core components together

Subscription order matters: the cart store follows the session first, then
the application's own handler, then the UI bridge.
"""

import logging
from pathlib import Path
from typing import Any, Mapping, Optional

from config.settings import STORAGE_CONFIG
from core.admin import AdminPanel
from core.auth import AuthService
from core.cart import CartStore
from core.checkout import CheckoutService
from core.identity import IdentityProvider
from core.notifications import Notifier
from core.payment import PaymentGateway
from core.session import SessionAuthority
from data.api_client import BackendClient
from data.catalog import Catalog
from data.firebase_auth import FirebaseAuthProvider
from data.local_store import LocalStore
from data.models import Customer, Session
from data.orders import OrderBook
from data.remote_store import FirebaseRealtimeStore, RemoteDocumentStore

logger = logging.getLogger(__name__)


class StorefrontApp:
    """
    One page context: a single session, a single cart and the services
    built on them
    """

    def __init__(self, config: Mapping[str, Any], provider: IdentityProvider,
                 remote_store: RemoteDocumentStore, local_store: LocalStore,
                 backend: BackendClient, gateway: Optional[PaymentGateway] = None,
                 receipts_dir: Optional[Path] = None, with_ui_bridge: bool = True):
        self.config = config
        self.provider = provider
        self.backend = backend
        self.notifier = Notifier()

        self.local_store = local_store
        self.catalog = Catalog(local_store)
        self.order_book = OrderBook(local_store)

        self.authority = SessionAuthority(config.get('ADMIN_EMAIL'), self.notifier)
        self.cart = CartStore(self.authority, remote_store, local_store, self.catalog, self.notifier)
        self.authority.subscribe(self._on_session_changed)

        self.auth = AuthService(provider, self.authority, remote_store, self.notifier)
        self.admin = AdminPanel(self.authority, self.catalog, self.order_book, self.notifier)
        self.checkout = None
        if gateway is not None:
            self.checkout = CheckoutService(self.authority, self.cart, gateway, backend,
                                            self.order_book, config, self.notifier, receipts_dir)

        self.bridge = None
        if with_ui_bridge:
            from ui.session_bridge import SessionBridge
            self.bridge = SessionBridge(self.authority, self.cart, self.notifier)

        # Last, so every subscriber sees the provider's replayed state
        self.authority.attach(provider)

    @classmethod
    def from_config(cls, config: Mapping[str, Any], gateway: Optional[PaymentGateway] = None,
                    with_ui_bridge: bool = True) -> 'StorefrontApp':
        """Build the app against Firebase and the storefront backend"""
        provider = FirebaseAuthProvider(config['FIREBASE_API_KEY'])
        remote_store = FirebaseRealtimeStore(config['FIREBASE_DATABASE_URL'],
                                             token_provider=lambda: provider.id_token)
        return cls(
            config,
            provider,
            remote_store,
            LocalStore(STORAGE_CONFIG['local_db_path']),
            BackendClient(config.get('BACKEND_URL')),
            gateway=gateway,
            receipts_dir=STORAGE_CONFIG['receipts_dir'],
            with_ui_bridge=with_ui_bridge
        )

    def _on_session_changed(self, session: Session):
        if not session.is_authenticated:
            return

        user = session.user
        self.order_book.add_customer(Customer(id=user.uid, email=user.email, name=user.display_name or ''))

        if session.is_admin:
            self.notifier.success('👑 Welcome Admin! Dashboard activated.')
        else:
            self.notifier.success(f'👋 Welcome {user.email}!')

    def close(self):
        if self.bridge is not None:
            self.bridge.disconnect_core()
        self.cart.close()
        self.authority.detach()
