"""
Cart Store - the signed-in user's cart, kept durable across reloads

The cart follows the session authority: it is loaded on sign-in, emptied on
sign-out, and every mutation is refused while nobody is signed in.
"""

import asyncio
import logging
import sqlite3
from typing import Callable, List, Optional

from config.settings import LOCAL_STORE_KEYS
from core.events import EventChannel
from core.notifications import Notifier
from core.session import SessionAuthority
from data.catalog import Catalog
from data.local_store import LocalStore
from data.models import CartLine, SaveStatus, Session
from data.remote_store import RemoteDocumentStore, RemoteStoreError

logger = logging.getLogger(__name__)


def cart_path(user_id: str) -> str:
    return f"carts/{user_id}"


def subtract_lines(lines: List[CartLine], purchased: List[CartLine]) -> List[CartLine]:
    """Lines left after taking away the purchased quantities"""
    bought = {}
    for line in purchased:
        bought[line.product_id] = bought.get(line.product_id, 0) + line.quantity

    remaining = []
    for line in lines:
        quantity = line.quantity - bought.get(line.product_id, 0)
        if quantity > 0:
            remaining.append(CartLine(**dict(vars(line), quantity=quantity)))
    return remaining


class CartStore:
    """
    Owns the in-memory cart of the current user

    Loads are tagged with a generation number; a load whose generation or
    user no longer matches when it completes is dropped, so a slow load can
    never overwrite the state of a later sign-out or sign-in.
    """

    def __init__(self, authority: SessionAuthority, remote_store: RemoteDocumentStore,
                 local_store: LocalStore, catalog: Catalog, notifier: Optional[Notifier] = None):
        self.authority = authority
        self.remote_store = remote_store
        self.local_store = local_store
        self.catalog = catalog
        self.notifier = notifier or authority.notifier

        self._lines: List[CartLine] = []
        self._user_id: Optional[str] = None
        self._generation = 0
        self._load_task: Optional[asyncio.Task] = None
        self._loading = False
        self._in_flight = 0
        self._changed = EventChannel('cart_changed')

        self._unsubscribe = authority.subscribe(self.on_session_changed)
        if authority.is_authenticated:
            self.on_session_changed(authority.session)

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    @property
    def lines(self) -> List[CartLine]:
        return [CartLine(**vars(line)) for line in self._lines]

    @property
    def user_id(self) -> Optional[str]:
        return self._user_id

    @property
    def is_loading(self) -> bool:
        return self._loading

    @property
    def busy(self) -> bool:
        """True while a load or a save is in flight; UI should disable cart controls"""
        return self._loading or self._in_flight > 0

    def item_count(self) -> int:
        return sum(line.quantity for line in self._lines)

    def subtotal(self) -> int:
        return sum(line.line_total for line in self._lines)

    def get_line(self, product_id: int) -> Optional[CartLine]:
        for line in self._lines:
            if line.product_id == product_id:
                return line
        return None

    def subscribe(self, handler: Callable[[List[CartLine]], None]) -> Callable[[], None]:
        return self._changed.subscribe(handler)

    def _emit_changed(self):
        self._changed.emit(self.lines)

    # ------------------------------------------------------------------
    # Session transitions
    # ------------------------------------------------------------------

    def on_session_changed(self, session: Session):
        new_user_id = session.user_id

        if new_user_id == self._user_id:
            return

        # A switch between two users is a sign-out followed by a sign-in
        if self._user_id is not None:
            self._reset()

        if new_user_id is not None:
            self._begin_load(new_user_id)

    def _reset(self):
        """Drop the in-memory cart without touching persistence"""
        self._generation += 1
        self._user_id = None
        self._lines = []
        self._loading = False
        self._load_task = None
        self._emit_changed()

    def _begin_load(self, user_id: str):
        self._generation += 1
        generation = self._generation
        self._user_id = user_id
        self._lines = []
        self._loading = True

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # No event loop (scripted use): load inline
            asyncio.run(self._load_into(user_id, generation))
            return

        self._load_task = loop.create_task(self._load_into(user_id, generation))

    def _is_current(self, user_id: str, generation: int) -> bool:
        return generation == self._generation and user_id == self._user_id

    async def _load_into(self, user_id: str, generation: int):
        try:
            lines = await self.load_cart(user_id)
        except RemoteStoreError as e:
            if not self._is_current(user_id, generation):
                logger.debug("Ignoring failed cart load for stale session %s", user_id)
                return
            logger.error("Error loading cart for %s: %s", user_id, e)
            self.notifier.warning("⚠️ Could not load your saved cart; starting with an empty cart")
            lines = []

        if not self._is_current(user_id, generation):
            logger.debug("Discarding stale cart load for %s", user_id)
            return

        self._lines = lines
        self._loading = False
        logger.info("Loaded cart for %s with %d line(s)", user_id, len(lines))
        self._emit_changed()

    async def wait_until_loaded(self):
        """Wait until no cart load is pending, including loads started while waiting"""
        while self._load_task is not None and not self._load_task.done():
            await self._load_task

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    async def load_cart(self, user_id: str) -> List[CartLine]:
        """
        Read a user's cart from the remote store

        Remote errors propagate. The local copy written by save_cart() is
        never read back here.

        Returns:
            Cart lines, empty if the user has no stored cart
        """
        path = cart_path(user_id)
        # TODO: fall back to favsCart_<uid> once we decide how a local-only cart syncs back to the remote store
        data = await self.remote_store.get(path)

        if not data:
            return []

        try:
            # The realtime database may hand arrays back as index-keyed objects
            if isinstance(data, dict):
                data = [data[key] for key in sorted(data, key=int)]
            stored = [CartLine.from_dict(item) for item in data if item]
        except (KeyError, TypeError, ValueError) as e:
            raise RemoteStoreError(path, f"malformed cart: {e}") from e

        # Keep one line per product with a positive quantity
        lines: List[CartLine] = []
        by_id = {}
        for line in stored:
            if line.quantity <= 0:
                logger.warning("Dropping stored cart line %s with quantity %s", line.product_id, line.quantity)
                continue
            if line.product_id in by_id:
                by_id[line.product_id].quantity += line.quantity
                continue
            by_id[line.product_id] = line
            lines.append(line)
        return lines

    async def save_cart(self) -> SaveStatus:
        """
        Write the full cart for the current user

        A failed remote write falls back to the local store. Never raises.
        """
        user_id = self._user_id
        if user_id is None:
            logger.info("No user logged in, skipping cart save")
            return SaveStatus.SKIPPED

        payload = [line.to_dict() for line in self._lines]

        try:
            await self.remote_store.set(cart_path(user_id), payload)
            logger.debug("Saved cart for %s", user_id)
            return SaveStatus.REMOTE
        except RemoteStoreError as e:
            logger.error("Error saving cart remotely for %s: %s", user_id, e)

        try:
            self.local_store.set(f"{LOCAL_STORE_KEYS['cart_prefix']}{user_id}", payload)
        except (sqlite3.Error, OSError) as local_error:
            logger.error("Error saving cart locally for %s: %s", user_id, local_error)
            self.notifier.error("❌ Your cart could not be saved")
            return SaveStatus.FAILED

        self.notifier.warning("⚠️ Cart saved on this device only; it will not sync until the connection returns")
        return SaveStatus.LOCAL_FALLBACK

    async def _persist(self) -> SaveStatus:
        self._in_flight += 1
        try:
            return await self.save_cart()
        finally:
            self._in_flight -= 1

    async def _ready_for_mutation(self, action: str) -> bool:
        if not self.authority.require_auth(action):
            return False

        await self.wait_until_loaded()

        # The session may have ended while the load was pending
        return self.authority.require_auth(action) and self._user_id == self.authority.session.user_id

    # ------------------------------------------------------------------
    # Mutators
    # ------------------------------------------------------------------

    async def add_item(self, product_id: int) -> Optional[SaveStatus]:
        """
        Add one unit of a catalog product

        Returns:
            Save status, or None when nothing was changed
        """
        if not await self._ready_for_mutation('add items to cart'):
            return None

        product = self.catalog.find(product_id)
        if product is None:
            logger.warning("Product %s not found in catalog", product_id)
            return None

        line = self.get_line(product_id)
        if line:
            line.quantity += 1
        else:
            self._lines.append(CartLine.from_product(product))

        self._emit_changed()
        status = await self._persist()
        if status != SaveStatus.FAILED:
            self.notifier.success(f"✅ Added {product.name} to cart!")
        return status

    async def update_quantity(self, product_id: int, delta: int) -> Optional[SaveStatus]:
        if not await self._ready_for_mutation('manage cart'):
            return None

        line = self.get_line(product_id)
        if line is None:
            return None

        new_quantity = line.quantity + delta
        if new_quantity <= 0:
            return await self.remove_item(product_id)

        line.quantity = new_quantity
        self._emit_changed()
        return await self._persist()

    async def remove_item(self, product_id: int) -> Optional[SaveStatus]:
        if not await self._ready_for_mutation('manage cart'):
            return None

        self._lines = [line for line in self._lines if line.product_id != product_id]
        self._emit_changed()
        status = await self._persist()
        if status != SaveStatus.FAILED:
            self.notifier.info("🗑️ Item removed from cart")
        return status

    async def clear(self) -> Optional[SaveStatus]:
        if not await self._ready_for_mutation('manage cart'):
            return None

        if not self._lines:
            self.notifier.info("🛒 Cart is already empty")
            return None

        self._lines = []
        self._emit_changed()
        status = await self._persist()
        if status != SaveStatus.FAILED:
            self.notifier.success("🛒 Cart cleared successfully")
        return status

    async def remove_purchased(self, user_id: str, purchased: List[CartLine]) -> SaveStatus:
        """
        Take paid lines out of a user's cart after checkout

        Anything added while the payment was open stays in the cart. If the
        buyer is no longer signed in, their stored cart is updated instead.
        """
        if user_id is None:
            return SaveStatus.SKIPPED

        await self.wait_until_loaded()

        if user_id == self._user_id:
            self._lines = subtract_lines(self._lines, purchased)
            self._emit_changed()
            return await self._persist()

        logger.info("Buyer %s signed out during checkout; updating the stored cart", user_id)
        path = cart_path(user_id)
        try:
            remaining = subtract_lines(await self.load_cart(user_id), purchased)
            await self.remote_store.set(path, [line.to_dict() for line in remaining])
        except RemoteStoreError as e:
            logger.error("Could not remove purchased items from %s: %s", path, e)
            return SaveStatus.FAILED
        return SaveStatus.REMOTE

    def close(self):
        """Stop following the session and abandon any pending load"""
        self._unsubscribe()
        if self._load_task is not None and not self._load_task.done():
            self._load_task.cancel()
