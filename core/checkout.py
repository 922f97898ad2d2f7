"""
Checkout orchestration
Opens the payment gateway, verifies the payment with the backend and only
then records the order and empties the cart
"""

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, List, Mapping, Optional

from core.cart import CartStore
from core.notifications import Notifier
from core.payment import PaymentGateway, build_payment_request
from core.session import SessionAuthority
from data.api_client import BackendClient, BackendError
from data.models import CartLine, CheckoutDetails, Order, SaveStatus
from data.orders import OrderBook
from utils.helpers import build_receipt, receipt_filename

logger = logging.getLogger(__name__)

PAID = 'paid'
CANCELLED = 'cancelled'
FAILED = 'failed'
REJECTED = 'rejected'


@dataclass
class CheckoutResult:
    status: str
    reference: Optional[str] = None
    order: Optional[Order] = None
    receipt: Optional[str] = None
    message: Optional[str] = None

    @property
    def paid(self) -> bool:
        return self.status == PAID


class CheckoutService:
    """Runs a checkout for the signed-in user's cart"""

    def __init__(self, authority: SessionAuthority, cart: CartStore, gateway: PaymentGateway,
                 backend: BackendClient, order_book: OrderBook, config: Mapping[str, Any],
                 notifier: Optional[Notifier] = None, receipts_dir: Optional[Path] = None):
        self.authority = authority
        self.cart = cart
        self.gateway = gateway
        self.backend = backend
        self.order_book = order_book
        self.config = config
        self.notifier = notifier or authority.notifier
        self.receipts_dir = receipts_dir

    async def checkout(self, details: CheckoutDetails) -> CheckoutResult:
        if not self.authority.require_auth('checkout'):
            return CheckoutResult(REJECTED, message='not signed in')

        if not details.name or not details.email or not details.phone:
            self.notifier.error('Please fill in all required fields')
            return CheckoutResult(REJECTED, message='missing customer details')

        await self.cart.wait_until_loaded()
        # What is being paid for; the cart may change while the gateway is open
        purchased = self.cart.lines
        buyer = self.authority.session.user_id
        total = sum(line.line_total for line in purchased)
        if total == 0:
            self.notifier.error('Your cart is empty')
            return CheckoutResult(REJECTED, message='empty cart')

        self.notifier.info('Processing payment...')

        try:
            request = build_payment_request(details, total, buyer,
                                            self.config.get('PAYSTACK_PUBLIC_KEY', ''))
            reference = await self._open_gateway(request)
        except Exception as e:
            logger.exception("Payment initialization failed: %s", e)
            self.notifier.error('Payment initialization failed. Please try again.')
            return CheckoutResult(FAILED, message=str(e))

        if reference is None:
            logger.info("Payment %s closed by user", request.reference)
            self.notifier.warning('Payment was cancelled')
            return CheckoutResult(CANCELLED, reference=request.reference)

        return await self.complete_payment(reference, details, total, buyer, purchased)

    async def _open_gateway(self, request) -> Optional[str]:
        """Wait for the gateway's single outcome: the reference on success, None on cancel"""
        loop = asyncio.get_running_loop()
        outcome = loop.create_future()

        def settle(value):
            if not outcome.done():
                outcome.set_result(value)

        self.gateway.open(
            request,
            on_success=lambda reference: loop.call_soon_threadsafe(settle, reference),
            on_cancel=lambda: loop.call_soon_threadsafe(settle, None)
        )
        return await outcome

    async def complete_payment(self, reference: str, details: CheckoutDetails, total: int,
                               buyer: Optional[str] = None,
                               purchased: Optional[List[CartLine]] = None) -> CheckoutResult:
        """
        Verify a gateway reference and finish the order; the cart is kept on any failure

        buyer and purchased default to the signed-in user and the current cart.
        """
        self.notifier.info('🔍 Verifying payment with secure backend...')
        if buyer is None:
            buyer = self.authority.session.user_id
        if purchased is None:
            purchased = self.cart.lines
        items = [line.to_dict() for line in purchased]

        try:
            verification = await self.backend.verify_payment(reference)
            if not verification.get('success'):
                raise BackendError(verification.get('message') or 'Payment verification failed')
        except BackendError as e:
            logger.error("Payment verification error for %s: %s", reference, e)
            self.notifier.error(f'❌ Payment verification failed: {e}')
            self.notifier.info('🛒 Items kept in cart for retry')
            return CheckoutResult(FAILED, reference=reference, message=str(e))

        self.notifier.success('✅ Payment verified securely!')

        order = Order(
            id=reference,
            customer_email=details.email,
            customer_name=details.name,
            customer_phone=details.phone,
            delivery_address=details.address,
            items=items,
            total=total,
            date=datetime.now(timezone.utc).isoformat(),
            verification_data=verification.get('data') or {}
        )
        self.order_book.record_order(order)
        self.order_book.update_customer_stats(details.email, total)

        receipt = build_receipt(
            reference, details.email, total, items,
            app_name=self.config.get('APP_NAME', ''),
            support_email=self.config.get('SUPPORT_EMAIL', ''),
            backend_url=self.config.get('BACKEND_URL', '')
        )
        self.save_receipt(reference, receipt)

        if await self.cart.remove_purchased(buyer, purchased) == SaveStatus.FAILED:
            logger.warning("Order %s recorded but the paid items are still in the stored cart", reference)
        self.notifier.success('🎉 Payment verified and completed successfully!')

        return CheckoutResult(PAID, reference=reference, order=order, receipt=receipt)

    def save_receipt(self, reference: str, receipt: str) -> Optional[Path]:
        if self.receipts_dir is None:
            return None

        path = Path(self.receipts_dir) / receipt_filename(self.config.get('APP_NAME', 'store'), reference)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(receipt, encoding='utf-8')
        except OSError as e:
            logger.warning("Could not write receipt %s: %s", path, e)
            return None
        return path
