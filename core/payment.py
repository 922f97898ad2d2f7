"""
Payment gateway adapter
The gateway's interactive flow is opaque; we only build the request and wait
for one of its two callbacks
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List

from config.settings import PAYMENT_CONFIG
from data.models import CheckoutDetails
from utils.helpers import generate_reference, to_minor_units


@dataclass
class PaymentRequest:
    """Everything the gateway needs to open a payment"""
    public_key: str
    email: str
    amount: int  # minor units
    currency: str
    reference: str
    metadata: Dict[str, List[Dict[str, Any]]] = field(default_factory=dict)


class PaymentGateway:
    """
    Base payment gateway

    open() must eventually invoke exactly one of on_success(reference) or
    on_cancel().
    """

    def open(self, request: PaymentRequest, on_success: Callable[[str], None], on_cancel: Callable[[], None]):
        raise NotImplementedError


def build_payment_request(details: CheckoutDetails, total: int, user_id: str, public_key: str) -> PaymentRequest:
    """Assemble the gateway request for a cart total in major units"""
    return PaymentRequest(
        public_key=public_key,
        email=details.email,
        amount=to_minor_units(total),
        currency=PAYMENT_CONFIG['currency'],
        reference=generate_reference(),
        metadata={
            'custom_fields': [
                {
                    'display_name': 'Customer Name',
                    'variable_name': 'customer_name',
                    'value': details.name
                },
                {
                    'display_name': 'Phone Number',
                    'variable_name': 'phone_number',
                    'value': details.phone
                },
                {
                    'display_name': 'Delivery Address',
                    'variable_name': 'delivery_address',
                    'value': details.address or 'Not provided'
                },
                {
                    'display_name': 'User ID',
                    'variable_name': 'user_id',
                    'value': user_id
                }
            ]
        }
    )
