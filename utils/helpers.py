# utils/helpers.py
"""
General Utility Functions
Stateless helpers for money, payment references and receipts
"""

import random
import string
import time
from datetime import datetime
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Iterable, Optional

from config.settings import PAYMENT_CONFIG

BASE36_ALPHABET = string.digits + string.ascii_lowercase


# =============================================================================
# MONEY
# =============================================================================

def format_amount(amount: int, symbol: Optional[str] = None) -> str:
    """Format a major-unit amount with thousands separators, e.g. ₦4,500"""
    symbol = PAYMENT_CONFIG['currency_symbol'] if symbol is None else symbol
    return f"{symbol}{amount:,}"


def to_minor_units(amount) -> int:
    """
    Convert a major-unit amount to the gateway's minor unit (naira -> kobo)

    Raises:
        ValueError: If amount is not a number
    """
    try:
        major = Decimal(str(amount))
    except (InvalidOperation, ValueError, TypeError) as exc:
        raise ValueError(f"Invalid amount: {amount!r}") from exc

    minor = (major * PAYMENT_CONFIG['minor_units_per_major']).quantize(Decimal('1'), rounding=ROUND_HALF_UP)
    return int(minor)


# =============================================================================
# PAYMENT REFERENCES
# =============================================================================

def generate_reference(prefix: Optional[str] = None, now_ms: Optional[int] = None) -> str:
    """Unique-enough payment reference: <prefix><epoch ms>_<9 base36 chars>"""
    prefix = PAYMENT_CONFIG['reference_prefix'] if prefix is None else prefix
    now_ms = int(time.time() * 1000) if now_ms is None else now_ms
    suffix = ''.join(random.choices(BASE36_ALPHABET, k=9))
    return f"{prefix}{now_ms}_{suffix}"


# =============================================================================
# RECEIPTS
# =============================================================================

def build_receipt(reference: str, email: str, total: int, items: Iterable[dict],
                  app_name: str, support_email: str, backend_url: str,
                  issued_at: Optional[datetime] = None) -> str:
    """Plain-text receipt for a verified payment"""
    issued_at = issued_at or datetime.now()

    item_lines = [
        f"{item['name']:<25} {item['quantity']}x {format_amount(item['price']):>9} = "
        f"{format_amount(item['price'] * item['quantity']):>11}"
        for item in items
    ]

    lines = [
        f"{app_name.upper()} - OFFICIAL RECEIPT",
        "=" * 31,
        f"Receipt No: {reference}",
        f"Date: {issued_at.strftime('%Y-%m-%d')}",
        f"Time: {issued_at.strftime('%H:%M:%S')}",
        f"Customer: {email}",
        "Backend Verified: YES",
        "",
        "ITEMS PURCHASED:",
        *item_lines,
        "",
        f"SUBTOTAL: {format_amount(total):>15}",
        f"TOTAL: {format_amount(total):>18}",
        "PAYMENT METHOD: Paystack",
        "STATUS: PAID & VERIFIED",
        "",
        "Thank you for your purchase!",
        f"Contact: {support_email}",
        f"Backend: {backend_url}",
    ]
    return "\n".join(lines)


def receipt_filename(app_name: str, reference: str) -> str:
    slug = '-'.join(app_name.lower().split())
    return f"{slug}-receipt-{reference}.txt"
