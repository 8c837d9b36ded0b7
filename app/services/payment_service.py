"""
Payment service: input validation and orchestration for both endpoints.

Routers stay thin and call create_payment_order() / verify_payment().
Every expected failure is raised as a PaymentAPIException subclass so the
exception handlers can render it; nothing here builds HTTP responses.

Amount handling:
  - amounts are parsed as Decimal, never float, so 10.1 stays 10.1
  - minor units = amount × 100, rounded half-up (two-decimal currencies)
"""
import logging
import secrets
import time
from decimal import Decimal, DecimalException, InvalidOperation, ROUND_HALF_UP
from typing import Any, Optional

import razorpay

from app.config import Settings
from app.core.exceptions import (
    InvalidAmountException,
    InvalidPaymentDetailsException,
    MissingOrderFieldsException,
    OrderCreationException,
    PaymentVerificationErrorException,
    PaymentVerificationFailedException,
)
from app.services import razorpay_service
from app.services.payment_store import OrderRecord, PaymentRecord, PaymentStatus, PaymentStore

logger = logging.getLogger(__name__)

MINOR_UNITS_PER_MAJOR = 100
RECEIPT_PREFIX = "receipt_order_"


def _is_missing(value: Any) -> bool:
    """None, blank strings, False and zero all count as "not supplied"."""
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (bool, int, float, Decimal)):
        return value == 0
    return False


def parse_amount(value: Any) -> Decimal:
    """
    Parse a client-supplied amount into a positive, finite Decimal.
    Accepts JSON numbers and numeric strings ("499.50").
    """
    if isinstance(value, bool):
        raise InvalidAmountException()

    if isinstance(value, (int, float, Decimal)):
        text = str(value)
    elif isinstance(value, str):
        text = value.strip()
    else:
        raise InvalidAmountException()

    try:
        amount = Decimal(text)
    except InvalidOperation:
        raise InvalidAmountException()

    if not amount.is_finite() or amount <= 0:
        raise InvalidAmountException()
    return amount


def to_minor_units(amount: Decimal) -> int:
    """
    Convert major units (rupees) to minor units (paise). 10 → 1000.
    Amounts too large for the decimal context (1e27, "1e999999999") are
    invalid amounts, not server errors.
    """
    try:
        minor = (amount * MINOR_UNITS_PER_MAJOR).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    except DecimalException:
        raise InvalidAmountException()
    return int(minor)


def generate_receipt_id(now_ms: Optional[int] = None) -> str:
    """
    receipt_order_<epoch ms>_<8 hex chars>.
    The random suffix keeps ids unique for calls within the same millisecond;
    the total stays under Razorpay's 40 character receipt limit.
    """
    if now_ms is None:
        now_ms = time.time_ns() // 1_000_000
    return f"{RECEIPT_PREFIX}{now_ms}_{secrets.token_hex(4)}"


def create_payment_order(
    client: razorpay.Client,
    store: PaymentStore,
    settings: Settings,
    amount: Any,
    currency: Any,
) -> dict:
    """
    Validate the request, create the order at Razorpay, record it and return
    the Razorpay order object untouched.

    Validation order matters: presence first, then numeric. Razorpay is only
    contacted once both checks pass.
    """
    if _is_missing(amount) or not isinstance(currency, str) or _is_missing(currency):
        raise MissingOrderFieldsException()

    amount_minor = to_minor_units(parse_amount(amount))
    if amount_minor < 1:
        raise InvalidAmountException()

    currency = currency.strip().upper()
    receipt = generate_receipt_id()

    try:
        order = razorpay_service.create_order(
            client,
            amount_minor=amount_minor,
            currency=currency,
            receipt=receipt,
            timeout=settings.razorpay_timeout_seconds,
        )
    except Exception:
        # SDK errors, connection errors and timeouts all end up here.
        # Details go to the log only, never to the client.
        logger.exception(f"Error creating Razorpay order (receipt={receipt})")
        raise OrderCreationException()

    store.record_order(
        OrderRecord(
            order_id=str(order.get("id", receipt)),
            receipt=receipt,
            amount_minor=amount_minor,
            currency=currency,
        )
    )
    logger.info(f"Razorpay order created: id={order.get('id')} receipt={receipt} amount={amount_minor} {currency}")
    return order


def _is_present_string(value: Any) -> bool:
    return isinstance(value, str) and bool(value)


def verify_payment(
    store: PaymentStore,
    settings: Settings,
    razorpay_order_id: Any,
    razorpay_payment_id: Any,
    razorpay_signature: Any,
) -> None:
    """
    Check the checkout signature and record the outcome.

    Returns normally when the signature matches. Raises:
      InvalidPaymentDetailsException      — a field is missing or empty
      PaymentVerificationFailedException  — signature mismatch (tampering)
      PaymentVerificationErrorException   — anything unexpected while checking/recording
    """
    fields = (razorpay_order_id, razorpay_payment_id, razorpay_signature)
    if not all(_is_present_string(f) for f in fields):
        raise InvalidPaymentDetailsException()

    try:
        signature_valid = razorpay_service.verify_payment_signature(
            razorpay_order_id=razorpay_order_id,
            razorpay_payment_id=razorpay_payment_id,
            razorpay_signature=razorpay_signature,
            key_secret=settings.razorpay_key_secret,
        )
        store.record_payment(
            PaymentRecord(
                order_id=razorpay_order_id,
                payment_id=razorpay_payment_id,
                status=PaymentStatus.PAID if signature_valid else PaymentStatus.FAILED,
            )
        )
    except Exception:
        logger.exception(f"Error verifying payment for order {razorpay_order_id}")
        raise PaymentVerificationErrorException()

    if not signature_valid:
        logger.warning(
            f"Payment signature mismatch: order={razorpay_order_id} payment={razorpay_payment_id}"
        )
        raise PaymentVerificationFailedException()

    logger.info(f"Payment verified: order={razorpay_order_id} payment={razorpay_payment_id}")
