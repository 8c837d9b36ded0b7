"""
Razorpay payment service.

Flow:
  1. Frontend calls POST /create-order → backend creates a Razorpay order
  2. Backend relays the Razorpay order object to the frontend
  3. Frontend opens Razorpay JS checkout modal — user pays
  4. Razorpay returns {payment_id, order_id, signature} to frontend
  5. Frontend POSTs all three to POST /verify-payment
  6. Backend verifies the HMAC-SHA256 signature (CRITICAL security step)

WITHOUT step 6, anyone could fake a successful payment by sending any strings.
The signature is an HMAC of "{order_id}|{payment_id}" using your Razorpay secret.
"""
import hmac
import hashlib

import razorpay

from app.config import Settings


def build_client(settings: Settings) -> razorpay.Client:
    """Create the Razorpay SDK client once per application."""
    return razorpay.Client(
        auth=(settings.razorpay_key_id, settings.razorpay_key_secret)
    )


def create_order(
    client: razorpay.Client,
    amount_minor: int,
    currency: str,
    receipt: str,
    timeout: float,
) -> dict:
    """
    Create a Razorpay order.

    Args:
        amount_minor: amount in the smallest currency unit (paise for INR)
        currency: ISO currency code, e.g. "INR"
        receipt: our reference for this order, max 40 chars
        timeout: seconds before the underlying HTTP call is abandoned

    Returns:
        Razorpay order dict containing 'id', 'amount', 'currency', 'receipt', etc.

    Raises whatever the SDK raises (razorpay.errors.*, requests exceptions).
    """
    data = {
        "amount": amount_minor,
        "currency": currency,
        "receipt": receipt,
    }
    # Extra kwargs are passed through the SDK to requests
    return client.order.create(data=data, timeout=timeout)


def generate_signature(razorpay_order_id: str, razorpay_payment_id: str, key_secret: str) -> str:
    """Hex HMAC-SHA256 of "{order_id}|{payment_id}" keyed with the Razorpay secret."""
    message = f"{razorpay_order_id}|{razorpay_payment_id}"
    return hmac.new(
        key_secret.encode("utf-8"),
        message.encode("utf-8"),
        hashlib.sha256,
    ).hexdigest()


def verify_payment_signature(
    razorpay_order_id: str,
    razorpay_payment_id: str,
    razorpay_signature: str,
    key_secret: str,
) -> bool:
    """
    Verify Razorpay payment signature using HMAC-SHA256.

    Returns True if valid, False if tampered or invalid.
    Uses hmac.compare_digest for timing-safe comparison (prevents timing attacks).
    Both sides are compared as bytes: compare_digest rejects non-ASCII str.
    """
    expected_signature = generate_signature(razorpay_order_id, razorpay_payment_id, key_secret)
    return hmac.compare_digest(
        expected_signature.encode("utf-8"),
        razorpay_signature.encode("utf-8"),
    )
