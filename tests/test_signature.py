"""Unit tests for Razorpay checkout signature verification."""
import hashlib
import hmac

import pytest

from app.services.razorpay_service import generate_signature, verify_payment_signature

SECRET = "s3cr3t"


def _reference_signature(order_id: str, payment_id: str, secret: str = SECRET) -> str:
    return hmac.new(secret.encode(), f"{order_id}|{payment_id}".encode(), hashlib.sha256).hexdigest()


@pytest.mark.parametrize(
    "order_id, payment_id",
    [
        ("order_abc", "pay_xyz"),
        ("order_IluGWxBm9U8zJ8", "pay_IluH1ICSWR2mUm"),
        ("o", "p"),
        ("order|with|pipes", "pay_ünïcode"),
    ],
)
def test_valid_signature_verifies(order_id, payment_id):
    signature = _reference_signature(order_id, payment_id)

    assert generate_signature(order_id, payment_id, SECRET) == signature
    assert verify_payment_signature(order_id, payment_id, signature, SECRET) is True


def test_signature_depends_on_secret():
    signature = _reference_signature("order_abc", "pay_xyz", secret="other-secret")

    assert verify_payment_signature("order_abc", "pay_xyz", signature, SECRET) is False


def test_swapped_ids_do_not_verify():
    signature = _reference_signature("order_abc", "pay_xyz")

    assert verify_payment_signature("pay_xyz", "order_abc", signature, SECRET) is False


def test_flipping_any_character_fails():
    signature = _reference_signature("order_abc", "pay_xyz")

    for i, char in enumerate(signature):
        replacement = "0" if char != "0" else "1"
        tampered = signature[:i] + replacement + signature[i + 1:]
        assert verify_payment_signature("order_abc", "pay_xyz", tampered, SECRET) is False, i


def test_uppercase_hex_is_rejected():
    signature = _reference_signature("order_abc", "pay_xyz")

    assert verify_payment_signature("order_abc", "pay_xyz", signature.upper(), SECRET) is False


def test_non_ascii_signature_returns_false_instead_of_raising():
    assert verify_payment_signature("order_abc", "pay_xyz", "sïgnature", SECRET) is False
