"""POST /verify-payment: signature check, outcome recording, error mapping."""
import pytest

from app.services.payment_store import PaymentStatus
from app.services.razorpay_service import generate_signature
from tests.conftest import TEST_SECRET


def _payload(order_id="order_abc", payment_id="pay_xyz", signature=None):
    if signature is None:
        signature = generate_signature(order_id, payment_id, TEST_SECRET)
    return {
        "razorpay_order_id": order_id,
        "razorpay_payment_id": payment_id,
        "razorpay_signature": signature,
    }


def test_valid_signature_is_accepted(client, store):
    response = client.post("/verify-payment", json=_payload())

    assert response.status_code == 200
    assert response.json() == {"success": True, "message": "Payment verified successfully"}

    payments = store.get_payments("order_abc")
    assert [p.status for p in payments] == [PaymentStatus.PAID]
    assert payments[0].payment_id == "pay_xyz"


def test_tampered_signature_is_rejected_and_recorded(client, store):
    good = generate_signature("order_abc", "pay_xyz", TEST_SECRET)
    tampered = ("0" if good[0] != "0" else "1") + good[1:]

    response = client.post("/verify-payment", json=_payload(signature=tampered))

    assert response.status_code == 400
    assert response.json() == {"success": False, "message": "Payment verification failed"}
    # The expected digest must never leak to the caller
    assert good not in response.text
    assert [p.status for p in store.get_payments("order_abc")] == [PaymentStatus.FAILED]


def test_signature_for_other_order_is_rejected(client):
    signature = generate_signature("order_other", "pay_xyz", TEST_SECRET)

    response = client.post("/verify-payment", json=_payload(signature=signature))

    assert response.status_code == 400
    assert response.json()["message"] == "Payment verification failed"


@pytest.mark.parametrize(
    "missing",
    ["razorpay_order_id", "razorpay_payment_id", "razorpay_signature"],
)
def test_missing_field_is_invalid_details(client, store, missing):
    payload = _payload()
    del payload[missing]

    response = client.post("/verify-payment", json=payload)

    assert response.status_code == 400
    assert response.json() == {"success": False, "message": "Invalid payment details"}
    assert store.get_payments("order_abc") == []


def test_empty_string_field_is_invalid_details(client):
    response = client.post("/verify-payment", json=_payload(payment_id="", signature="abc"))

    assert response.status_code == 400
    assert response.json()["message"] == "Invalid payment details"


def test_empty_body_is_invalid_details(client):
    response = client.post("/verify-payment")

    assert response.status_code == 400
    assert response.json()["message"] == "Invalid payment details"


def test_store_failure_returns_verification_server_error(client, store, monkeypatch, caplog):
    def broken_record_payment(payment):
        raise RuntimeError("database unavailable")

    monkeypatch.setattr(store, "record_payment", broken_record_payment)

    response = client.post("/verify-payment", json=_payload())

    assert response.status_code == 500
    assert response.json() == {"success": False, "message": "Server error in payment verification"}
    assert "database unavailable" in caplog.text


@pytest.mark.parametrize(
    "field, value",
    [
        ("razorpay_order_id", 123),
        ("razorpay_payment_id", ["pay_xyz"]),
        ("razorpay_signature", {"hex": "abc"}),
        ("razorpay_signature", True),
    ],
)
def test_non_string_field_is_invalid_details(client, store, field, value):
    payload = _payload()
    payload[field] = value

    response = client.post("/verify-payment", json=payload)

    assert response.status_code == 400
    assert response.json() == {"success": False, "message": "Invalid payment details"}
    assert store.get_payments("order_abc") == []
