"""Shared fixtures: a fresh app per test with a fake Razorpay client."""
import os

# app.main builds a module-level app from the environment at import time
os.environ.setdefault("RAZORPAY_KEY_ID", "rzp_test_key")
os.environ.setdefault("RAZORPAY_KEY_SECRET", "s3cr3t")

import pytest
from fastapi.testclient import TestClient

from app.config import Settings
from app.main import create_app
from app.services.payment_store import InMemoryPaymentStore

TEST_SECRET = "s3cr3t"


class FakeOrderResource:
    """Stands in for razorpay.Client().order."""

    def __init__(self):
        self.calls = []
        self.error = None

    def create(self, data=None, **kwargs):
        self.calls.append({"data": data, **kwargs})
        if self.error is not None:
            raise self.error
        return {
            "id": "order_test123",
            "entity": "order",
            "amount": data["amount"],
            "amount_paid": 0,
            "amount_due": data["amount"],
            "currency": data["currency"],
            "receipt": data["receipt"],
            "status": "created",
            "attempts": 0,
        }


class FakeRazorpayClient:
    def __init__(self):
        self.order = FakeOrderResource()


def make_settings(**overrides) -> Settings:
    values = {
        "razorpay_key_id": "rzp_test_key",
        "razorpay_key_secret": TEST_SECRET,
        "environment": "test",
        "rate_limit": "1000/minute",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture
def settings():
    return make_settings()


@pytest.fixture
def razorpay_client():
    return FakeRazorpayClient()


@pytest.fixture
def store():
    return InMemoryPaymentStore()


@pytest.fixture
def app(settings, razorpay_client, store):
    return create_app(settings=settings, razorpay_client=razorpay_client, payment_store=store)


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c
