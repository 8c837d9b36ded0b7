"""
Payment store: where order and payment outcomes are recorded.

The service layer records three events:
  - an order was created at Razorpay       → OrderStatus.CREATED
  - a payment signature verified           → PaymentStatus.PAID
  - a payment signature did not verify     → PaymentStatus.FAILED

Only an in-memory implementation ships. A database-backed store implements
PaymentStore and is passed to create_app(payment_store=...).
"""
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Optional


class OrderStatus(str, Enum):
    CREATED = "created"


class PaymentStatus(str, Enum):
    PAID = "paid"
    FAILED = "failed"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class OrderRecord:
    order_id: str
    receipt: str
    amount_minor: int
    currency: str
    status: OrderStatus = OrderStatus.CREATED
    created_at: datetime = field(default_factory=_utcnow)


@dataclass(frozen=True)
class PaymentRecord:
    order_id: str
    payment_id: str
    status: PaymentStatus
    recorded_at: datetime = field(default_factory=_utcnow)


class PaymentStore(ABC):
    @abstractmethod
    def record_order(self, order: OrderRecord) -> None:
        ...

    @abstractmethod
    def record_payment(self, payment: PaymentRecord) -> None:
        ...

    @abstractmethod
    def get_order(self, order_id: str) -> Optional[OrderRecord]:
        ...

    @abstractmethod
    def get_payments(self, order_id: str) -> list[PaymentRecord]:
        ...


class InMemoryPaymentStore(PaymentStore):
    """
    Process-local store. Handlers run in a threadpool, so every access to
    the maps happens under one lock. Contents are lost on restart.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._orders: dict[str, OrderRecord] = {}
        self._payments: dict[str, list[PaymentRecord]] = {}

    def record_order(self, order: OrderRecord) -> None:
        with self._lock:
            self._orders[order.order_id] = order

    def record_payment(self, payment: PaymentRecord) -> None:
        # Every attempt is kept, so a failed attempt followed by a
        # successful one leaves both in the history.
        with self._lock:
            self._payments.setdefault(payment.order_id, []).append(payment)

    def get_order(self, order_id: str) -> Optional[OrderRecord]:
        with self._lock:
            return self._orders.get(order_id)

    def get_payments(self, order_id: str) -> list[PaymentRecord]:
        with self._lock:
            return list(self._payments.get(order_id, []))
