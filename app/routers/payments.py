"""
Payments router: the two public endpoints.

  POST /create-order    → create a Razorpay order, relay it to the frontend
  POST /verify-payment  → verify the checkout signature

Handlers are plain `def`: the Razorpay SDK is blocking, so FastAPI runs them
in its threadpool. Both endpoints share one per-client rate limit budget.
"""
from typing import Optional

import razorpay
from fastapi import APIRouter, Depends, Request

from app.config import Settings
from app.core.dependencies import get_app_settings, get_payment_store, get_razorpay_client
from app.core.rate_limiter import api_rate_limit
from app.schemas.payment import (
    MessageResponse,
    OrderCreateRequest,
    OrderCreateResponse,
    PaymentVerifyRequest,
)
from app.services import payment_service
from app.services.payment_store import PaymentStore

router = APIRouter()

ERROR_RESPONSES = {
    400: {"model": MessageResponse},
    429: {"model": MessageResponse},
    500: {"model": MessageResponse},
}


@router.post("/create-order", response_model=OrderCreateResponse, responses=ERROR_RESPONSES)
@api_rate_limit
def create_order(
    request: Request,
    body: Optional[OrderCreateRequest] = None,
    settings: Settings = Depends(get_app_settings),
    client: razorpay.Client = Depends(get_razorpay_client),
    store: PaymentStore = Depends(get_payment_store),
):
    """
    Create a Razorpay order for `amount` (major units) in `currency`.
    An empty body is treated like a body with both fields missing.
    """
    body = body or OrderCreateRequest()
    order = payment_service.create_payment_order(
        client,
        store,
        settings,
        amount=body.amount,
        currency=body.currency,
    )
    return OrderCreateResponse(success=True, order=order)


@router.post("/verify-payment", response_model=MessageResponse, responses=ERROR_RESPONSES)
@api_rate_limit
def verify_payment(
    request: Request,
    body: Optional[PaymentVerifyRequest] = None,
    settings: Settings = Depends(get_app_settings),
    store: PaymentStore = Depends(get_payment_store),
):
    """
    Verify the HMAC-SHA256 signature Razorpay returned at checkout.

    CRITICAL SECURITY STEP: if the signature doesn't match, the payment is
    rejected and recorded as failed. The expected digest is never echoed back.
    """
    body = body or PaymentVerifyRequest()
    payment_service.verify_payment(
        store,
        settings,
        razorpay_order_id=body.razorpay_order_id,
        razorpay_payment_id=body.razorpay_payment_id,
        razorpay_signature=body.razorpay_signature,
    )
    return MessageResponse(success=True, message="Payment verified successfully")
