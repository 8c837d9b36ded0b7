from pydantic import BaseModel, ConfigDict, Field
from typing import Any


class OrderCreateRequest(BaseModel):
    """
    Body of POST /create-order.

    Fields are deliberately loose: presence and numeric checks happen in
    payment_service so the client gets the exact error messages documented
    for this endpoint instead of pydantic's validation output.
    """
    model_config = ConfigDict(
        json_schema_extra={"examples": [{"amount": 500, "currency": "INR"}]}
    )

    amount: Any = Field(default=None, description="Amount in major units, e.g. 500 for ₹500")
    currency: Any = Field(default=None, description="ISO currency code, e.g. INR")


class OrderCreateResponse(BaseModel):
    success: bool = True
    order: dict[str, Any]     # Razorpay order object, relayed verbatim


class PaymentVerifyRequest(BaseModel):
    """
    Frontend sends this after the user completes Razorpay checkout.
    All three fields come from Razorpay's checkout callback. They are typed
    loosely so a wrong type gets "Invalid payment details" from the service
    rather than a body validation error.
    """
    razorpay_payment_id: Any = None
    razorpay_order_id: Any = None
    razorpay_signature: Any = None


class MessageResponse(BaseModel):
    success: bool
    message: str


class HealthResponse(BaseModel):
    status: str
    environment: str
    version: str
