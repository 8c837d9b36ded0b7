from app.schemas.payment import (
    OrderCreateRequest, OrderCreateResponse, PaymentVerifyRequest,
    MessageResponse, HealthResponse
)
