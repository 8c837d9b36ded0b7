"""
slowapi rate limiter instance.
Import `limiter` into routers and decorate endpoints with @api_rate_limit.

IMPORTANT: Every rate-limited endpoint MUST have `request: Request` as a parameter
(slowapi needs it to extract the client IP). The decorator must be placed
BELOW the @router.xxx decorator, not above it.

Example:
    @router.post("/create-order")
    @api_rate_limit
    def create_order(request: Request, ...):
        ...

All decorated endpoints share one budget per client IP (scope "api"), a fixed
window kept in the limits in-memory storage with atomic counters. The window
size comes from RATE_LIMIT; create_app() installs it with configure_limiter().
Endpoints without the decorator (health check) are never throttled.
"""
from fastapi import Request
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from app.config import Settings
from app.core.exceptions import error_response

RATE_LIMITED_MESSAGE = "Too many requests, please try again later."
API_SCOPE = "api"

limiter = Limiter(
    key_func=get_remote_address,
    strategy="fixed-window",
)

_rate_limit = Settings.model_fields["rate_limit"].default


def current_rate_limit() -> str:
    """Read on every request, so configure_limiter() takes effect immediately."""
    return _rate_limit


def configure_limiter(settings: Settings) -> Limiter:
    """Apply the configured limit and start every client with a fresh window."""
    global _rate_limit
    _rate_limit = settings.rate_limit
    limiter.reset()
    return limiter


api_rate_limit = limiter.shared_limit(current_rate_limit, scope=API_SCOPE)


def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    return error_response(429, RATE_LIMITED_MESSAGE)
