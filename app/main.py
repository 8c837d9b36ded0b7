"""
Application entry point.

Run locally:
    razorpay-shim                      (reads HOST / PORT from settings)
    uvicorn app.main:app --reload --port 8080

In Docker:
    CMD ["razorpay-shim"]

API docs (disabled when ENVIRONMENT=production):
    http://localhost:8080/docs   (Swagger UI)
    http://localhost:8080/redoc  (ReDoc)
"""
import logging
from typing import Optional

import razorpay
import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi.errors import RateLimitExceeded

from app.config import Settings, get_settings
from app.core.exceptions import catch_unhandled_exceptions, register_exception_handlers
from app.core.logging import configure_logging
from app.core.rate_limiter import configure_limiter, rate_limit_exceeded_handler
from app.middleware.request_logging import log_requests
from app.middleware.security_headers import add_security_headers
from app.routers import payments
from app.schemas.payment import HealthResponse
from app.services.payment_store import InMemoryPaymentStore, PaymentStore
from app.services.razorpay_service import build_client

logger = logging.getLogger(__name__)

VERSION = "1.0.0"


def create_app(
    settings: Optional[Settings] = None,
    razorpay_client: Optional[razorpay.Client] = None,
    payment_store: Optional[PaymentStore] = None,
) -> FastAPI:
    """
    Build the FastAPI app. Collaborators default to the real ones; tests
    pass explicit settings, a fake Razorpay client and a fresh store.
    """
    if settings is None:
        settings = get_settings()
    configure_logging(settings.log_level)

    docs_enabled = not settings.is_production
    app = FastAPI(
        title="Razorpay Payment API",
        description=(
            "Creates Razorpay orders and verifies checkout payment signatures."
        ),
        version=VERSION,
        docs_url="/docs" if docs_enabled else None,
        redoc_url="/redoc" if docs_enabled else None,
        openapi_url="/openapi.json" if docs_enabled else None,
    )

    # ── Shared collaborators ──────────────────────────────────────────────────
    # Read by the dependencies in app.core.dependencies
    app.state.settings = settings
    app.state.razorpay_client = razorpay_client if razorpay_client is not None else build_client(settings)
    app.state.payment_store = payment_store if payment_store is not None else InMemoryPaymentStore()

    # ── Error handling ────────────────────────────────────────────────────────
    # Every error body is {"success": false, "message": ...}
    register_exception_handlers(app)

    # ── Middleware ────────────────────────────────────────────────────────────
    # Starlette wraps in reverse order of registration: the access log is
    # outermost so it also sees rate-limited and CORS preflight responses.

    # Handler crashes become the generic 500 here, inside the header/CORS/log layers
    app.middleware("http")(catch_unhandled_exceptions)

    # Rate limiter (slowapi looks for app.state.limiter); limits are applied
    # per endpoint by @api_rate_limit in the routers
    app.state.limiter = configure_limiter(settings)
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)

    app.middleware("http")(add_security_headers)

    # CORS — CORS_ORIGINS=https://yourdomain.com in production.
    # Credentials can't be combined with a wildcard origin.
    origins = settings.cors_origins_list
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials="*" not in origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.middleware("http")(log_requests)

    # ── Routers ───────────────────────────────────────────────────────────────
    app.include_router(payments.router, tags=["Payments"])

    # ── Health Check ──────────────────────────────────────────────────────────
    @app.get("/health", response_model=HealthResponse, tags=["Health"])
    def health_check():
        """
        Simple health check endpoint for load balancers and Docker health checks.
        Returns 200 if the application is running. Not rate limited.
        """
        return HealthResponse(status="ok", environment=settings.environment, version=VERSION)

    return app


app = create_app()


def run() -> None:
    """Console entry point: serve the module-level app with uvicorn."""
    settings = get_settings()
    logger.info(f"Server running in {settings.environment} mode on port {settings.port}")
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    run()
