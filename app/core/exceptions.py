"""
Centralised custom exceptions and the handlers that render them.

Every error leaving the API has the same shape:
    {"success": false, "message": "<human readable message>"}

Expected failures are raised as PaymentAPIException subclasses from the
service layer; the handlers registered in register_exception_handlers()
turn them (and framework errors like unmatched routes) into that body.
"""
import logging
from typing import Optional

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)

ROUTE_NOT_FOUND_MESSAGE = "API route not found"
INVALID_BODY_MESSAGE = "Invalid request body"
UNHANDLED_ERROR_MESSAGE = "Something went wrong! Please try again later."


class PaymentAPIException(HTTPException):
    """Base class: an HTTP status plus the message returned to the client."""

    def __init__(self, status_code: int, message: str):
        super().__init__(status_code=status_code, detail=message)

    @property
    def message(self) -> str:
        return self.detail


class MissingOrderFieldsException(PaymentAPIException):
    def __init__(self):
        super().__init__(status.HTTP_400_BAD_REQUEST, "Amount and currency are required")


class InvalidAmountException(PaymentAPIException):
    def __init__(self):
        super().__init__(status.HTTP_400_BAD_REQUEST, "Amount must be a valid number")


class OrderCreationException(PaymentAPIException):
    def __init__(self):
        super().__init__(status.HTTP_500_INTERNAL_SERVER_ERROR, "Unable to create order")


class InvalidPaymentDetailsException(PaymentAPIException):
    def __init__(self):
        super().__init__(status.HTTP_400_BAD_REQUEST, "Invalid payment details")


class PaymentVerificationFailedException(PaymentAPIException):
    def __init__(self):
        super().__init__(status.HTTP_400_BAD_REQUEST, "Payment verification failed")


class PaymentVerificationErrorException(PaymentAPIException):
    def __init__(self):
        super().__init__(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "Server error in payment verification",
        )


def error_response(status_code: int, message: str, headers: Optional[dict] = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "message": message},
        headers=headers,
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if isinstance(exc, PaymentAPIException):
        return error_response(exc.status_code, exc.message)

    # Starlette raises 404 for unknown paths and 405 for known paths hit with
    # the wrong method. Both are "no such API route" from the client's view.
    if exc.status_code in (status.HTTP_404_NOT_FOUND, status.HTTP_405_METHOD_NOT_ALLOWED):
        return error_response(status.HTTP_404_NOT_FOUND, ROUTE_NOT_FOUND_MESSAGE)

    return error_response(exc.status_code, str(exc.detail), headers=getattr(exc, "headers", None))


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.info(f"Rejected body for {request.method} {request.url.path}: {exc.errors()}")
    return error_response(status.HTTP_400_BAD_REQUEST, INVALID_BODY_MESSAGE)


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    # Full traceback stays in the server log; the client only sees a generic message
    logger.error(
        f"Unhandled error on {request.method} {request.url.path}",
        exc_info=(type(exc), exc, exc.__traceback__),
    )
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, UNHANDLED_ERROR_MESSAGE)


async def catch_unhandled_exceptions(request: Request, call_next):
    """
    Innermost http middleware: turns handler crashes into the generic 500 so
    the response still passes through security headers, CORS and the access log.
    """
    try:
        return await call_next(request)
    except Exception as exc:
        return await unhandled_exception_handler(request, exc)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    # Last resort for failures inside the middleware stack itself
    app.add_exception_handler(Exception, unhandled_exception_handler)
