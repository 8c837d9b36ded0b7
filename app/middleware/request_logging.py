"""
Access log middleware: one line per request in Apache "combined" format,
followed by the response time, e.g.

    127.0.0.1 - - [17/Oct/2026:10:00:00 +0000] "POST /create-order HTTP/1.1" 200 312 "-" "curl/8.4.0" 182.4 ms

Written to the "app.access" logger.
"""
import logging
from datetime import datetime, timezone
from time import perf_counter

from fastapi import Request

access_logger = logging.getLogger("app.access")


def format_combined(request: Request, status_code: int, content_length: str, elapsed_ms: float) -> str:
    client = request.client.host if request.client else "-"
    timestamp = datetime.now(timezone.utc).strftime("%d/%b/%Y:%H:%M:%S %z")
    target = request.url.path
    if request.url.query:
        target = f"{target}?{request.url.query}"
    http_version = request.scope.get("http_version", "1.1")
    referrer = request.headers.get("referer", "-")
    user_agent = request.headers.get("user-agent", "-")
    return (
        f'{client} - - [{timestamp}] "{request.method} {target} HTTP/{http_version}" '
        f'{status_code} {content_length} "{referrer}" "{user_agent}" {elapsed_ms:.1f} ms'
    )


async def log_requests(request: Request, call_next):
    start = perf_counter()
    status_code = 500
    content_length = "-"
    try:
        response = await call_next(request)
        status_code = response.status_code
        content_length = response.headers.get("content-length", "-")
        return response
    finally:
        elapsed_ms = max(0.0, perf_counter() - start) * 1000
        access_logger.info(format_combined(request, status_code, content_length, elapsed_ms))
