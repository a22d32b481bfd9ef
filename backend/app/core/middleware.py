"""
SAP Technologies API - HTTP Middleware
Request logging with correlation ids, security headers and a body size cap
"""

import time
from typing import Callable, FrozenSet
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response, JSONResponse
from starlette.types import ASGIApp

from app.core.logging_config import (
    logger,
    set_request_id,
    set_user_id,
    generate_request_id,
)


QUIET_PATHS: FrozenSet[str] = frozenset({
    "/health",
    "/",
    "/favicon.ico",
    "/docs",
    "/redoc",
    "/openapi.json",
})
QUIET_PREFIXES = ("/uploads/",)

SLOW_REQUEST_MS = 1000


def should_skip_logging(path: str) -> bool:
    """Health checks, docs and static uploads are not logged"""
    return path in QUIET_PATHS or path.startswith(QUIET_PREFIXES)


def get_client_ip(request: Request) -> str:
    """First X-Forwarded-For hop when behind a proxy, else the peer address"""
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


def _level_for(status_code: int) -> str:
    if status_code >= 500:
        return "error"
    if status_code >= 400:
        return "warning"
    return "info"


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Tags each request with an id (incoming X-Request-ID or a new one),
    exposes it on the response with X-Response-Time, and logs the outcome.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get("X-Request-ID") or generate_request_id()
        set_request_id(request_id)

        method, path = request.method, request.url.path
        quiet = should_skip_logging(path)
        started = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception as exc:
            elapsed_ms = (time.perf_counter() - started) * 1000
            logger.error(
                f"x {method} {path} - {type(exc).__name__} ({elapsed_ms:.2f}ms)",
                exc_info=True,
                extra={
                    "event_type": "http_request_error",
                    "http_method": method,
                    "http_path": path,
                    "duration_ms": elapsed_ms,
                    "client_ip": get_client_ip(request),
                }
            )
            raise
        finally:
            set_user_id("")

        elapsed_ms = (time.perf_counter() - started) * 1000
        response.headers["X-Request-ID"] = request_id
        response.headers["X-Response-Time"] = f"{elapsed_ms:.2f}ms"

        if not quiet:
            getattr(logger, _level_for(response.status_code))(
                f"{method} {path} - {response.status_code} ({elapsed_ms:.2f}ms)",
                extra={
                    "event_type": "http_request",
                    "http_method": method,
                    "http_path": path,
                    "http_status": response.status_code,
                    "duration_ms": elapsed_ms,
                    "client_ip": get_client_ip(request),
                }
            )
            if elapsed_ms > SLOW_REQUEST_MS:
                logger.log_slow_request(f"{method} {path}", elapsed_ms, SLOW_REQUEST_MS)

        set_request_id("")
        return response


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Standard hardening headers on every response"""

    HEADERS = {
        "X-Content-Type-Options": "nosniff",
        "X-XSS-Protection": "1; mode=block",
        "Referrer-Policy": "strict-origin-when-cross-origin",
        "X-Frame-Options": "DENY",
    }

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        response = await call_next(request)
        response.headers.update(self.HEADERS)

        # Logos, photos and certificate images are embedded by the frontend on another origin
        if request.url.path.startswith("/uploads/"):
            response.headers["Cross-Origin-Resource-Policy"] = "cross-origin"

        return response


class RequestSizeLimitMiddleware(BaseHTTPMiddleware):
    """Rejects bodies whose declared Content-Length exceeds max_size with 413"""

    def __init__(self, app: ASGIApp, max_size: int = 10 * 1024 * 1024):
        super().__init__(app)
        self.max_size = max_size

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        declared = request.headers.get("content-length", "")
        if declared.isdigit() and int(declared) > self.max_size:
            logger.warning(
                f"Request body too large: {declared} bytes (max: {self.max_size})",
                extra={"event_type": "request_too_large", "http_path": request.url.path}
            )
            return JSONResponse(
                status_code=413,
                content={
                    "detail": f"Request body too large. Maximum size is {self.max_size // 1024 // 1024}MB",
                    "code": "PAYLOAD_TOO_LARGE",
                }
            )

        return await call_next(request)


__all__ = [
    "RequestLoggingMiddleware",
    "SecurityHeadersMiddleware",
    "RequestSizeLimitMiddleware",
    "should_skip_logging",
    "get_client_ip",
]
