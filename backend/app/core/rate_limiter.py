"""
Rate Limiting for the SAP Technologies API
==========================================
Implements rate limiting using slowapi.

Storage defaults to process memory; point RATE_LIMIT_STORAGE_URI at a
redis:// URL to share counters between workers.

Endpoint limits (configurable):
- /auth/login, /auth/register: AUTH_RATE_LIMIT (50 per 15 minutes)
- public forms (contact, partnership, quotes, inquiries, nominations): FORM_RATE_LIMIT (10/hour)
- /newsletter/*: NEWSLETTER_RATE_LIMIT (5/hour)
- award votes: VOTE_RATE_LIMIT
"""

from slowapi import Limiter
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded
from fastapi import Request
from fastapi.responses import JSONResponse

from app.core.config import settings
from app.core.logging_config import logger


def get_client_identifier(request: Request) -> str:
    """
    Rate limit key.

    Priority:
    1. Authenticated user ID (set on request.state by the auth dependency)
    2. IP address
    """
    user_id = getattr(request.state, 'user_id', None)
    if user_id:
        return f"user:{user_id}"

    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return f"ip:{forwarded.split(',')[0].strip()}"
    return f"ip:{get_remote_address(request)}"


limiter = Limiter(
    key_func=get_client_identifier,
    default_limits=[f"{settings.RATE_LIMIT_PER_MINUTE}/minute"],
    storage_uri=settings.RATE_LIMIT_STORAGE_URI,
    strategy="fixed-window",
    enabled=settings.RATE_LIMIT_ENABLED,
)


async def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded):
    """
    Custom handler for rate limit exceeded errors.

    Returns JSON with a Retry-After header derived from the exceeded window.
    """
    retry_after = 60
    limit = getattr(exc, "limit", None)
    if limit is not None and getattr(limit, "limit", None) is not None:
        retry_after = int(limit.limit.get_expiry())

    logger.warning(
        f"[RateLimit] Exceeded for {get_client_identifier(request)}: {exc.detail}",
        extra={"event_type": "rate_limit", "http_path": request.url.path}
    )

    return JSONResponse(
        status_code=429,
        content={
            "error": "rate_limit_exceeded",
            "detail": "Too many requests. Please try again later.",
            "limit": str(exc.detail),
            "retry_after_seconds": retry_after,
        },
        headers={"Retry-After": str(retry_after)}
    )


__all__ = ["limiter", "rate_limit_exceeded_handler", "get_client_identifier"]
