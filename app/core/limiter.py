import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from app.core.config import settings

logger = logging.getLogger(__name__)

# Per-IP budgets for the unauthenticated account routes
REGISTER_LIMIT = "5/hour"
LOGIN_LIMIT = "10/minute"

# Limits are shared across workers through Redis; tests keep them in memory and off
limiter = Limiter(
    key_func=get_remote_address,
    storage_uri="memory://" if settings.is_testing else settings.redis_url,
    strategy="fixed-window",
    enabled=not settings.is_testing,
)


async def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    ip = request.client.host if request.client else "unknown"
    logger.warning(f"Rate limit exceeded by IP {ip} on {request.url.path} ({exc.detail})")
    return JSONResponse(
        status_code=429,
        content={"detail": f"Too many requests: limit is {exc.detail}."},
    )


def init_limiter_error_handlers(app: FastAPI) -> None:
    """Attach the limiter to ``app`` and answer throttled calls with JSON."""
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
