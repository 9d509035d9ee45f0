"""
Rate Limiting Middleware for FastAPI.

Per-IP limits on the public verification endpoints, shared across
instances through Redis.
"""

from typing import Dict, Optional

from fastapi import Request, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from huissier.config.settings import get_settings
from huissier.di.container import get_container
from huissier.infrastructure.monitoring.logger import get_logger
from huissier.infrastructure.rate_limiting.rate_limiter import (
    RateLimiter,
    RateLimitRule,
)
from huissier.presentation.api.middleware.error_handler import error_body

logger = get_logger(__name__)


def get_client_ip(request: Request) -> str:
    """
    Client IP, honouring the first X-Forwarded-For hop.

    Deployments must sit behind a proxy that overwrites this header.
    """
    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        ip = forwarded_for.split(",")[0].strip()
        if ip:
            return ip
    return request.client.host if request.client else "unknown"


class RateLimitMiddleware(BaseHTTPMiddleware):
    """
    Rate limiting middleware.

    Only the paths listed in ``rules`` are limited. The limiter is looked
    up lazily because Redis connects during application startup, after
    middleware is built. A Redis failure lets the request through.
    """

    def __init__(self, app, rules: Optional[Dict[str, RateLimitRule]] = None):
        super().__init__(app)
        if rules is None:
            settings = get_settings()
            rules = {
                "/api/nonce": RateLimitRule(
                    settings.NONCE_RATE_LIMIT, settings.NONCE_RATE_WINDOW_SECONDS
                ),
                "/api/verify": RateLimitRule(
                    settings.VERIFY_RATE_LIMIT, settings.VERIFY_RATE_WINDOW_SECONDS
                ),
            }
        self.rules = rules

    def _limiter(self) -> Optional[RateLimiter]:
        container = get_container()
        if container._redis_client is None or not container.redis_client.is_connected:
            return None
        return container.rate_limiter

    async def dispatch(self, request: Request, call_next):
        path = request.url.path.rstrip("/")
        rule = self.rules.get(path)
        limiter = self._limiter() if rule else None
        if rule is None or limiter is None:
            return await call_next(request)

        identifier = get_client_ip(request)
        try:
            allowed, info = await limiter.check_rate_limit(
                identifier=identifier, scope=path, rule=rule
            )
        except Exception as e:
            logger.warning(f"Rate limiter unavailable, allowing request: {e}")
            return await call_next(request)

        headers = {
            "X-RateLimit-Limit": str(info["limit"]),
            "X-RateLimit-Remaining": str(info["remaining"]),
            "X-RateLimit-Reset": str(info["reset"]),
        }

        if not allowed:
            headers["Retry-After"] = str(info["retry_after"])
            logger.info(
                "Rate limit exceeded",
                extra={"context": {"path": path, "ip": identifier}},
            )
            return JSONResponse(
                status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                content=error_body(
                    "Too many requests. Please try again later.",
                    "RATE_LIMITED",
                    retryAfter=info["retry_after"],
                ),
                headers=headers,
            )

        response = await call_next(request)
        for key, value in headers.items():
            response.headers[key] = value
        return response
