"""
Rate Limiter implementation.

Uses Redis for distributed rate limiting across multiple instances.
Implements sliding window algorithm for accurate rate limiting.
"""

import time
from dataclasses import dataclass
from typing import Optional, Tuple
from uuid import uuid4

from huissier.infrastructure.cache.redis_client import RedisClient


@dataclass(frozen=True)
class RateLimitRule:
    """Allowed number of requests per sliding window."""

    limit: int
    window_seconds: int


class RateLimiter:
    """
    Distributed rate limiter using Redis sliding window.

    Each request is a sorted-set member scored by its timestamp; the
    window count is the set size after trimming old members.
    """

    def __init__(self, redis_client: RedisClient, key_prefix: str = "ratelimit"):
        """
        Initialize rate limiter.

        Args:
            redis_client: Connected Redis client
            key_prefix: Namespace for rate limit keys
        """
        self.redis = redis_client
        self.key_prefix = key_prefix

    def _make_key(self, identifier: str, scope: str) -> str:
        return f"{self.key_prefix}:{scope}:{identifier}"

    async def check_rate_limit(
        self,
        identifier: str,
        scope: str,
        rule: RateLimitRule,
        now: Optional[float] = None,
    ) -> Tuple[bool, dict]:
        """
        Check if request is within rate limit, counting it if allowed.

        Args:
            identifier: Client identifier (e.g. "ip:1.2.3.4")
            scope: Limited endpoint group (e.g. "verify")
            rule: Limit and window
            now: Current timestamp (defaults to time.time())

        Returns:
            Tuple of (allowed: bool, info: dict with limit details)
        """
        key = self._make_key(identifier, scope)
        now = time.time() if now is None else now
        window_start = now - rule.window_seconds

        pipe = self.redis.client.pipeline()
        pipe.zremrangebyscore(key, 0, window_start)
        pipe.zcard(key)
        pipe.zrange(key, 0, 0, withscores=True)
        _, current_count, oldest = await pipe.execute()

        allowed = current_count < rule.limit

        if allowed:
            pipe = self.redis.client.pipeline()
            pipe.zadd(key, {f"{now}:{uuid4().hex}": now})
            pipe.expire(key, rule.window_seconds + 1)
            await pipe.execute()
            current_count += 1

        # Window frees up when the oldest counted request ages out
        oldest_score = oldest[0][1] if oldest else now
        reset_time = int(oldest_score + rule.window_seconds)

        info = {
            "limit": rule.limit,
            "remaining": max(0, rule.limit - current_count),
            "reset": reset_time,
            "retry_after": None if allowed else max(1, int(reset_time - now)),
        }
        return allowed, info

    async def reset_limit(self, identifier: str, scope: str) -> None:
        """Reset rate limit for identifier/scope."""
        await self.redis.client.delete(self._make_key(identifier, scope))
