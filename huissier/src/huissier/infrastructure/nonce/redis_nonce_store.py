"""
Redis used-nonce store.

``SET key 1 NX EX ttl`` is atomic across every instance sharing the
Redis server, and Redis expires the keys on its own.
"""

from huissier.domain.repositories.i_nonce_store import INonceStore
from huissier.infrastructure.cache.redis_client import RedisClient


class RedisNonceStore(INonceStore):
    """Used-nonce set backed by Redis keys."""

    def __init__(self, redis_client: RedisClient, key_prefix: str = "huissier:nonce:"):
        self.redis = redis_client
        self.key_prefix = key_prefix

    async def mark_used(self, nonce: str, ttl_seconds: int) -> bool:
        return await self.redis.set_if_absent(
            f"{self.key_prefix}{nonce}", "1", max(1, ttl_seconds)
        )

    async def sweep(self) -> int:
        # Keys expire server-side
        return 0
