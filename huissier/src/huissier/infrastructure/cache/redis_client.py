"""Redis client wrapper."""

from typing import Optional

import redis.asyncio as aioredis


class RedisClient:
    """
    Async Redis connection shared by the nonce store and rate limiter.
    """

    def __init__(
        self,
        host: str = "localhost",
        port: int = 6379,
        db: int = 0,
        password: Optional[str] = None,
    ):
        """
        Initialize Redis client configuration.

        Args:
            host: Redis server host
            port: Redis server port
            db: Redis database number (0-15)
            password: Redis password (None if no auth)
        """
        self.host = host
        self.port = port
        self.db = db
        self.password = password if password else None
        self._client: Optional[aioredis.Redis] = None

    @property
    def client(self) -> aioredis.Redis:
        if self._client is None:
            raise RuntimeError("Redis not connected. Call connect() first.")
        return self._client

    @property
    def is_connected(self) -> bool:
        return self._client is not None

    async def connect(self) -> None:
        """Establish connection to Redis server."""
        if self._client is not None:
            return

        self._client = aioredis.from_url(
            f"redis://{self.host}:{self.port}/{self.db}",
            password=self.password,
            encoding="utf-8",
            decode_responses=True,
        )
        await self._client.ping()

    async def disconnect(self) -> None:
        """Close connection to Redis server."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def set_if_absent(self, key: str, value: str, expire_seconds: int) -> bool:
        """
        Atomically store a key only if it does not exist yet.

        Returns:
            True if the key was created by this call
        """
        created = await self.client.set(key, value, nx=True, ex=expire_seconds)
        return bool(created)

    async def health_check(self) -> bool:
        """Check Redis connectivity."""
        if self._client is None:
            return False
        try:
            return bool(await self._client.ping())
        except Exception:
            return False
