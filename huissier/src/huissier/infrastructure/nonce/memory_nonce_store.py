"""
In-memory used-nonce store.

Single-instance deployments only: a second process would not see the
nonces consumed here.
"""

import time
from typing import Callable, Dict

from huissier.domain.repositories.i_nonce_store import INonceStore


class InMemoryNonceStore(INonceStore):
    """Dict of nonce -> expiry, swept periodically."""

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._used: Dict[str, float] = {}
        self._clock = clock

    async def mark_used(self, nonce: str, ttl_seconds: int) -> bool:
        now = self._clock()
        expiry = self._used.get(nonce)
        if expiry is not None and expiry > now:
            return False
        self._used[nonce] = now + ttl_seconds
        return True

    async def sweep(self) -> int:
        now = self._clock()
        stale = [n for n, expiry in self._used.items() if expiry <= now]
        for nonce in stale:
            del self._used[nonce]
        return len(stale)

    def __len__(self) -> int:
        return len(self._used)
