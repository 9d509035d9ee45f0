"""
Periodic cleanup of the used-nonce store.
"""

import asyncio
from typing import Optional

from huissier.domain.repositories.i_nonce_store import INonceStore
from huissier.infrastructure.monitoring.logger import get_logger

logger = get_logger(__name__)


class NonceSweeper:
    """Drops expired used-nonce entries every ``interval_seconds``."""

    def __init__(self, store: INonceStore, interval_seconds: float = 60.0):
        self.store = store
        self.interval_seconds = interval_seconds
        self._task: Optional[asyncio.Task] = None

    def start(self) -> None:
        if self._task is None or self._task.done():
            self._task = asyncio.create_task(self._run(), name="nonce-sweeper")

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None

    async def sweep_once(self) -> int:
        try:
            removed = await self.store.sweep()
        except Exception:
            logger.exception("Nonce sweep failed")
            return 0
        if removed:
            logger.debug(f"Swept {removed} expired nonces")
        return removed

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval_seconds)
            await self.sweep_once()
