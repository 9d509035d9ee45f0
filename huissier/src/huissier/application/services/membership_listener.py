"""
Membership listener.

Background loop that pulls channel membership changes and hands each one
to the reconciler.
"""

import asyncio
from typing import Optional

from huissier.application.use_cases.reconcile_membership import ReconcileMembership
from huissier.domain.exceptions import UpstreamError
from huissier.domain.services.i_join_event_feed import IJoinEventFeed
from huissier.infrastructure.monitoring import metrics
from huissier.infrastructure.monitoring.logger import get_logger

logger = get_logger(__name__)


class MembershipListener:
    """
    Polls a join feed at a fixed interval.

    A failed fetch or a failed event is logged and the loop carries on;
    only ``stop()`` ends it.
    """

    def __init__(
        self,
        feed: IJoinEventFeed,
        reconcile: ReconcileMembership,
        interval_seconds: float = 5.0,
    ):
        self.feed = feed
        self.reconcile = reconcile
        self.interval_seconds = interval_seconds
        self._task: Optional[asyncio.Task] = None
        self._stopping = asyncio.Event()

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.is_running:
            return
        self._stopping.clear()
        self._task = asyncio.create_task(self._run(), name="membership-listener")
        logger.info(
            f"Membership listener started (interval: {self.interval_seconds}s)"
        )

    async def stop(self) -> None:
        if self._task is None:
            return
        self._stopping.set()
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        logger.info("Membership listener stopped")

    async def poll_once(self) -> int:
        """
        Fetch and reconcile one batch.

        Returns:
            Number of events processed
        """
        try:
            events = await self.feed.fetch()
        except UpstreamError as e:
            metrics.join_feed_errors_total.inc()
            logger.warning(f"Join feed fetch failed: {e}")
            return 0

        for event in events:
            try:
                await self.reconcile.execute(event)
            except Exception:
                logger.exception(
                    "Failed to reconcile membership event",
                    extra={"context": {"member": event.external_id}},
                )
        return len(events)

    async def _run(self) -> None:
        while not self._stopping.is_set():
            await self.poll_once()
            try:
                await asyncio.wait_for(
                    self._stopping.wait(), timeout=self.interval_seconds
                )
            except asyncio.TimeoutError:
                pass
