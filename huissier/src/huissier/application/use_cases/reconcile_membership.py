"""
Reconcile Membership use case.

Links channel join events back to verification records. The invite link
itself is not reported in the join event we observe, so the link is
inferred: a join is attributed to the single record still pending inside
the reconcile window. Anything less certain is left for an admin.
"""

from dataclasses import dataclass
from datetime import timedelta
from enum import Enum
from typing import Optional

from huissier.domain.repositories.i_verification_ledger import IVerificationLedger
from huissier.domain.value_objects.join_event import JoinEvent
from huissier.infrastructure.monitoring import metrics
from huissier.infrastructure.monitoring.logger import get_logger, preview

logger = get_logger(__name__)


class ReconcileOutcome(str, Enum):
    LINKED = "linked"
    IGNORED = "ignored"
    ALREADY_LINKED = "already_linked"
    NO_CANDIDATE = "no_candidate"
    AMBIGUOUS = "ambiguous"
    LINK_CONFLICT = "link_conflict"


@dataclass(frozen=True)
class ReconcileResult:
    outcome: ReconcileOutcome
    wallet_address: Optional[str] = None
    candidates: int = 0


class ReconcileMembership:
    """
    Attribute a channel join to a verification record.

    Business rules:
    - Only non-member -> member transitions are considered
    - A member already linked to a record is never linked again
    - Exactly one pending record inside the window: link it
    - Zero or several: change nothing
    """

    def __init__(self, ledger: IVerificationLedger, window_seconds: int = 900):
        """
        Initialize use case.

        Args:
            ledger: Verification record store
            window_seconds: How far back (from the join) records may be issued
        """
        self.ledger = ledger
        self.window = timedelta(seconds=window_seconds)

    async def execute(self, event: JoinEvent) -> ReconcileResult:
        """
        Handle one membership event.

        Args:
            event: Observed status change

        Returns:
            What happened to the ledger
        """
        result = await self._reconcile(event)
        metrics.join_events_total.labels(outcome=result.outcome.value).inc()
        return result

    async def _reconcile(self, event: JoinEvent) -> ReconcileResult:
        if not event.is_join:
            return ReconcileResult(ReconcileOutcome.IGNORED)

        context = {"member": event.external_id, "username": event.username}

        existing = await self.ledger.find_by_external_id(event.external_id)
        if existing is not None:
            logger.info(
                "Rejoin of an already linked member",
                extra={
                    "context": {**context, "wallet": preview(existing.wallet_address)}
                },
            )
            return ReconcileResult(
                ReconcileOutcome.ALREADY_LINKED,
                wallet_address=existing.wallet_address,
            )

        # Only records issued before the join can have produced it
        candidates = await self.ledger.list_pending(
            event.timestamp - self.window, event.timestamp
        )

        if not candidates:
            logger.info(
                "Join without a pending verification", extra={"context": context}
            )
            return ReconcileResult(ReconcileOutcome.NO_CANDIDATE)

        if len(candidates) > 1:
            logger.warning(
                f"Ambiguous join: {len(candidates)} pending verifications",
                extra={
                    "context": {
                        **context,
                        "wallets": [preview(c.wallet_address) for c in candidates],
                    }
                },
            )
            return ReconcileResult(
                ReconcileOutcome.AMBIGUOUS, candidates=len(candidates)
            )

        wallet = candidates[0].wallet_address
        linked = await self.ledger.link_identity(
            wallet, event.identity(), linked_at=event.timestamp
        )
        if not linked:
            # Another event or an admin got there first
            logger.warning(
                "Pending record was linked concurrently",
                extra={"context": {**context, "wallet": preview(wallet)}},
            )
            return ReconcileResult(
                ReconcileOutcome.LINK_CONFLICT, wallet_address=wallet, candidates=1
            )

        logger.info(
            "Member linked to wallet",
            extra={"context": {**context, "wallet": preview(wallet)}},
        )
        return ReconcileResult(
            ReconcileOutcome.LINKED, wallet_address=wallet, candidates=1
        )
