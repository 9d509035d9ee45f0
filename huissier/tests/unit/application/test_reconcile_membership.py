"""
Unit tests for the ReconcileMembership use case.

Usage:
    python huissier/tests/unit/application/test_reconcile_membership.py
"""

import asyncio
from datetime import datetime, timedelta, timezone

from huissier.application.use_cases import ReconcileMembership, ReconcileOutcome
from huissier.domain.entities.verification_record import VerificationRecord
from huissier.domain.value_objects.join_event import JoinEvent, MemberIdentity
from huissier.infrastructure.persistence.repositories import (
    InMemoryVerificationLedger,
)
from huissier.testing import TEST_CHANNEL_ID, ServiceTest

JOINED_AT = datetime(2026, 1, 15, 12, 0, tzinfo=timezone.utc)


def join(user_id: int = 4242, old: str = "left", new: str = "member", **kwargs):
    return JoinEvent(
        channel_id=TEST_CHANNEL_ID,
        external_id=user_id,
        username=kwargs.get("username", f"user{user_id}"),
        first_name=kwargs.get("first_name", "Ada"),
        old_status=old,
        new_status=new,
        timestamp=kwargs.get("timestamp", JOINED_AT),
    )


class TestReconcileMembership(ServiceTest):
    """Unit tests for join attribution."""

    component_name = "huissier"
    test_category = "unit"

    def setup_test(self):
        self.ledger = InMemoryVerificationLedger()
        self.reconcile = ReconcileMembership(self.ledger, window_seconds=900)

    async def add_record(self, wallet: str, minutes_before_join: int):
        await self.ledger.insert(
            VerificationRecord.issue(
                wallet_address=wallet,
                invite_link=f"https://t.me/+{wallet}",
                ttl_seconds=600,
                issued_at=JOINED_AT - timedelta(minutes=minutes_before_join),
            )
        )

    async def test_single_candidate_linked(self):
        await self.add_record("walletA", minutes_before_join=2)

        result = await self.reconcile.execute(join(username="ada_l"))

        assert result.outcome == ReconcileOutcome.LINKED
        assert result.wallet_address == "walletA"
        record = await self.ledger.get("walletA")
        assert record.telegram_user_id == 4242
        assert record.telegram_username == "ada_l"
        assert record.telegram_display_name == "Ada"
        assert record.linked_at == JOINED_AT
        assert record.consumed

    async def test_no_candidate(self):
        result = await self.reconcile.execute(join())

        assert result.outcome == ReconcileOutcome.NO_CANDIDATE

    async def test_record_outside_window_ignored(self):
        await self.add_record("walletA", minutes_before_join=16)

        result = await self.reconcile.execute(join())

        assert result.outcome == ReconcileOutcome.NO_CANDIDATE
        assert not (await self.ledger.get("walletA")).is_linked

    async def test_record_issued_after_join_ignored(self):
        await self.add_record("walletLater", minutes_before_join=-10)

        result = await self.reconcile.execute(join())

        assert result.outcome == ReconcileOutcome.NO_CANDIDATE
        assert not (await self.ledger.get("walletLater")).is_linked

    async def test_backlogged_join_skips_later_records(self):
        await self.add_record("walletA", minutes_before_join=3)
        await self.add_record("walletLater", minutes_before_join=-1)

        result = await self.reconcile.execute(join())

        assert result.outcome == ReconcileOutcome.LINKED
        assert result.wallet_address == "walletA"
        assert not (await self.ledger.get("walletLater")).is_linked

    async def test_ambiguous_leaves_ledger_untouched(self):
        await self.add_record("walletA", minutes_before_join=2)
        await self.add_record("walletB", minutes_before_join=3)

        result = await self.reconcile.execute(join())

        assert result.outcome == ReconcileOutcome.AMBIGUOUS
        assert result.candidates == 2
        for wallet in ("walletA", "walletB"):
            assert not (await self.ledger.get(wallet)).is_linked

    async def test_linked_records_are_not_candidates(self):
        await self.add_record("walletA", minutes_before_join=2)
        await self.add_record("walletB", minutes_before_join=3)
        await self.ledger.link_identity(
            "walletB", MemberIdentity(7, "bob", "Bob"), JOINED_AT
        )

        result = await self.reconcile.execute(join())

        assert result.outcome == ReconcileOutcome.LINKED
        assert result.wallet_address == "walletA"

    async def test_non_join_transitions_ignored(self):
        await self.add_record("walletA", minutes_before_join=2)

        for old, new in (
            ("member", "left"),
            ("member", "kicked"),
            ("member", "administrator"),
            ("restricted", "member"),
        ):
            result = await self.reconcile.execute(join(old=old, new=new))
            assert result.outcome == ReconcileOutcome.IGNORED

        assert not (await self.ledger.get("walletA")).is_linked

    async def test_kicked_member_rejoining_counts_as_join(self):
        await self.add_record("walletA", minutes_before_join=2)

        result = await self.reconcile.execute(join(old="kicked", new="member"))

        assert result.outcome == ReconcileOutcome.LINKED

    async def test_rejoin_of_linked_member_changes_nothing(self):
        await self.add_record("walletA", minutes_before_join=5)
        await self.reconcile.execute(join())
        await self.add_record("walletB", minutes_before_join=1)

        result = await self.reconcile.execute(join())

        assert result.outcome == ReconcileOutcome.ALREADY_LINKED
        assert result.wallet_address == "walletA"
        assert not (await self.ledger.get("walletB")).is_linked

    async def test_concurrent_joins_link_once(self):
        """Two members racing for one pending record: one link."""
        await self.add_record("walletA", minutes_before_join=2)

        results = await asyncio.gather(
            self.reconcile.execute(join(user_id=1)),
            self.reconcile.execute(join(user_id=2)),
        )

        outcomes = sorted(r.outcome.value for r in results)
        linked = [r for r in results if r.outcome == ReconcileOutcome.LINKED]
        assert len(linked) == 1
        assert outcomes.count("linked") == 1
        assert (await self.ledger.get("walletA")).telegram_user_id in (1, 2)


if __name__ == "__main__":
    TestReconcileMembership.run_as_main()
