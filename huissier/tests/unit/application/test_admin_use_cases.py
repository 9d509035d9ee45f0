"""
Unit tests for the admin use cases.

Usage:
    python huissier/tests/unit/application/test_admin_use_cases.py
"""

from datetime import datetime, timedelta, timezone

import pytest

from huissier.application.use_cases import (
    DeleteRecord,
    GetLedgerStats,
    LinkMember,
    ListMembers,
)
from huissier.domain.entities.verification_record import VerificationRecord
from huissier.domain.exceptions import (
    AuthorizationError,
    IdentityAlreadyLinkedError,
    RecordNotFoundError,
    ValidationError,
)
from huissier.domain.value_objects.join_event import MemberIdentity
from huissier.infrastructure.persistence.repositories import (
    InMemoryVerificationLedger,
)
from huissier.testing import ServiceTest

PASSWORD = "correct-horse-battery"


def record(wallet: str, minutes_ago: int = 0) -> VerificationRecord:
    return VerificationRecord.issue(
        wallet_address=wallet,
        invite_link=f"https://t.me/+{wallet}",
        ttl_seconds=600,
        issued_at=datetime.now(timezone.utc) - timedelta(minutes=minutes_ago),
    )


class TestAdminUseCases(ServiceTest):
    """Unit tests for listing, stats, delete and manual link."""

    component_name = "huissier"
    test_category = "unit"

    def setup_test(self):
        self.ledger = InMemoryVerificationLedger()

    async def test_list_members(self):
        for i in range(3):
            await self.ledger.insert(record(f"w{i}", minutes_ago=i))

        members = await ListMembers(self.ledger).execute(limit=2)

        assert [m.wallet_address for m in members] == ["w0", "w1"]

    async def test_list_members_bounds(self):
        use_case = ListMembers(self.ledger)

        for kwargs in ({"limit": 0}, {"limit": 501}, {"offset": -1}):
            with pytest.raises(ValidationError):
                await use_case.execute(**kwargs)

    async def test_stats(self):
        await self.ledger.insert(record("fresh"))
        await self.ledger.insert(record("stale", minutes_ago=20))

        stats = await GetLedgerStats(self.ledger).execute()

        assert stats.total == 2
        assert stats.active == 1
        assert stats.joined == 0

    async def test_delete_requires_password(self):
        await self.ledger.insert(record("walletA"))
        use_case = DeleteRecord(self.ledger, lambda p: p == PASSWORD)

        with pytest.raises(AuthorizationError):
            await use_case.execute("walletA", "nope")

        assert await self.ledger.get("walletA") is not None

    async def test_delete_allows_reverification(self):
        await self.ledger.insert(record("walletA"))
        use_case = DeleteRecord(self.ledger, lambda p: p == PASSWORD)

        await use_case.execute("walletA", PASSWORD)

        assert await self.ledger.get("walletA") is None
        await self.ledger.insert(record("walletA"))

    async def test_delete_unknown(self):
        use_case = DeleteRecord(self.ledger, lambda p: p == PASSWORD)

        with pytest.raises(RecordNotFoundError):
            await use_case.execute("walletA", PASSWORD)

    async def test_link_member(self):
        await self.ledger.insert(record("walletA"))
        identity = MemberIdentity(4242, None, "Ada")

        linked = await LinkMember(self.ledger).execute("walletA", identity)

        assert linked.telegram_user_id == 4242
        assert linked.telegram_username is None
        assert linked.status.value == "joined"

    async def test_link_member_twice(self):
        await self.ledger.insert(record("walletA"))
        use_case = LinkMember(self.ledger)
        await use_case.execute("walletA", MemberIdentity(1, None, "Ada"))

        with pytest.raises(IdentityAlreadyLinkedError):
            await use_case.execute("walletA", MemberIdentity(2, None, "Bob"))

    async def test_link_unknown_wallet(self):
        with pytest.raises(RecordNotFoundError):
            await LinkMember(self.ledger).execute(
                "walletA", MemberIdentity(1, None, "Ada")
            )


if __name__ == "__main__":
    TestAdminUseCases.run_as_main()
