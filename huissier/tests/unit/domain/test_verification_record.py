"""
Unit tests for VerificationRecord entity.

Usage:
    python huissier/tests/unit/domain/test_verification_record.py
"""

from datetime import datetime, timedelta, timezone

import pytest

from huissier.domain.entities.verification_record import (
    MemberStatus,
    VerificationRecord,
)
from huissier.domain.value_objects.join_event import MemberIdentity
from huissier.testing import ServiceTest

WALLET = "7xKXtg2CW87d97TXJSDpbD5jBkheTqA83TZRuJosgAsU"
ISSUED = datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)


class TestVerificationRecord(ServiceTest):
    """Unit tests for VerificationRecord entity."""

    component_name = "huissier"
    test_category = "unit"

    def _record(self, **overrides) -> VerificationRecord:
        values = dict(
            wallet_address=WALLET,
            invite_link="https://t.me/+abc",
            ttl_seconds=600,
            issued_at=ISSUED,
        )
        values.update(overrides)
        return VerificationRecord.issue(**values)

    # ================================================================
    # Creation tests
    # ================================================================

    def test_issue_sets_ten_minute_expiry(self):
        """Invite expiry is issuance + ttl."""
        record = self._record()

        assert record.expires_at == ISSUED + timedelta(minutes=10)
        assert record.consumed is False
        assert record.is_linked is False
        assert record.status == MemberStatus.PENDING

    def test_issue_defaults_to_now(self):
        before = datetime.now(timezone.utc)
        record = VerificationRecord.issue(WALLET, "https://t.me/+abc", 600)

        assert record.issued_at >= before
        assert record.issued_at.tzinfo is not None

    def test_reject_empty_wallet(self):
        with pytest.raises(ValueError, match="Wallet address is required"):
            self._record(wallet_address="")

    def test_reject_expiry_before_issuance(self):
        with pytest.raises(ValueError, match="after issuance"):
            VerificationRecord(
                wallet_address=WALLET,
                invite_link="https://t.me/+abc",
                issued_at=ISSUED,
                expires_at=ISSUED,
            )

    def test_reject_partial_identity(self):
        """Identity fields are all set or all empty."""
        self.reporter.info("Testing partial identity rejection", context="Test")

        with pytest.raises(ValueError, match="set together"):
            VerificationRecord(
                wallet_address=WALLET,
                invite_link="https://t.me/+abc",
                issued_at=ISSUED,
                expires_at=ISSUED + timedelta(minutes=10),
                telegram_user_id=42,
            )

    # ================================================================
    # Linking tests
    # ================================================================

    def test_link_sets_identity_and_consumes(self):
        record = self._record()
        linked_at = ISSUED + timedelta(minutes=2)

        record.link(MemberIdentity(42, "whale", "Moby"), linked_at)

        assert record.telegram_user_id == 42
        assert record.telegram_username == "whale"
        assert record.telegram_display_name == "Moby"
        assert record.linked_at == linked_at
        assert record.consumed is True
        assert record.status == MemberStatus.JOINED

    def test_link_twice_rejected(self):
        record = self._record()
        record.link(MemberIdentity(42, None, "Moby"), ISSUED)

        with pytest.raises(ValueError, match="already linked"):
            record.link(MemberIdentity(43, None, "Other"), ISSUED)

        assert record.telegram_user_id == 42

    def test_link_used_status(self):
        record = self._record()
        record.consumed = True

        assert record.status == MemberStatus.LINK_USED

    def test_is_active(self):
        record = self._record()

        assert record.is_active(ISSUED + timedelta(minutes=9))
        assert not record.is_active(ISSUED + timedelta(minutes=10))

        record.consumed = True
        assert not record.is_active(ISSUED + timedelta(minutes=1))

    def test_to_dict(self):
        data = self._record().to_dict()

        assert data["wallet_address"] == WALLET
        assert data["status"] == "pending"
        assert data["linked_at"] is None
        assert data["issued_at"] == ISSUED.isoformat()


if __name__ == "__main__":
    TestVerificationRecord.run_as_main()
