"""
VerificationRecord entity - one issued invite per wallet.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Optional

from huissier.domain.value_objects.join_event import MemberIdentity


class MemberStatus(str, Enum):
    """Status shown in the admin member listing."""

    JOINED = "joined"
    LINK_USED = "link_used"
    PENDING = "pending"


@dataclass
class VerificationRecord:
    """
    Verification record entity.

    Created once when a wallet passes verification and never overwritten.
    The member identity fields are filled in later, exactly once, when the
    invite is used to join the channel.
    """

    wallet_address: str
    invite_link: str
    issued_at: datetime
    expires_at: datetime
    consumed: bool = False
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    telegram_user_id: Optional[int] = None
    telegram_username: Optional[str] = None
    telegram_display_name: Optional[str] = None
    linked_at: Optional[datetime] = None

    def __post_init__(self):
        """Validate record data after initialization."""
        if not self.wallet_address:
            raise ValueError("Wallet address is required")
        if not self.invite_link:
            raise ValueError("Invite link is required")
        if self.expires_at <= self.issued_at:
            raise ValueError("Invite expiry must be after issuance")

        # Identity fields travel together (username may legitimately be
        # missing on Telegram, so it is not part of the check).
        linked = [self.telegram_user_id, self.telegram_display_name, self.linked_at]
        if any(v is not None for v in linked) and not all(
            v is not None for v in linked
        ):
            raise ValueError("Member identity fields must be set together")

    @classmethod
    def issue(
        cls,
        wallet_address: str,
        invite_link: str,
        ttl_seconds: int,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None,
        issued_at: Optional[datetime] = None,
    ) -> "VerificationRecord":
        """Create a fresh, unlinked record for a newly minted invite."""
        issued_at = issued_at or datetime.now(timezone.utc)
        return cls(
            wallet_address=wallet_address,
            invite_link=invite_link,
            issued_at=issued_at,
            expires_at=issued_at + timedelta(seconds=ttl_seconds),
            ip_address=ip_address,
            user_agent=user_agent,
        )

    @property
    def is_linked(self) -> bool:
        return self.telegram_user_id is not None

    def is_active(self, now: datetime) -> bool:
        """Invite unused and not yet expired."""
        return not self.consumed and now < self.expires_at

    def link(self, identity: MemberIdentity, linked_at: datetime) -> None:
        """Attach a channel member. First writer wins."""
        if self.is_linked:
            raise ValueError(f"Record {self.wallet_address} is already linked")
        self.telegram_user_id = identity.external_id
        self.telegram_username = identity.username
        self.telegram_display_name = identity.display_name
        self.linked_at = linked_at
        self.consumed = True

    @property
    def status(self) -> MemberStatus:
        if self.is_linked:
            return MemberStatus.JOINED
        if self.consumed:
            return MemberStatus.LINK_USED
        return MemberStatus.PENDING

    def to_dict(self) -> dict:
        """Convert entity to dictionary representation."""
        return {
            "wallet_address": self.wallet_address,
            "invite_link": self.invite_link,
            "issued_at": self.issued_at.isoformat(),
            "expires_at": self.expires_at.isoformat(),
            "consumed": self.consumed,
            "ip_address": self.ip_address,
            "user_agent": self.user_agent,
            "telegram_user_id": self.telegram_user_id,
            "telegram_username": self.telegram_username,
            "telegram_display_name": self.telegram_display_name,
            "linked_at": self.linked_at.isoformat() if self.linked_at else None,
            "status": self.status.value,
        }


@dataclass(frozen=True)
class LedgerStats:
    """Aggregate counts over the ledger."""

    total: int
    consumed: int
    active: int
    joined: int
