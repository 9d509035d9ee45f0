"""
Channel membership value objects.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

NON_MEMBER_STATUSES = frozenset({"left", "kicked"})
MEMBER_STATUSES = frozenset({"member", "administrator"})


@dataclass(frozen=True)
class MemberIdentity:
    """Channel member identity linked to a verification record."""

    external_id: int
    username: Optional[str]
    display_name: str


@dataclass(frozen=True)
class JoinEvent:
    """
    Membership status change observed in a channel.

    Only transitions from a non-member status (left, kicked) to a member
    status (member, administrator) count as joins.
    """

    channel_id: str
    external_id: int
    username: Optional[str]
    first_name: str
    old_status: str
    new_status: str
    timestamp: datetime

    @property
    def is_join(self) -> bool:
        return (
            self.old_status in NON_MEMBER_STATUSES
            and self.new_status in MEMBER_STATUSES
        )

    def identity(self) -> MemberIdentity:
        return MemberIdentity(
            external_id=self.external_id,
            username=self.username,
            display_name=self.first_name,
        )
