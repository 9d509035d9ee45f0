"""
Invite issuer service interface.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class Invite:
    """Single-use channel invite."""

    url: str
    expires_at: datetime


class IInviteIssuer(ABC):
    """Mints single-use, time-limited channel invites."""

    @abstractmethod
    async def create_invite(
        self,
        channel_id: str,
        name: str,
        ttl_seconds: int = 600,
        single_use: bool = True,
    ) -> Invite:
        """
        Create an invite.

        Args:
            channel_id: Target channel
            name: Label shown to channel admins
            ttl_seconds: Invite validity
            single_use: Limit the invite to one join

        Returns:
            Created invite

        Raises:
            InviteIssuerError: If the platform call failed
        """

    @abstractmethod
    async def revoke_invite(self, channel_id: str, invite_url: str) -> None:
        """
        Revoke an invite that was minted but never handed out.

        Raises:
            InviteIssuerError: If the platform call failed
        """

    @abstractmethod
    async def check_ready(self) -> bool:
        """Self-test the platform credentials. Never raises."""

    async def close(self) -> None:
        """Release network resources."""
