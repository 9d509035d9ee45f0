"""
Telegram invite issuer.
"""

from datetime import datetime, timedelta, timezone

from huissier.domain.exceptions.upstream import InviteIssuerError
from huissier.domain.services.i_invite_issuer import IInviteIssuer, Invite
from huissier.infrastructure.monitoring.logger import get_logger
from huissier.infrastructure.telegram.bot_client import TelegramBotClient

logger = get_logger(__name__)


class TelegramInviteIssuer(IInviteIssuer):
    """Single-use chat invite links via createChatInviteLink."""

    def __init__(self, client: TelegramBotClient):
        self.client = client

    async def create_invite(
        self,
        channel_id: str,
        name: str,
        ttl_seconds: int = 600,
        single_use: bool = True,
    ) -> Invite:
        expires_at = datetime.now(timezone.utc) + timedelta(seconds=ttl_seconds)
        payload = {
            "chat_id": channel_id,
            "name": name[:32],
            "expire_date": int(expires_at.timestamp()),
            "creates_join_request": False,
        }
        if single_use:
            payload["member_limit"] = 1

        result = await self.client.call(
            "createChatInviteLink", payload, idempotent=False
        )

        invite_link = result.get("invite_link") if isinstance(result, dict) else None
        if not invite_link:
            raise InviteIssuerError("createChatInviteLink returned no invite_link")

        logger.info(f"Invite link created ({name})")
        return Invite(url=invite_link, expires_at=expires_at)

    async def revoke_invite(self, channel_id: str, invite_url: str) -> None:
        await self.client.call(
            "revokeChatInviteLink",
            {"chat_id": channel_id, "invite_link": invite_url},
        )
        logger.info("Invite link revoked")

    async def check_ready(self) -> bool:
        try:
            me = await self.client.call("getMe")
        except InviteIssuerError as e:
            logger.error(f"Telegram bot self-test failed: {e}")
            return False

        logger.info(f"Telegram bot ready: @{me.get('username', '?')}")
        return True

    async def close(self) -> None:
        await self.client.close()
