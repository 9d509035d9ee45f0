"""
Telegram join event feed.

Turns Bot API ``chat_member`` updates into JoinEvents, either pulled with
getUpdates (polling) or pushed to the webhook route.
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from huissier.domain.services.i_join_event_feed import IJoinEventFeed
from huissier.domain.value_objects.join_event import JoinEvent
from huissier.infrastructure.monitoring.logger import get_logger
from huissier.infrastructure.telegram.bot_client import TelegramBotClient

logger = get_logger(__name__)


def _matches_channel(chat: Dict[str, Any], channel_id: str) -> bool:
    if str(chat.get("id")) == channel_id:
        return True
    username = chat.get("username")
    return bool(username) and f"@{username}".lower() == channel_id.lower()


def parse_chat_member_update(
    update: Dict[str, Any], channel_id: str
) -> Optional[JoinEvent]:
    """
    Extract a membership change for ``channel_id`` from a Bot API update.

    Returns None for other update kinds, other chats and malformed
    payloads.
    """
    member_update = update.get("chat_member")
    if not isinstance(member_update, dict):
        return None

    try:
        chat = member_update["chat"]
        if not _matches_channel(chat, channel_id):
            return None

        new_member = member_update["new_chat_member"]
        old_member = member_update["old_chat_member"]
        user = new_member["user"]

        return JoinEvent(
            channel_id=channel_id,
            external_id=int(user["id"]),
            username=user.get("username"),
            first_name=user.get("first_name") or "",
            old_status=old_member["status"],
            new_status=new_member["status"],
            timestamp=datetime.fromtimestamp(
                int(member_update["date"]), tz=timezone.utc
            ),
        )
    except (KeyError, TypeError, ValueError) as e:
        logger.warning(f"Ignoring malformed chat_member update: {e!r}")
        return None


class TelegramJoinFeed(IJoinEventFeed):
    """
    getUpdates-based feed.

    The offset only advances after a successful fetch, so a transport
    failure just means the same updates are fetched next time.
    Polling and a registered webhook are mutually exclusive on Telegram's
    side.
    """

    def __init__(self, client: TelegramBotClient, channel_id: str):
        self.client = client
        self.channel_id = channel_id
        self._offset: Optional[int] = None

    async def fetch(self) -> List[JoinEvent]:
        payload: Dict[str, Any] = {
            "timeout": 0,
            "allowed_updates": ["chat_member"],
        }
        if self._offset is not None:
            payload["offset"] = self._offset

        updates = await self.client.call("getUpdates", payload) or []

        events: List[JoinEvent] = []
        for update in updates:
            update_id = update.get("update_id")
            if isinstance(update_id, int):
                self._offset = max(self._offset or 0, update_id + 1)
            event = parse_chat_member_update(update, self.channel_id)
            if event is not None:
                events.append(event)
        return events
