"""
Telegram Bot API integration.
"""

from huissier.infrastructure.telegram.bot_client import TelegramBotClient
from huissier.infrastructure.telegram.invite_issuer import TelegramInviteIssuer
from huissier.infrastructure.telegram.join_feed import (
    TelegramJoinFeed,
    parse_chat_member_update,
)

__all__ = [
    "TelegramBotClient",
    "TelegramInviteIssuer",
    "TelegramJoinFeed",
    "parse_chat_member_update",
]
