"""
Telegram webhook route.

Receives Bot API updates pushed by Telegram when JOIN_FEED_MODE is
``webhook``. Every authentic update gets a 200 so Telegram does not
redeliver it.
"""

import hmac
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Header

from huissier.application.use_cases.reconcile_membership import ReconcileMembership
from huissier.config.settings import get_settings
from huissier.di.dependencies import get_reconcile_membership
from huissier.domain.exceptions import AuthorizationError
from huissier.infrastructure.monitoring.logger import get_logger
from huissier.infrastructure.telegram.join_feed import parse_chat_member_update

logger = get_logger(__name__)

router = APIRouter(prefix="/telegram", tags=["Telegram"])


@router.post("/webhook", summary="Telegram update webhook")
async def telegram_webhook(
    update: Dict[str, Any],
    secret_token: Optional[str] = Header(
        None, alias="X-Telegram-Bot-Api-Secret-Token"
    ),
    use_case: ReconcileMembership = Depends(get_reconcile_membership),
) -> Dict[str, bool]:
    settings = get_settings()
    expected = settings.TELEGRAM_WEBHOOK_SECRET or ""
    if settings.JOIN_FEED_MODE != "webhook" or not expected:
        raise AuthorizationError("Webhook updates are not accepted")
    if not hmac.compare_digest(
        expected.encode("utf-8"), (secret_token or "").encode("utf-8")
    ):
        raise AuthorizationError("Invalid webhook secret")

    event = parse_chat_member_update(update, settings.TELEGRAM_CHANNEL_ID)
    if event is not None:
        try:
            await use_case.execute(event)
        except Exception:
            logger.exception(
                "Failed to reconcile webhook update",
                extra={"context": {"update_id": update.get("update_id")}},
            )
    return {"ok": True}
