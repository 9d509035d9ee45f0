"""
End-to-end test of the whole invite lifecycle.

SQL ledger and SQL nonce store on a SQLite file, real signatures, fake
Solana RPC and Telegram. Walks a holder from challenge to channel member
and back through an admin reset.

Usage:
    python huissier/tests/e2e/test_verification_flow.py
"""

import shutil
import tempfile
import time
from decimal import Decimal

from huissier.testing import (
    TEST_ADMIN_PASSWORD,
    TEST_CHANNEL_ID,
    ServiceTest,
    WalletKeypair,
    make_settings,
)
from huissier.testing.harness import AppHarness

WEBHOOK_SECRET = "e2e-webhook-secret"


def join_update(user_id: int, username: str) -> dict:
    user = {"id": user_id, "is_bot": False, "first_name": "Whale", "username": username}
    return {
        "update_id": user_id,
        "chat_member": {
            "chat": {"id": int(TEST_CHANNEL_ID), "type": "channel"},
            "from": user,
            "date": int(time.time()),
            "old_chat_member": {"status": "left", "user": user},
            "new_chat_member": {"status": "member", "user": user},
        },
    }


class TestVerificationFlow(ServiceTest):
    """Challenge, verify, join, admin review, reset, verify again."""

    component_name = "huissier"
    test_category = "e2e"

    async def async_setup_test(self):
        self.tmpdir = tempfile.mkdtemp(prefix="huissier-e2e-")
        settings = make_settings(
            DATABASE_URL=f"sqlite+aiosqlite:///{self.tmpdir}/huissier.db",
            LEDGER_BACKEND="sql",
            NONCE_BACKEND="sql",
            JOIN_FEED_MODE="webhook",
            TELEGRAM_WEBHOOK_SECRET=WEBHOOK_SECRET,
            MIN_TOKEN_BALANCE=Decimal("1000"),
        )
        self.harness = await AppHarness(settings).start()
        self.client = self.harness.client

    async def async_teardown_test(self):
        await self.harness.stop()
        shutil.rmtree(self.tmpdir, ignore_errors=True)

    async def test_full_lifecycle(self):
        whale = WalletKeypair.generate()
        minnow = WalletKeypair.generate()
        self.harness.set_balance(whale, Decimal("1000"))
        self.harness.set_balance(minnow, Decimal("999.999999"))

        # ================================================================
        # Step 1: Holder below the threshold is turned away
        # ================================================================
        self.reporter.info("Step 1: insufficient balance", context="Test")
        response = await self.client.post(
            "/api/verify", json=await self.harness.signed_payload(minnow)
        )
        assert response.status_code == 400
        assert response.json()["code"] == "INSUFFICIENT_BALANCE"

        # ================================================================
        # Step 2: Whale verifies and receives an invite
        # ================================================================
        self.reporter.info("Step 2: successful verification", context="Test")
        payload = await self.harness.signed_payload(whale)
        response = await self.client.post("/api/verify", json=payload)
        assert response.status_code == 200
        invite_link = response.json()["inviteLink"]
        assert self.harness.issuer.created[0]["single_use"] is True

        # ================================================================
        # Step 3: Replays are refused
        # ================================================================
        self.reporter.info("Step 3: replay and repeat", context="Test")
        replay = await self.client.post("/api/verify", json=payload)
        assert replay.json()["code"] == "ALREADY_VERIFIED"

        again = await self.client.post(
            "/api/verify", json=await self.harness.signed_payload(whale)
        )
        assert again.json()["code"] == "ALREADY_VERIFIED"
        assert len(self.harness.issuer.created) == 1

        # ================================================================
        # Step 4: Joining the channel links the member
        # ================================================================
        self.reporter.info("Step 4: channel join", context="Test")
        response = await self.client.post(
            "/api/telegram/webhook",
            json=join_update(777, "bigwhale"),
            headers={"X-Telegram-Bot-Api-Secret-Token": WEBHOOK_SECRET},
        )
        assert response.status_code == 200

        headers = await self.harness.admin_headers()
        members = (await self.client.get("/api/members", headers=headers)).json()
        assert members["count"] == 1
        member = members["members"][0]
        assert member["walletAddress"] == whale.address
        assert member["inviteLink"] == invite_link
        assert member["status"] == "joined"
        assert member["telegramUserId"] == 777
        assert member["telegramUsername"] == "bigwhale"

        stats = (await self.client.get("/api/admin/stats", headers=headers)).json()
        assert stats["joined"] == 1
        assert stats["consumed"] == 1
        assert stats["active"] == 0

        # ================================================================
        # Step 5: Admin reset lets the wallet verify again
        # ================================================================
        self.reporter.info("Step 5: admin delete and re-verify", context="Test")
        response = await self.client.post(
            "/api/admin/delete",
            json={"wallet": whale.address, "password": TEST_ADMIN_PASSWORD},
        )
        assert response.json() == {"success": True, "deleted": whale.address}

        response = await self.client.post(
            "/api/verify", json=await self.harness.signed_payload(whale)
        )
        assert response.status_code == 200
        assert response.json()["inviteLink"] != invite_link

    async def test_nonce_replay_across_restart(self):
        """Used nonces survive a container restart on the SQL store."""
        wallet = WalletKeypair.generate()
        self.harness.set_balance(wallet, Decimal(0))
        payload = await self.harness.signed_payload(wallet)
        await self.client.post("/api/verify", json=payload)

        settings = self.harness.settings
        await self.harness.stop()
        self.harness = await AppHarness(settings).start()
        self.client = self.harness.client
        self.harness.set_balance(wallet, Decimal("5000"))

        response = await self.client.post("/api/verify", json=payload)

        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_NONCE"


if __name__ == "__main__":
    TestVerificationFlow.run_as_main()
