"""
Integration tests for the admin endpoints.

Usage:
    python huissier/tests/integration/api/test_admin_api.py
"""

from datetime import datetime, timedelta, timezone

from jose import jwt

from huissier.testing import TEST_ADMIN_PASSWORD, ServiceTest, WalletKeypair
from huissier.testing.harness import AppHarness


class TestAdminAPI(ServiceTest):
    """Integration tests for login, listing, stats, link and delete."""

    component_name = "huissier"
    test_category = "integration"

    async def async_setup_test(self):
        self.harness = await AppHarness().start()
        self.client = self.harness.client
        self.wallet = WalletKeypair.generate()

    async def async_teardown_test(self):
        await self.harness.stop()

    async def verify_wallet(self, wallet: WalletKeypair = None):
        payload = await self.harness.signed_payload(wallet or self.wallet)
        response = await self.client.post("/api/verify", json=payload)
        assert response.status_code == 200
        return response.json()

    # ================================================================
    # Authentication
    # ================================================================

    async def test_login(self):
        response = await self.client.post(
            "/api/admin/login", json={"password": TEST_ADMIN_PASSWORD}
        )

        body = response.json()
        assert response.status_code == 200
        assert body["tokenType"] == "bearer"
        assert body["expiresIn"] == 12 * 3600
        assert body["accessToken"]

    async def test_login_wrong_password(self):
        response = await self.client.post(
            "/api/admin/login", json={"password": "guess"}
        )

        assert response.status_code == 403
        assert response.json()["code"] == "AUTHORIZATION_ERROR"

    async def test_members_requires_token(self):
        response = await self.client.get("/api/members")

        assert response.status_code == 401
        assert response.json()["code"] == "AUTHENTICATION_ERROR"
        assert response.headers["WWW-Authenticate"] == "Bearer"

    async def test_members_rejects_bad_token(self):
        response = await self.client.get(
            "/api/members", headers={"Authorization": "Bearer nonsense"}
        )

        assert response.status_code == 403

    async def test_members_rejects_expired_token(self):
        past = datetime.now(timezone.utc) - timedelta(hours=1)
        token = jwt.encode(
            {"sub": "admin", "type": "admin", "exp": past},
            self.harness.settings.JWT_SECRET_KEY,
            algorithm="HS256",
        )

        response = await self.client.get(
            "/api/members", headers={"Authorization": f"Bearer {token}"}
        )

        assert response.status_code == 403
        assert response.json()["error"] == "Admin token has expired"

    # ================================================================
    # Listing and stats
    # ================================================================

    async def test_members_listing(self):
        await self.verify_wallet()
        headers = await self.harness.admin_headers()

        response = await self.client.get("/api/members", headers=headers)

        body = response.json()
        assert response.status_code == 200
        assert body["count"] == 1
        member = body["members"][0]
        assert member["walletAddress"] == self.wallet.address
        assert member["inviteLink"] == "https://t.me/+fake1"
        assert member["status"] == "pending"
        assert member["telegramUserId"] is None

    async def test_members_page_bounds(self):
        headers = await self.harness.admin_headers()

        response = await self.client.get(
            "/api/members", params={"limit": 1000}, headers=headers
        )

        assert response.status_code == 400
        assert response.json()["code"] == "VALIDATION_ERROR"

    async def test_stats(self):
        await self.verify_wallet()
        await self.verify_wallet(WalletKeypair.generate())
        headers = await self.harness.admin_headers()

        response = await self.client.get("/api/admin/stats", headers=headers)

        assert response.json() == {
            "success": True,
            "total": 2,
            "consumed": 0,
            "active": 2,
            "joined": 0,
        }

    # ================================================================
    # Manual link
    # ================================================================

    async def test_manual_link(self):
        await self.verify_wallet()
        headers = await self.harness.admin_headers()
        body = {
            "wallet": self.wallet.address,
            "telegramUserId": 4242,
            "telegramUsername": "ada_l",
            "telegramFirstName": "Ada",
        }

        first = await self.client.post("/api/admin/link", json=body, headers=headers)
        second = await self.client.post("/api/admin/link", json=body, headers=headers)

        assert first.status_code == 200
        assert first.json()["status"] == "joined"
        assert first.json()["telegramUsername"] == "ada_l"
        assert second.status_code == 409
        assert second.json()["code"] == "ALREADY_LINKED"

    async def test_manual_link_unknown_wallet(self):
        headers = await self.harness.admin_headers()

        response = await self.client.post(
            "/api/admin/link",
            json={"wallet": self.wallet.address, "telegramUserId": 1},
            headers=headers,
        )

        assert response.status_code == 404
        assert response.json()["code"] == "NOT_FOUND"

    # ================================================================
    # Delete
    # ================================================================

    async def test_delete_then_reverify(self):
        await self.verify_wallet()

        response = await self.client.post(
            "/api/admin/delete",
            json={"wallet": self.wallet.address, "password": TEST_ADMIN_PASSWORD},
        )

        assert response.status_code == 200
        assert response.json() == {"success": True, "deleted": self.wallet.address}
        await self.verify_wallet()

    async def test_delete_wrong_password(self):
        await self.verify_wallet()

        response = await self.client.post(
            "/api/admin/delete",
            json={"wallet": self.wallet.address, "password": "guess-again"},
        )

        assert response.status_code == 403
        assert await self.harness.container.ledger.get(self.wallet.address)

    async def test_delete_unknown(self):
        response = await self.client.post(
            "/api/admin/delete",
            json={"wallet": self.wallet.address, "password": TEST_ADMIN_PASSWORD},
        )

        assert response.status_code == 404


if __name__ == "__main__":
    TestAdminAPI.run_as_main()
