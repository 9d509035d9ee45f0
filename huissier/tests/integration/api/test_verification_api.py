"""
Integration tests for the public verification endpoints.

Full HTTP stack (middleware, error handlers, DI) with in-memory storage
and fake Solana RPC / Telegram.

Usage:
    python huissier/tests/integration/api/test_verification_api.py
"""

import asyncio
from decimal import Decimal

from huissier.testing import (
    FakeBalanceOracle,
    FakeInviteIssuer,
    ServiceTest,
    WalletKeypair,
    make_settings,
)
from huissier.testing.harness import AppHarness


class TestVerificationAPI(ServiceTest):
    """Integration tests for GET /api/nonce and POST /api/verify."""

    component_name = "huissier"
    test_category = "integration"

    async def async_setup_test(self):
        self.harness = await AppHarness().start()
        self.client = self.harness.client
        self.wallet = WalletKeypair.generate()

    async def async_teardown_test(self):
        await self.harness.stop()

    # ================================================================
    # Nonce
    # ================================================================

    async def test_nonce_shape(self):
        response = await self.client.get("/api/nonce")

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["message"] == f"Whale Verify: {body['nonce']}"
        assert body["expiresIn"] == 300

    async def test_nonces_are_distinct(self):
        responses = await asyncio.gather(
            *(self.client.get("/api/nonce") for _ in range(10))
        )

        assert len({r.json()["nonce"] for r in responses}) == 10

    async def test_request_id_echoed(self):
        response = await self.client.get("/api/nonce", headers={"X-Request-ID": "abc"})

        assert response.headers["X-Request-ID"] == "abc"

    # ================================================================
    # Verify
    # ================================================================

    async def test_verify_success(self):
        payload = await self.harness.signed_payload(self.wallet)

        response = await self.client.post(
            "/api/verify", json=payload, headers={"User-Agent": "pytest-wallet"}
        )

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["inviteLink"] == "https://t.me/+fake1"
        assert body["expiresIn"] == 600
        assert Decimal(body["balance"]) == Decimal("20000000")

        record = await self.harness.container.ledger.get(self.wallet.address)
        assert record.user_agent == "pytest-wallet"

    async def test_replayed_nonce(self):
        payload = await self.harness.signed_payload(self.wallet)
        self.harness.set_balance(self.wallet, Decimal(0))
        first = await self.client.post("/api/verify", json=payload)
        assert first.json()["code"] == "INSUFFICIENT_BALANCE"

        second = await self.client.post("/api/verify", json=payload)

        assert second.status_code == 400
        assert second.json() == {
            "success": False,
            "error": "Invalid or expired nonce",
            "code": "INVALID_NONCE",
        }

    async def test_already_verified(self):
        await self.client.post(
            "/api/verify", json=await self.harness.signed_payload(self.wallet)
        )

        response = await self.client.post(
            "/api/verify", json=await self.harness.signed_payload(self.wallet)
        )

        assert response.status_code == 400
        assert response.json()["code"] == "ALREADY_VERIFIED"

    async def test_invalid_signature(self):
        payload = await self.harness.signed_payload(self.wallet)
        payload["walletAddress"] = WalletKeypair.generate().address
        payload.pop("message")

        response = await self.client.post("/api/verify", json=payload)

        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_SIGNATURE"

    async def test_insufficient_balance_reports_amounts(self):
        self.harness.set_balance(self.wallet, Decimal("9999999.5"))
        payload = await self.harness.signed_payload(self.wallet)

        response = await self.client.post("/api/verify", json=payload)

        body = response.json()
        assert response.status_code == 400
        assert body["code"] == "INSUFFICIENT_BALANCE"
        assert body["balance"] == "9999999.5"
        assert body["required"] == "10000000"

    async def test_missing_field(self):
        payload = await self.harness.signed_payload(self.wallet)
        del payload["signature"]

        response = await self.client.post("/api/verify", json=payload)

        body = response.json()
        assert response.status_code == 400
        assert body["success"] is False
        assert body["code"] == "VALIDATION_ERROR"
        assert body["field"] == "signature"

    async def test_malformed_body(self):
        response = await self.client.post(
            "/api/verify",
            content=b"not json",
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 400
        assert response.json()["code"] == "VALIDATION_ERROR"

    async def test_malformed_wallet(self):
        payload = await self.harness.signed_payload(self.wallet)
        payload["walletAddress"] = "not-a-wallet!"

        response = await self.client.post("/api/verify", json=payload)

        assert response.status_code == 400
        assert response.json()["code"] == "VALIDATION_ERROR"

    async def test_concurrent_same_wallet(self):
        """Parallel submissions for one wallet: one invite is handed out."""
        self.harness.issuer.delay = 0.01
        payloads = [await self.harness.signed_payload(self.wallet) for _ in range(4)]

        responses = await asyncio.gather(
            *(self.client.post("/api/verify", json=p) for p in payloads)
        )

        codes = sorted(r.status_code for r in responses)
        assert codes == [200, 400, 400, 400]
        assert all(
            r.json()["code"] == "ALREADY_VERIFIED"
            for r in responses
            if r.status_code == 400
        )


class TestVerificationUpstreamFailures(ServiceTest):
    """Upstream outages surface as 502 and leave nothing behind."""

    component_name = "huissier"
    test_category = "integration"

    async def async_setup_test(self):
        self.harness = None

    async def async_teardown_test(self):
        if self.harness:
            await self.harness.stop()

    async def _verify(self, **harness_kwargs):
        self.harness = await AppHarness(**harness_kwargs).start()
        wallet = WalletKeypair.generate()
        payload = await self.harness.signed_payload(wallet)
        response = await self.harness.client.post("/api/verify", json=payload)
        return wallet, response

    async def test_rpc_down(self):
        wallet, response = await self._verify(oracle=FakeBalanceOracle(fail=True))

        assert response.status_code == 502
        assert response.json() == {
            "success": False,
            "error": "Upstream service unavailable, please retry later",
            "code": "UPSTREAM_ERROR",
        }
        assert await self.harness.container.ledger.get(wallet.address) is None

    async def test_telegram_down(self):
        wallet, response = await self._verify(
            oracle=FakeBalanceOracle(default=Decimal("1e9")),
            issuer=FakeInviteIssuer(fail=True),
        )

        assert response.status_code == 502
        assert "Bad Request" not in response.text
        assert await self.harness.container.ledger.get(wallet.address) is None

    async def test_unexpected_error_is_opaque(self):
        self.harness = await AppHarness(make_settings(DEBUG=False)).start()

        async def broken(wallet_address):
            raise RuntimeError("secret internals")

        self.harness.container.ledger.get = broken
        payload = await self.harness.signed_payload(WalletKeypair.generate())

        response = await self.harness.client.post("/api/verify", json=payload)

        assert response.status_code == 500
        assert response.json() == {
            "success": False,
            "error": "Internal server error",
            "code": "INTERNAL_ERROR",
        }


if __name__ == "__main__":
    TestVerificationAPI.run_as_main()
