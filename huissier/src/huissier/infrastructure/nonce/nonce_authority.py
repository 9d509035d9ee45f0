"""
Nonce authority.

Nonces are self-certifying: ``{issued_ms}.{random_hex}.{mac_hex}`` where
the MAC is HMAC-SHA256 over ``{issued_ms}.{random_hex}`` with a server
secret. Any instance holding the secret can check a nonce's origin and
age without a lookup. Age alone cannot stop a replay inside the window,
so consumption always goes through the shared used-nonce store.
"""

import hashlib
import hmac
import secrets
import time
from datetime import datetime, timezone
from typing import Callable, Optional, Tuple

from huissier.domain.repositories.i_nonce_store import INonceStore
from huissier.domain.services.i_nonce_authority import INonceAuthority
from huissier.domain.value_objects.nonce import Nonce, NonceRejection, NonceVerdict
from huissier.infrastructure.monitoring import metrics
from huissier.infrastructure.monitoring.logger import get_logger, preview

logger = get_logger(__name__)

ENTROPY_BYTES = 32
# Tolerated clock drift between instances for nonces "from the future"
MAX_CLOCK_SKEW_MS = 2_000


class NonceAuthority(INonceAuthority):
    """
    Issues and consumes challenge nonces.

    Example:
        authority = NonceAuthority(secret, InMemoryNonceStore())
        nonce = authority.issue()
        verdict = await authority.consume(nonce.value)   # accepted
        verdict = await authority.consume(nonce.value)   # REPLAYED
    """

    def __init__(
        self,
        secret: str,
        store: INonceStore,
        ttl_seconds: int = 300,
        clock: Callable[[], float] = time.time,
    ):
        """
        Initialize nonce authority.

        Args:
            secret: HMAC key shared by every instance
            store: Used-nonce store (shared by every instance)
            ttl_seconds: Freshness window
            clock: Wall clock in seconds (injectable for tests)
        """
        self._key = secret.encode("utf-8")
        self.store = store
        self.ttl_seconds = ttl_seconds
        self._clock = clock

    def _mac(self, body: str) -> str:
        return hmac.new(self._key, body.encode("ascii"), hashlib.sha256).hexdigest()

    def issue(self) -> Nonce:
        issued_ms = int(self._clock() * 1000)
        body = f"{issued_ms}.{secrets.token_hex(ENTROPY_BYTES)}"
        value = f"{body}.{self._mac(body)}"

        issued_at = datetime.fromtimestamp(issued_ms / 1000, tz=timezone.utc)
        expires_at = datetime.fromtimestamp(
            issued_ms / 1000 + self.ttl_seconds, tz=timezone.utc
        )
        metrics.nonces_issued_total.inc()
        return Nonce(value=value, issued_at=issued_at, expires_at=expires_at)

    def _parse(self, value: str) -> Optional[Tuple[int, str]]:
        """Return (issued_ms, body) for an authentic nonce, else None."""
        parts = value.split(".")
        if len(parts) != 3:
            return None

        issued, random_hex, mac = parts
        if not issued.isdigit() or len(random_hex) != ENTROPY_BYTES * 2:
            return None

        body = f"{issued}.{random_hex}"
        try:
            authentic = hmac.compare_digest(self._mac(body), mac)
        except (TypeError, UnicodeEncodeError):
            return None
        return (int(issued), body) if authentic else None

    async def consume(self, nonce_value: str) -> NonceVerdict:
        verdict = await self._consume(nonce_value)
        if verdict.accepted:
            metrics.nonce_consumptions_total.labels(result="accepted").inc()
        else:
            metrics.nonce_consumptions_total.labels(result=verdict.reason.value).inc()
            logger.info(
                f"Nonce rejected: {verdict.reason.value}",
                extra={"context": {"nonce": preview(nonce_value, 13, 6)}},
            )
        return verdict

    async def _consume(self, nonce_value: str) -> NonceVerdict:
        parsed = self._parse(nonce_value or "")
        if parsed is None:
            return NonceVerdict.reject(NonceRejection.NOT_FOUND)

        issued_ms, _ = parsed
        age_ms = int(self._clock() * 1000) - issued_ms
        if age_ms < -MAX_CLOCK_SKEW_MS:
            return NonceVerdict.reject(NonceRejection.NOT_FOUND)
        if age_ms >= self.ttl_seconds * 1000:
            return NonceVerdict.reject(NonceRejection.EXPIRED)

        # Keep the used entry at least until the nonce expires on its own
        remaining = self.ttl_seconds - max(age_ms, 0) // 1000 + 1
        if not await self.store.mark_used(nonce_value, remaining):
            return NonceVerdict.reject(NonceRejection.REPLAYED)

        return NonceVerdict.accept()
