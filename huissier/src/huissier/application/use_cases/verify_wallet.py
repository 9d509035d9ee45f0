"""
Verify Wallet use case.

The verification orchestrator: turns a signed nonce from a token holder
into a single-use channel invite, recording exactly one invite per wallet.
"""

import asyncio
import time
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional, Set, Tuple

from huissier.domain.entities.verification_record import VerificationRecord
from huissier.domain.exceptions import (
    AlreadyVerifiedError,
    HuissierException,
    InsufficientBalanceError,
    InvalidNonceError,
    InvalidSignatureError,
    ValidationError,
)
from huissier.domain.repositories.i_verification_ledger import IVerificationLedger
from huissier.domain.services.i_balance_oracle import IBalanceOracle
from huissier.domain.services.i_invite_issuer import IInviteIssuer, Invite
from huissier.domain.services.i_nonce_authority import INonceAuthority
from huissier.domain.services.i_signature_verifier import ISignatureVerifier
from huissier.domain.value_objects.nonce import build_challenge
from huissier.domain.value_objects.verification_state import (
    VerificationAttempt,
    VerificationState,
)
from huissier.domain.value_objects.wallet_address import WalletAddress
from huissier.infrastructure.monitoring import metrics
from huissier.infrastructure.monitoring.logger import get_logger, preview

logger = get_logger(__name__)


@dataclass(frozen=True)
class VerificationRequest:
    """Submitted proof of wallet ownership."""

    wallet_address: Optional[str]
    signature: Optional[str]
    nonce: Optional[str]
    message: Optional[str] = None
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None


@dataclass(frozen=True)
class VerificationResult:
    """Successful verification."""

    invite_link: str
    balance: Decimal
    expires_in: int
    expires_at: datetime


class VerifyWallet:
    """
    Verify token ownership and issue a channel invite.

    Business rules (checked in this order, first failure wins):
    1. Wallet must not already hold a record
    2. Nonce must be authentic, fresh and unused (consumed here even if a
       later step fails)
    3. Signature over the canonical challenge must verify
    4. Token balance must reach the threshold (equality passes)
    5. Invite is minted
    6. Record is inserted; the unique wallet constraint is the final word
       on "already verified"

    The early ledger read in step 1 only saves oracle and Telegram calls.
    """

    def __init__(
        self,
        ledger: IVerificationLedger,
        nonce_authority: INonceAuthority,
        signature_verifier: ISignatureVerifier,
        balance_oracle: IBalanceOracle,
        invite_issuer: IInviteIssuer,
        channel_id: str,
        token_mint: str,
        min_balance: Decimal,
        challenge_prefix: str = "Whale Verify: ",
        invite_ttl_seconds: int = 600,
        invite_name_prefix: str = "Whale",
    ):
        """
        Initialize use case with dependencies.

        Args:
            ledger: Verification record store
            nonce_authority: Nonce issuance/consumption
            signature_verifier: Wallet signature checks
            balance_oracle: On-chain balance reads
            invite_issuer: Channel invite minting
            channel_id: Gated channel
            token_mint: Token that qualifies holders
            min_balance: Threshold in whole token units
            challenge_prefix: Prefix of the signed challenge message
            invite_ttl_seconds: Invite validity
            invite_name_prefix: Invite label prefix shown to channel admins
        """
        self.ledger = ledger
        self.nonce_authority = nonce_authority
        self.signature_verifier = signature_verifier
        self.balance_oracle = balance_oracle
        self.invite_issuer = invite_issuer
        self.channel_id = channel_id
        self.token_mint = token_mint
        self.min_balance = min_balance
        self.challenge_prefix = challenge_prefix
        self.invite_ttl_seconds = invite_ttl_seconds
        self.invite_name_prefix = invite_name_prefix
        # Issue+persist tasks still running after their request was cancelled
        self._detached: Set[asyncio.Task] = set()

    async def execute(self, request: VerificationRequest) -> VerificationResult:
        """
        Execute wallet verification.

        Args:
            request: Wallet, signature and nonce from the client

        Returns:
            Invite details and observed balance

        Raises:
            ValidationError: Missing or malformed field
            AlreadyVerifiedError: Wallet already has a record
            InvalidNonceError: Nonce unknown, expired or replayed
            InvalidSignatureError: Signature does not verify
            InsufficientBalanceError: Balance below threshold
            UpstreamError: Solana RPC or Telegram failure
        """
        start = time.monotonic()
        attempt = VerificationAttempt(wallet_address=request.wallet_address or "")

        try:
            result = await self._run(request, attempt)
        except HuissierException as e:
            attempt.reject(e.code)
            metrics.verifications_total.labels(outcome=e.code.lower()).inc()
            logger.info(
                f"Verification rejected: {e.code}",
                extra={
                    "context": {
                        "wallet": attempt.wallet_address,
                        "state": attempt.history[-1].value,
                    }
                },
            )
            raise
        except Exception:
            attempt.reject("INTERNAL_ERROR")
            metrics.verifications_total.labels(outcome="internal_error").inc()
            logger.exception(
                "Verification failed unexpectedly",
                extra={"context": {"wallet": attempt.wallet_address}},
            )
            raise
        finally:
            metrics.verification_duration_seconds.observe(time.monotonic() - start)

        metrics.verifications_total.labels(outcome="verified").inc()
        return result

    async def _run(
        self, request: VerificationRequest, attempt: VerificationAttempt
    ) -> VerificationResult:
        wallet = self._validate(request)

        # 1. Idempotency fast path
        if await self.ledger.get(wallet.address) is not None:
            raise AlreadyVerifiedError(wallet.address)

        # 2. Nonce (consumed from here on, whatever happens next)
        verdict = await self.nonce_authority.consume(request.nonce)
        if not verdict.accepted:
            raise InvalidNonceError(verdict.reason)
        attempt.advance(VerificationState.NONCE_VALIDATED)

        # 3. Signature over the canonical challenge
        challenge = build_challenge(self.challenge_prefix, request.nonce)
        if request.message is not None and request.message != challenge:
            raise ValidationError("message", "does not match the nonce challenge")
        if not self.signature_verifier.verify_encoded(
            challenge, request.signature, wallet.address
        ):
            raise InvalidSignatureError()
        attempt.advance(VerificationState.SIGNATURE_VALIDATED)

        # 4. Balance
        balance = await self.balance_oracle.get_balance(
            wallet.address, self.token_mint
        )
        if balance < self.min_balance:
            raise InsufficientBalanceError(balance, self.min_balance)
        attempt.advance(VerificationState.BALANCE_CHECKED)

        # 5-6. Once an invite exists it must end up recorded (or revoked),
        # even if the client disconnects and this request is cancelled.
        task = asyncio.ensure_future(
            self._issue_and_persist(request, wallet, attempt)
        )
        try:
            record, invite = await asyncio.shield(task)
        except asyncio.CancelledError:
            self._detached.add(task)
            task.add_done_callback(self._on_detached_done)
            raise

        logger.info(
            "Wallet verified",
            extra={"context": {"wallet": wallet.truncated(), "balance": str(balance)}},
        )
        return VerificationResult(
            invite_link=record.invite_link,
            balance=balance,
            expires_in=self.invite_ttl_seconds,
            expires_at=record.expires_at,
        )

    def _validate(self, request: VerificationRequest) -> WalletAddress:
        """Presence and format checks, before anything stateful happens."""
        for field, value in (
            ("walletAddress", request.wallet_address),
            ("signature", request.signature),
            ("nonce", request.nonce),
        ):
            if not value or not value.strip():
                raise ValidationError(field, "field required")

        try:
            return WalletAddress(request.wallet_address.strip())
        except ValueError as e:
            raise ValidationError("walletAddress", str(e)) from e

    async def _issue_and_persist(
        self,
        request: VerificationRequest,
        wallet: WalletAddress,
        attempt: VerificationAttempt,
    ) -> Tuple[VerificationRecord, Invite]:
        invite = await self.invite_issuer.create_invite(
            self.channel_id,
            name=f"{self.invite_name_prefix} {wallet.address[:8]}",
            ttl_seconds=self.invite_ttl_seconds,
            single_use=True,
        )
        attempt.advance(VerificationState.INVITE_ISSUED)

        record = VerificationRecord.issue(
            wallet_address=wallet.address,
            invite_link=invite.url,
            ttl_seconds=self.invite_ttl_seconds,
            ip_address=request.ip_address,
            user_agent=request.user_agent,
        )

        try:
            saved = await self.ledger.insert(record)
        except AlreadyVerifiedError:
            logger.warning(
                "Concurrent verification won the insert, revoking spare invite",
                extra={"context": {"wallet": wallet.truncated()}},
            )
            await self._revoke_quietly(invite)
            raise
        except Exception:
            logger.exception(
                "Could not persist verification record, revoking invite",
                extra={"context": {"wallet": wallet.truncated()}},
            )
            await self._revoke_quietly(invite)
            raise

        attempt.advance(VerificationState.PERSISTED)
        return saved, invite

    def _on_detached_done(self, task: asyncio.Task) -> None:
        """Report how an issue+persist task ended once nobody awaits it."""
        self._detached.discard(task)
        if task.cancelled():
            logger.error("Detached invite issuance was cancelled")
            return

        exc = task.exception()
        if exc is None:
            record, _ = task.result()
            logger.info(
                "Verification recorded after the request was cancelled",
                extra={"context": {"wallet": preview(record.wallet_address)}},
            )
        elif isinstance(exc, HuissierException):
            logger.warning(f"Detached verification ended with {exc.code}: {exc}")
        else:
            logger.error(
                "Detached verification failed",
                exc_info=(type(exc), exc, exc.__traceback__),
            )

    async def _revoke_quietly(self, invite: Invite) -> None:
        try:
            await self.invite_issuer.revoke_invite(self.channel_id, invite.url)
        except HuissierException as e:
            # Unrecorded invites still expire on their own
            logger.error(f"Failed to revoke unrecorded invite: {e}")
