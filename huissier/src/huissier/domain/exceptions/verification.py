"""
Verification flow exceptions.

Each one terminates a verification attempt. Client-facing messages are
fixed; internal detail (nonce rejection reason, upstream errors) stays in
attributes for logging.
"""

from decimal import Decimal

from huissier.domain.exceptions.base import HuissierException
from huissier.domain.value_objects.nonce import NonceRejection


class InvalidNonceError(HuissierException):
    """Nonce unknown, expired or already consumed."""

    def __init__(self, reason: NonceRejection):
        self.reason = reason
        super().__init__("Invalid or expired nonce", code="INVALID_NONCE")


class InvalidSignatureError(HuissierException):
    """Signature does not verify against the wallet public key."""

    def __init__(self, message: str = "Invalid signature"):
        super().__init__(message, code="INVALID_SIGNATURE")


class AlreadyVerifiedError(HuissierException):
    """Wallet already holds a verification record."""

    def __init__(self, wallet_address: str):
        self.wallet_address = wallet_address
        super().__init__(
            "This wallet has already been verified",
            code="ALREADY_VERIFIED",
        )


class InsufficientBalanceError(HuissierException):
    """Token balance is below the qualifying threshold."""

    def __init__(self, balance: Decimal, required: Decimal):
        self.balance = balance
        self.required = required
        super().__init__(
            f"Insufficient token balance: have {balance:,}, "
            f"need at least {required:,}",
            code="INSUFFICIENT_BALANCE",
        )

    def details(self) -> dict:
        return {"balance": str(self.balance), "required": str(self.required)}


class IdentityAlreadyLinkedError(HuissierException):
    """Record is already linked to a channel member."""

    def __init__(self, wallet_address: str):
        self.wallet_address = wallet_address
        super().__init__(
            f"Wallet {wallet_address} is already linked to a channel member",
            code="ALREADY_LINKED",
        )
