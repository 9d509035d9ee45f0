"""
Nonce challenge value objects.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional


class NonceRejection(str, Enum):
    """Why a nonce was refused. Internal only, never sent to clients."""

    NOT_FOUND = "not_found"
    EXPIRED = "expired"
    REPLAYED = "replayed"


@dataclass(frozen=True)
class Nonce:
    """
    Issued challenge token.

    The value is self-certifying: ``{issued_ms}.{random_hex}.{mac_hex}``.
    """

    value: str
    issued_at: datetime
    expires_at: datetime

    @property
    def ttl_seconds(self) -> int:
        return int((self.expires_at - self.issued_at).total_seconds())


@dataclass(frozen=True)
class NonceVerdict:
    """Outcome of a consume attempt."""

    accepted: bool
    reason: Optional[NonceRejection] = None

    @classmethod
    def accept(cls) -> "NonceVerdict":
        return cls(accepted=True)

    @classmethod
    def reject(cls, reason: NonceRejection) -> "NonceVerdict":
        return cls(accepted=False, reason=reason)


def build_challenge(prefix: str, nonce_value: str) -> str:
    """
    Canonical message the wallet must sign for a nonce.

    Example:
        >>> build_challenge("Whale Verify: ", "1700000000000.ab12.cd34")
        'Whale Verify: 1700000000000.ab12.cd34'
    """
    return f"{prefix}{nonce_value}"
