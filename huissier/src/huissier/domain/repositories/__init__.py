"""Domain repository interfaces."""

from huissier.domain.repositories.i_nonce_store import INonceStore
from huissier.domain.repositories.i_verification_ledger import IVerificationLedger

__all__ = [
    "INonceStore",
    "IVerificationLedger",
]
