"""
Domain value objects.
"""

from huissier.domain.value_objects.join_event import JoinEvent, MemberIdentity
from huissier.domain.value_objects.nonce import (
    Nonce,
    NonceRejection,
    NonceVerdict,
    build_challenge,
)
from huissier.domain.value_objects.verification_state import (
    VerificationAttempt,
    VerificationState,
)
from huissier.domain.value_objects.wallet_address import WalletAddress

__all__ = [
    "JoinEvent",
    "MemberIdentity",
    "Nonce",
    "NonceRejection",
    "NonceVerdict",
    "build_challenge",
    "VerificationAttempt",
    "VerificationState",
    "WalletAddress",
]
