"""
Issue Nonce use case.
"""

from dataclasses import dataclass

from huissier.domain.services.i_nonce_authority import INonceAuthority
from huissier.domain.value_objects.nonce import build_challenge


@dataclass(frozen=True)
class NonceChallenge:
    """Nonce plus the exact message the wallet must sign."""

    nonce: str
    message: str
    expires_in: int


class IssueNonce:
    """Hand out a fresh challenge. No side effects besides metrics."""

    def __init__(self, nonce_authority: INonceAuthority, challenge_prefix: str):
        self.nonce_authority = nonce_authority
        self.challenge_prefix = challenge_prefix

    def execute(self) -> NonceChallenge:
        nonce = self.nonce_authority.issue()
        return NonceChallenge(
            nonce=nonce.value,
            message=build_challenge(self.challenge_prefix, nonce.value),
            expires_in=nonce.ttl_seconds,
        )
