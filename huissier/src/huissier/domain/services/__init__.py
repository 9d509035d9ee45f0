"""Domain service interfaces."""

from huissier.domain.services.i_balance_oracle import IBalanceOracle
from huissier.domain.services.i_invite_issuer import IInviteIssuer, Invite
from huissier.domain.services.i_join_event_feed import IJoinEventFeed
from huissier.domain.services.i_nonce_authority import INonceAuthority
from huissier.domain.services.i_signature_verifier import ISignatureVerifier

__all__ = [
    "IBalanceOracle",
    "IInviteIssuer",
    "IJoinEventFeed",
    "INonceAuthority",
    "ISignatureVerifier",
    "Invite",
]
