"""
Solana wallet signature verifier.

Verifies detached Ed25519 signatures over the challenge message.
"""

import base58
from nacl.exceptions import CryptoError
from nacl.signing import VerifyKey

from huissier.domain.services.i_signature_verifier import ISignatureVerifier
from huissier.infrastructure.monitoring.logger import get_logger, preview

logger = get_logger(__name__)

PUBLIC_KEY_LENGTH = 32
SIGNATURE_LENGTH = 64


class SolanaSignatureVerifier(ISignatureVerifier):
    """
    Ed25519 verification using PyNaCl.

    Fails closed: malformed keys, malformed signatures and bad
    signatures all return False.
    """

    def verify(self, message: bytes, signature: bytes, public_key: bytes) -> bool:
        if len(public_key) != PUBLIC_KEY_LENGTH or len(signature) != SIGNATURE_LENGTH:
            return False

        try:
            VerifyKey(public_key).verify(message, signature)
            return True
        except (CryptoError, ValueError, TypeError):
            return False

    def verify_encoded(self, message: str, signature: str, wallet_address: str) -> bool:
        try:
            public_key_bytes = base58.b58decode(wallet_address)
            signature_bytes = base58.b58decode(signature)
        except ValueError:
            logger.info(
                "Signature material is not valid base58",
                extra={
                    "context": {
                        "wallet": preview(wallet_address),
                        "signature": preview(signature),
                    }
                },
            )
            return False

        valid = self.verify(message.encode("utf-8"), signature_bytes, public_key_bytes)
        if not valid:
            logger.info(
                "Signature rejected",
                extra={
                    "context": {
                        "wallet": preview(wallet_address),
                        "signature": preview(signature),
                    }
                },
            )
        return valid
