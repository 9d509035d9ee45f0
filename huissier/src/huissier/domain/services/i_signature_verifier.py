"""
Signature verifier service interface.
"""

from abc import ABC, abstractmethod


class ISignatureVerifier(ABC):
    """
    Detached signature verification for wallet key pairs.

    Implementations never raise on bad input: any decode or verification
    problem is a plain False.
    """

    @abstractmethod
    def verify(self, message: bytes, signature: bytes, public_key: bytes) -> bool:
        """
        Verify raw bytes.

        Args:
            message: Exact signed message, no normalization applied
            signature: Detached signature bytes
            public_key: Signer public key bytes

        Returns:
            True if the signature is valid, False otherwise
        """

    @abstractmethod
    def verify_encoded(self, message: str, signature: str, wallet_address: str) -> bool:
        """
        Verify wire-encoded values.

        Args:
            message: Signed message text (UTF-8 encoded before verifying)
            signature: Signature as sent by the wallet (base58)
            wallet_address: Wallet address, which is the encoded public key

        Returns:
            True if the signature is valid, False otherwise
        """
