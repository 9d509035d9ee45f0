"""
WalletAddress value object - Immutable Solana wallet address.
"""

from dataclasses import dataclass

BASE58_ALPHABET = "123456789ABCDEFGHJKLMNPQRSTUVWXYZabcdefghijkmnopqrstuvwxyz"


@dataclass(frozen=True)
class WalletAddress:
    """
    Value object representing a Solana wallet address.

    Business rules:
    - Base58 characters only
    - Length between 32-44 characters (32-byte ed25519 public key)

    Format checks only. Whether the text decodes to a usable public key is
    decided by the signature verifier, which fails closed.
    """

    address: str

    def __post_init__(self):
        """Validate wallet address on creation."""
        if not self.address:
            raise ValueError("Wallet address cannot be empty")

        if len(self.address) < 32 or len(self.address) > 44:
            raise ValueError(f"Invalid wallet address length: {len(self.address)}")

        if not all(c in BASE58_ALPHABET for c in self.address):
            raise ValueError("Wallet address contains invalid characters")

    def truncated(self) -> str:
        """Return truncated address for display (e.g., 'ABC123...WXYZ')."""
        return f"{self.address[:6]}...{self.address[-4:]}"

    def __str__(self) -> str:
        return self.address
