"""
Nonce authority service interface.
"""

from abc import ABC, abstractmethod

from huissier.domain.value_objects.nonce import Nonce, NonceVerdict


class INonceAuthority(ABC):
    """Issues challenge nonces and enforces single use."""

    @abstractmethod
    def issue(self) -> Nonce:
        """Create a fresh nonce with at least 256 bits of entropy."""

    @abstractmethod
    async def consume(self, nonce_value: str) -> NonceVerdict:
        """
        Accept a nonce exactly once.

        Concurrent calls with the same value yield exactly one accepted
        verdict. Rejections carry the reason (not found, expired,
        replayed) for logging.
        """
