"""
Used-nonce store interface.
"""

from abc import ABC, abstractmethod


class INonceStore(ABC):
    """
    Short-lived set of consumed nonces.

    A self-certifying nonce proves its own age but cannot prove it was not
    used already; this store is what makes nonces single-use.
    """

    @abstractmethod
    async def mark_used(self, nonce: str, ttl_seconds: int) -> bool:
        """
        Atomically record a nonce as consumed.

        Two concurrent calls with the same nonce must yield exactly one
        True, across every process sharing the store.

        Args:
            nonce: Nonce value
            ttl_seconds: How long the entry must be kept (at least until
                the nonce would have expired anyway)

        Returns:
            True if this call consumed it, False if already consumed
        """

    @abstractmethod
    async def sweep(self) -> int:
        """
        Drop entries whose TTL has passed.

        Returns:
            Number of entries removed
        """
