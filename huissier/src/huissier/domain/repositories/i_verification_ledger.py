"""
Verification ledger interface.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional

from huissier.domain.entities.verification_record import (
    LedgerStats,
    VerificationRecord,
)
from huissier.domain.value_objects.join_event import MemberIdentity


class IVerificationLedger(ABC):
    """
    Durable wallet -> verification record store.

    Every method is its own atomic unit. ``insert`` and ``link_identity``
    are the concurrency primitives the rest of the system relies on;
    lookups are best-effort fast paths.
    """

    @abstractmethod
    async def get(self, wallet_address: str) -> Optional[VerificationRecord]:
        """
        Get record by wallet address.

        Args:
            wallet_address: Wallet address

        Returns:
            Record if found, None otherwise
        """

    @abstractmethod
    async def insert(self, record: VerificationRecord) -> VerificationRecord:
        """
        Insert a new record. Never overwrites.

        Args:
            record: Record to persist

        Returns:
            Persisted record

        Raises:
            AlreadyVerifiedError: If the wallet already has a record
        """

    @abstractmethod
    async def list_pending(
        self, since: datetime, until: datetime
    ) -> List[VerificationRecord]:
        """
        List unlinked records issued between ``since`` and ``until``.

        Args:
            since: Lower bound on issuance time (inclusive)
            until: Upper bound on issuance time (inclusive)

        Returns:
            Records ordered by issuance time (newest first)
        """

    @abstractmethod
    async def link_identity(
        self,
        wallet_address: str,
        identity: MemberIdentity,
        linked_at: datetime,
    ) -> bool:
        """
        Attach a channel member to a record if it is still unlinked.

        Args:
            wallet_address: Wallet of the record to link
            identity: Channel member identity
            linked_at: Link timestamp

        Returns:
            True if this call linked the record, False if it was already
            linked or does not exist
        """

    @abstractmethod
    async def find_by_external_id(
        self, external_id: int
    ) -> Optional[VerificationRecord]:
        """Get the record linked to a channel member, if any."""

    @abstractmethod
    async def list_all(
        self, limit: int = 100, offset: int = 0
    ) -> List[VerificationRecord]:
        """List records, newest first."""

    @abstractmethod
    async def delete(self, wallet_address: str) -> bool:
        """
        Delete a record (administrative action only).

        Returns:
            True if a record was deleted
        """

    @abstractmethod
    async def stats(self, now: datetime) -> LedgerStats:
        """Aggregate counts for the admin dashboard."""
