"""
In-memory verification ledger.

Single-instance deployments and tests only: records live in this
process and vanish on restart.
"""

from dataclasses import replace
from datetime import datetime
from typing import Dict, List, Optional

from huissier.domain.entities.verification_record import (
    LedgerStats,
    VerificationRecord,
)
from huissier.domain.exceptions import AlreadyVerifiedError
from huissier.domain.repositories.i_verification_ledger import IVerificationLedger
from huissier.domain.value_objects.join_event import MemberIdentity


class InMemoryVerificationLedger(IVerificationLedger):
    """
    Dict-backed ledger.

    No method awaits between reading and writing the dict, so each one is
    atomic with respect to other coroutines on the same event loop.
    Callers get copies, never the stored objects.
    """

    def __init__(self):
        self._records: Dict[str, VerificationRecord] = {}

    async def get(self, wallet_address: str) -> Optional[VerificationRecord]:
        record = self._records.get(wallet_address)
        return replace(record) if record else None

    async def insert(self, record: VerificationRecord) -> VerificationRecord:
        if record.wallet_address in self._records:
            raise AlreadyVerifiedError(record.wallet_address)
        self._records[record.wallet_address] = replace(record)
        return replace(record)

    async def list_pending(
        self, since: datetime, until: datetime
    ) -> List[VerificationRecord]:
        pending = [
            replace(r)
            for r in self._records.values()
            if not r.is_linked and since <= r.issued_at <= until
        ]
        return sorted(pending, key=lambda r: r.issued_at, reverse=True)

    async def link_identity(
        self,
        wallet_address: str,
        identity: MemberIdentity,
        linked_at: datetime,
    ) -> bool:
        record = self._records.get(wallet_address)
        if record is None or record.is_linked:
            return False
        record.link(identity, linked_at)
        return True

    async def find_by_external_id(
        self, external_id: int
    ) -> Optional[VerificationRecord]:
        for record in self._records.values():
            if record.telegram_user_id == external_id:
                return replace(record)
        return None

    async def list_all(
        self, limit: int = 100, offset: int = 0
    ) -> List[VerificationRecord]:
        ordered = sorted(
            self._records.values(), key=lambda r: r.issued_at, reverse=True
        )
        return [replace(r) for r in ordered[offset : offset + limit]]

    async def delete(self, wallet_address: str) -> bool:
        return self._records.pop(wallet_address, None) is not None

    async def stats(self, now: datetime) -> LedgerStats:
        records = list(self._records.values())
        return LedgerStats(
            total=len(records),
            consumed=sum(1 for r in records if r.consumed),
            active=sum(1 for r in records if r.is_active(now)),
            joined=sum(1 for r in records if r.is_linked),
        )
