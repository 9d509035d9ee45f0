"""
Verification ledger implementation using SQLAlchemy.
"""

from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import IntegrityError

from huissier.domain.entities.verification_record import (
    LedgerStats,
    VerificationRecord,
)
from huissier.domain.exceptions import AlreadyVerifiedError
from huissier.domain.repositories.i_verification_ledger import IVerificationLedger
from huissier.domain.value_objects.join_event import MemberIdentity
from huissier.infrastructure.persistence.database import Database
from huissier.infrastructure.persistence.models import VerificationRecordModel


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """SQLite hands back naive datetimes; everything is stored as UTC."""
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=timezone.utc)


class SqlVerificationLedger(IVerificationLedger):
    """
    SQLAlchemy implementation of the verification ledger.

    Each method runs in its own transaction, so a successful ``insert``
    is committed before the caller moves on. The unique index on
    wallet_address is what guarantees one record per wallet.
    """

    def __init__(self, database: Database):
        """
        Initialize ledger with database manager.

        Args:
            database: Connected Database instance
        """
        self.database = database

    async def get(self, wallet_address: str) -> Optional[VerificationRecord]:
        stmt = select(VerificationRecordModel).where(
            VerificationRecordModel.wallet_address == wallet_address
        )
        async with self.database.session() as session:
            result = await session.execute(stmt)
            model = result.scalar_one_or_none()

        return self._to_entity(model) if model else None

    async def insert(self, record: VerificationRecord) -> VerificationRecord:
        model = VerificationRecordModel(
            wallet_address=record.wallet_address,
            invite_link=record.invite_link,
            issued_at=record.issued_at,
            expires_at=record.expires_at,
            consumed=record.consumed,
            ip_address=record.ip_address,
            user_agent=record.user_agent,
        )

        try:
            async with self.database.session() as session:
                session.add(model)
                await session.flush()
        except IntegrityError as e:
            raise AlreadyVerifiedError(record.wallet_address) from e

        return self._to_entity(model)

    async def list_pending(
        self, since: datetime, until: datetime
    ) -> List[VerificationRecord]:
        stmt = (
            select(VerificationRecordModel)
            .where(
                VerificationRecordModel.telegram_user_id.is_(None),
                VerificationRecordModel.issued_at >= since,
                VerificationRecordModel.issued_at <= until,
            )
            .order_by(VerificationRecordModel.issued_at.desc())
        )
        async with self.database.session() as session:
            result = await session.execute(stmt)
            models = result.scalars().all()

        return [self._to_entity(m) for m in models]

    async def link_identity(
        self,
        wallet_address: str,
        identity: MemberIdentity,
        linked_at: datetime,
    ) -> bool:
        # Conditional update: only an unlinked row can be claimed
        stmt = (
            update(VerificationRecordModel)
            .where(
                VerificationRecordModel.wallet_address == wallet_address,
                VerificationRecordModel.telegram_user_id.is_(None),
            )
            .values(
                telegram_user_id=identity.external_id,
                telegram_username=identity.username,
                telegram_display_name=identity.display_name,
                linked_at=linked_at,
                consumed=True,
            )
        )
        async with self.database.session() as session:
            result = await session.execute(stmt)

        return result.rowcount == 1

    async def find_by_external_id(
        self, external_id: int
    ) -> Optional[VerificationRecord]:
        stmt = select(VerificationRecordModel).where(
            VerificationRecordModel.telegram_user_id == external_id
        )
        async with self.database.session() as session:
            result = await session.execute(stmt)
            model = result.scalars().first()

        return self._to_entity(model) if model else None

    async def list_all(
        self, limit: int = 100, offset: int = 0
    ) -> List[VerificationRecord]:
        stmt = (
            select(VerificationRecordModel)
            .order_by(VerificationRecordModel.issued_at.desc())
            .limit(limit)
            .offset(offset)
        )
        async with self.database.session() as session:
            result = await session.execute(stmt)
            models = result.scalars().all()

        return [self._to_entity(m) for m in models]

    async def delete(self, wallet_address: str) -> bool:
        stmt = delete(VerificationRecordModel).where(
            VerificationRecordModel.wallet_address == wallet_address
        )
        async with self.database.session() as session:
            result = await session.execute(stmt)

        return result.rowcount > 0

    async def stats(self, now: datetime) -> LedgerStats:
        m = VerificationRecordModel
        stmt = select(
            func.count(m.id),
            func.count(m.id).filter(m.consumed.is_(True)),
            func.count(m.id).filter(m.consumed.is_(False), m.expires_at > now),
            func.count(m.id).filter(m.telegram_user_id.is_not(None)),
        )
        async with self.database.session() as session:
            result = await session.execute(stmt)
            total, consumed, active, joined = result.one()

        return LedgerStats(
            total=total, consumed=consumed, active=active, joined=joined
        )

    @staticmethod
    def _to_entity(model: VerificationRecordModel) -> VerificationRecord:
        """Convert ORM model to domain entity."""
        return VerificationRecord(
            wallet_address=model.wallet_address,
            invite_link=model.invite_link,
            issued_at=_as_utc(model.issued_at),
            expires_at=_as_utc(model.expires_at),
            consumed=bool(model.consumed),
            ip_address=model.ip_address,
            user_agent=model.user_agent,
            telegram_user_id=model.telegram_user_id,
            telegram_username=model.telegram_username,
            telegram_display_name=model.telegram_display_name,
            linked_at=_as_utc(model.linked_at),
        )
