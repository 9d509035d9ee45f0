"""
SQL used-nonce store.

The primary key on used_nonces.nonce makes the insert the atomic
consume primitive; a duplicate insert means the nonce was replayed.
"""

from datetime import datetime, timedelta, timezone

from sqlalchemy import delete
from sqlalchemy.exc import IntegrityError

from huissier.domain.repositories.i_nonce_store import INonceStore
from huissier.infrastructure.persistence.database import Database
from huissier.infrastructure.persistence.models import UsedNonceModel


class SqlNonceStore(INonceStore):
    """Used-nonce set backed by a table."""

    def __init__(self, database: Database):
        self.database = database

    async def mark_used(self, nonce: str, ttl_seconds: int) -> bool:
        expires_at = datetime.now(timezone.utc) + timedelta(seconds=ttl_seconds)
        try:
            async with self.database.session() as session:
                session.add(UsedNonceModel(nonce=nonce, expires_at=expires_at))
                await session.flush()
        except IntegrityError:
            return False
        return True

    async def sweep(self) -> int:
        stmt = delete(UsedNonceModel).where(
            UsedNonceModel.expires_at <= datetime.now(timezone.utc)
        )
        async with self.database.session() as session:
            result = await session.execute(stmt)
        return result.rowcount or 0
