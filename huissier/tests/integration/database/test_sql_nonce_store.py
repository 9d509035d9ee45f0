"""
Integration tests for SqlNonceStore.

Usage:
    python huissier/tests/integration/database/test_sql_nonce_store.py
"""

import asyncio
import shutil
import tempfile

from sqlalchemy import func, select

from huissier.infrastructure.nonce import NonceAuthority, SqlNonceStore
from huissier.infrastructure.persistence.database import Database
from huissier.infrastructure.persistence.models import UsedNonceModel
from huissier.testing import ServiceTest


class TestSqlNonceStore(ServiceTest):
    """Integration tests for the SQL used-nonce store."""

    component_name = "huissier"
    test_category = "integration"

    async def async_setup_test(self):
        self.tmpdir = tempfile.mkdtemp(prefix="huissier-")
        self.database = Database(f"sqlite+aiosqlite:///{self.tmpdir}/nonces.db")
        await self.database.connect()
        await self.database.create_tables()
        self.store = SqlNonceStore(self.database)

    async def async_teardown_test(self):
        await self.database.disconnect()
        shutil.rmtree(self.tmpdir, ignore_errors=True)

    async def count_rows(self) -> int:
        async with self.database.session() as session:
            result = await session.execute(
                select(func.count()).select_from(UsedNonceModel)
            )
            return result.scalar_one()

    async def test_mark_used_once(self):
        assert await self.store.mark_used("nonce-a", 300)
        assert not await self.store.mark_used("nonce-a", 300)
        assert await self.store.mark_used("nonce-b", 300)

    async def test_concurrent_mark_used(self):
        results = await asyncio.gather(
            *(self.store.mark_used("nonce-a", 300) for _ in range(8))
        )

        assert results.count(True) == 1

    async def test_sweep_removes_only_expired(self):
        await self.store.mark_used("expired", 0)
        await self.store.mark_used("live", 300)

        removed = await self.store.sweep()

        assert removed == 1
        assert await self.count_rows() == 1

    async def test_authority_with_two_instances(self):
        """Instances sharing the database and secret reject each other's replays."""
        first = NonceAuthority("shared-secret-0123456789", self.store)
        second = NonceAuthority(
            "shared-secret-0123456789", SqlNonceStore(self.database)
        )
        nonce = first.issue()

        verdicts = await asyncio.gather(
            first.consume(nonce.value), second.consume(nonce.value)
        )

        assert sorted(v.accepted for v in verdicts) == [False, True]


if __name__ == "__main__":
    TestSqlNonceStore.run_as_main()
