"""
Test support shared by Huissier test suites.
"""

from huissier.testing.base import ServiceTest
from huissier.testing.fakes import FakeBalanceOracle, FakeInviteIssuer, FakeJoinFeed
from huissier.testing.settings import (
    TEST_ADMIN_PASSWORD,
    TEST_CHANNEL_ID,
    make_settings,
)
from huissier.testing.wallets import WalletKeypair

__all__ = [
    "ServiceTest",
    "FakeBalanceOracle",
    "FakeInviteIssuer",
    "FakeJoinFeed",
    "WalletKeypair",
    "make_settings",
    "TEST_ADMIN_PASSWORD",
    "TEST_CHANNEL_ID",
]
