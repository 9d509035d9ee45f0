"""Ledger implementations."""

from huissier.infrastructure.persistence.repositories.memory_verification_ledger import (
    InMemoryVerificationLedger,
)
from huissier.infrastructure.persistence.repositories.sql_verification_ledger import (
    SqlVerificationLedger,
)

__all__ = ["InMemoryVerificationLedger", "SqlVerificationLedger"]
