"""
Domain entities.
"""

from huissier.domain.entities.verification_record import (
    LedgerStats,
    MemberStatus,
    VerificationRecord,
)

__all__ = ["LedgerStats", "MemberStatus", "VerificationRecord"]
