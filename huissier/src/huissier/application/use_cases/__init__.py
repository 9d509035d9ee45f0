"""
Application use cases.
"""

from huissier.application.use_cases.admin import (
    DeleteRecord,
    GetLedgerStats,
    LinkMember,
    ListMembers,
)
from huissier.application.use_cases.issue_nonce import IssueNonce, NonceChallenge
from huissier.application.use_cases.reconcile_membership import (
    ReconcileMembership,
    ReconcileOutcome,
    ReconcileResult,
)
from huissier.application.use_cases.verify_wallet import (
    VerificationRequest,
    VerificationResult,
    VerifyWallet,
)

__all__ = [
    "IssueNonce",
    "NonceChallenge",
    "VerifyWallet",
    "VerificationRequest",
    "VerificationResult",
    "ReconcileMembership",
    "ReconcileOutcome",
    "ReconcileResult",
    "ListMembers",
    "GetLedgerStats",
    "DeleteRecord",
    "LinkMember",
]
