"""
FastAPI dependency injection.

Provides dependencies for FastAPI routes using the DI container.
"""

from huissier.application.use_cases.admin import (
    DeleteRecord,
    GetLedgerStats,
    LinkMember,
    ListMembers,
)
from huissier.application.use_cases.issue_nonce import IssueNonce
from huissier.application.use_cases.reconcile_membership import ReconcileMembership
from huissier.application.use_cases.verify_wallet import VerifyWallet
from huissier.di.container import get_container


def get_issue_nonce() -> IssueNonce:
    return get_container().get_issue_nonce()


def get_verify_wallet() -> VerifyWallet:
    return get_container().get_verify_wallet()


def get_reconcile_membership() -> ReconcileMembership:
    return get_container().get_reconcile_membership()


def get_list_members() -> ListMembers:
    return get_container().get_list_members()


def get_ledger_stats() -> GetLedgerStats:
    return get_container().get_ledger_stats()


def get_delete_record() -> DeleteRecord:
    return get_container().get_delete_record()


def get_link_member() -> LinkMember:
    return get_container().get_link_member()
