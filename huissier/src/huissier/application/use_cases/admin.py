"""
Admin use cases.

Operator actions on the ledger: listing, statistics, manual linking and
deletion. Authentication happens at the API boundary; deletion also
re-checks the admin password.
"""

from datetime import datetime, timezone
from typing import Callable, List

from huissier.domain.entities.verification_record import (
    LedgerStats,
    VerificationRecord,
)
from huissier.domain.exceptions import (
    AuthorizationError,
    IdentityAlreadyLinkedError,
    RecordNotFoundError,
    ValidationError,
)
from huissier.domain.repositories.i_verification_ledger import IVerificationLedger
from huissier.domain.value_objects.join_event import MemberIdentity
from huissier.infrastructure.monitoring.logger import get_logger

logger = get_logger(__name__)

MAX_PAGE_SIZE = 500


class ListMembers:
    """Paginated view of verification records, newest first."""

    def __init__(self, ledger: IVerificationLedger):
        self.ledger = ledger

    async def execute(
        self, limit: int = 100, offset: int = 0
    ) -> List[VerificationRecord]:
        if limit < 1 or limit > MAX_PAGE_SIZE:
            raise ValidationError("limit", f"must be between 1 and {MAX_PAGE_SIZE}")
        if offset < 0:
            raise ValidationError("offset", "must not be negative")
        return await self.ledger.list_all(limit=limit, offset=offset)


class GetLedgerStats:
    def __init__(self, ledger: IVerificationLedger):
        self.ledger = ledger

    async def execute(self) -> LedgerStats:
        return await self.ledger.stats(datetime.now(timezone.utc))


class DeleteRecord:
    """
    Remove a wallet's record so it can verify again.

    This is the only way a record ever leaves the ledger.
    """

    def __init__(
        self,
        ledger: IVerificationLedger,
        check_password: Callable[[str], bool],
    ):
        self.ledger = ledger
        self.check_password = check_password

    async def execute(self, wallet_address: str, password: str) -> None:
        """
        Delete a record.

        Raises:
            AuthorizationError: Wrong admin password
            RecordNotFoundError: No record for the wallet
        """
        if not self.check_password(password):
            logger.warning("Record deletion with wrong admin password")
            raise AuthorizationError()

        if not await self.ledger.delete(wallet_address):
            raise RecordNotFoundError(wallet_address)

        logger.info(
            "Verification record deleted",
            extra={"context": {"wallet": wallet_address}},
        )


class LinkMember:
    """Resolve an ambiguous or missed join by hand."""

    def __init__(self, ledger: IVerificationLedger):
        self.ledger = ledger

    async def execute(
        self, wallet_address: str, identity: MemberIdentity
    ) -> VerificationRecord:
        """
        Link a channel member to a record.

        Raises:
            RecordNotFoundError: No record for the wallet
            IdentityAlreadyLinkedError: Record already linked
        """
        record = await self.ledger.get(wallet_address)
        if record is None:
            raise RecordNotFoundError(wallet_address)

        linked = await self.ledger.link_identity(
            wallet_address, identity, linked_at=datetime.now(timezone.utc)
        )
        if not linked:
            raise IdentityAlreadyLinkedError(wallet_address)

        logger.info(
            "Member linked manually",
            extra={
                "context": {
                    "wallet": wallet_address,
                    "member": identity.external_id,
                }
            },
        )
        return await self.ledger.get(wallet_address)
