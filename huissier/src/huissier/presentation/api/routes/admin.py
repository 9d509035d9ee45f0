"""
Admin routes.

Provides endpoints for operators:
- POST /admin/login - Exchange the admin password for a token
- GET /members - List verification records (token)
- GET /admin/stats - Ledger counts (token)
- POST /admin/link - Link a member by hand (token)
- POST /admin/delete - Delete a record (password)
"""

from typing import Dict

from fastapi import APIRouter, Depends, Query, status

from huissier.application.use_cases.admin import (
    DeleteRecord,
    GetLedgerStats,
    LinkMember,
    ListMembers,
)
from huissier.config.settings import get_settings
from huissier.di.dependencies import (
    get_delete_record,
    get_ledger_stats,
    get_link_member,
    get_list_members,
)
from huissier.domain.exceptions import AuthorizationError
from huissier.domain.value_objects.join_event import MemberIdentity
from huissier.infrastructure.auth.jwt_handler import (
    check_admin_password,
    create_admin_token,
)
from huissier.infrastructure.monitoring.logger import get_logger
from huissier.presentation.api.middleware.auth import require_admin
from huissier.presentation.schemas.admin_schemas import (
    AdminLoginRequest,
    AdminLoginResponse,
    DeleteRecordRequest,
    DeleteRecordResponse,
    LinkMemberRequest,
    MemberListResponse,
    MemberResponse,
    StatsResponse,
)

logger = get_logger(__name__)

router = APIRouter(tags=["Admin"])


@router.post(
    "/admin/login",
    response_model=AdminLoginResponse,
    summary="Admin login",
)
async def admin_login(body: AdminLoginRequest) -> AdminLoginResponse:
    if not check_admin_password(body.password):
        logger.warning("Failed admin login")
        raise AuthorizationError()

    return AdminLoginResponse(
        access_token=create_admin_token(),
        expires_in=get_settings().JWT_EXPIRATION_HOURS * 3600,
    )


@router.get(
    "/members",
    response_model=MemberListResponse,
    summary="List verified members",
)
async def list_members(
    limit: int = Query(100, description="Page size"),
    offset: int = Query(0, description="Records to skip"),
    _admin: Dict[str, str] = Depends(require_admin),
    use_case: ListMembers = Depends(get_list_members),
) -> MemberListResponse:
    records = await use_case.execute(limit=limit, offset=offset)
    return MemberListResponse(
        count=len(records),
        members=[MemberResponse.from_entity(r) for r in records],
    )


@router.get(
    "/admin/stats",
    response_model=StatsResponse,
    summary="Ledger statistics",
)
async def ledger_stats(
    _admin: Dict[str, str] = Depends(require_admin),
    use_case: GetLedgerStats = Depends(get_ledger_stats),
) -> StatsResponse:
    return StatsResponse.from_stats(await use_case.execute())


@router.post(
    "/admin/link",
    response_model=MemberResponse,
    summary="Link a channel member to a wallet",
)
async def link_member(
    body: LinkMemberRequest,
    _admin: Dict[str, str] = Depends(require_admin),
    use_case: LinkMember = Depends(get_link_member),
) -> MemberResponse:
    record = await use_case.execute(
        body.wallet,
        MemberIdentity(
            external_id=body.telegram_user_id,
            username=body.telegram_username,
            display_name=body.telegram_first_name,
        ),
    )
    return MemberResponse.from_entity(record)


@router.post(
    "/admin/delete",
    response_model=DeleteRecordResponse,
    status_code=status.HTTP_200_OK,
    summary="Delete a verification record",
    description="Lets the wallet verify again. Requires the admin password.",
)
async def delete_record(
    body: DeleteRecordRequest,
    use_case: DeleteRecord = Depends(get_delete_record),
) -> DeleteRecordResponse:
    await use_case.execute(body.wallet, body.password)
    return DeleteRecordResponse(deleted=body.wallet)
