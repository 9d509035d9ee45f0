"""
Admin API schemas.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from huissier.domain.entities.verification_record import (
    LedgerStats,
    VerificationRecord,
)


class AdminLoginRequest(BaseModel):
    password: str = Field(..., min_length=1, max_length=256)


class AdminLoginResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    access_token: str = Field(..., alias="accessToken")
    token_type: str = Field(default="bearer", alias="tokenType")
    expires_in: int = Field(..., alias="expiresIn", description="Seconds")


class MemberResponse(BaseModel):
    """One verification record as shown to admins."""

    model_config = ConfigDict(populate_by_name=True)

    wallet_address: str = Field(..., alias="walletAddress")
    invite_link: str = Field(..., alias="inviteLink")
    issued_at: datetime = Field(..., alias="issuedAt")
    expires_at: datetime = Field(..., alias="expiresAt")
    consumed: bool
    status: str
    telegram_user_id: Optional[int] = Field(None, alias="telegramUserId")
    telegram_username: Optional[str] = Field(None, alias="telegramUsername")
    telegram_display_name: Optional[str] = Field(None, alias="telegramDisplayName")
    linked_at: Optional[datetime] = Field(None, alias="linkedAt")
    ip_address: Optional[str] = Field(None, alias="ipAddress")

    @classmethod
    def from_entity(cls, record: VerificationRecord) -> "MemberResponse":
        return cls(
            wallet_address=record.wallet_address,
            invite_link=record.invite_link,
            issued_at=record.issued_at,
            expires_at=record.expires_at,
            consumed=record.consumed,
            status=record.status.value,
            telegram_user_id=record.telegram_user_id,
            telegram_username=record.telegram_username,
            telegram_display_name=record.telegram_display_name,
            linked_at=record.linked_at,
            ip_address=record.ip_address,
        )


class MemberListResponse(BaseModel):
    success: bool = True
    count: int
    members: List[MemberResponse]


class StatsResponse(BaseModel):
    success: bool = True
    total: int
    consumed: int
    active: int
    joined: int

    @classmethod
    def from_stats(cls, stats: LedgerStats) -> "StatsResponse":
        return cls(
            total=stats.total,
            consumed=stats.consumed,
            active=stats.active,
            joined=stats.joined,
        )


class DeleteRecordRequest(BaseModel):
    """Deletion re-checks the admin password."""

    wallet: str = Field(..., min_length=1, max_length=64)
    password: str = Field(..., min_length=1, max_length=256)


class LinkMemberRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    wallet: str = Field(..., min_length=1, max_length=64)
    telegram_user_id: int = Field(..., alias="telegramUserId", gt=0)
    telegram_username: Optional[str] = Field(
        None, alias="telegramUsername", max_length=64
    )
    telegram_first_name: str = Field(
        "", alias="telegramFirstName", max_length=128
    )


class DeleteRecordResponse(BaseModel):
    success: bool = True
    deleted: str = Field(..., description="Wallet whose record was removed")
