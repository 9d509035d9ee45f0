"""
Verification API schemas.

Field names on the wire are camelCase.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class NonceResponse(BaseModel):
    """Fresh challenge for the wallet to sign."""

    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    nonce: str = Field(..., description="Single-use nonce")
    message: str = Field(..., description="Exact message to sign")
    expires_in: int = Field(..., alias="expiresIn", description="Seconds")


class VerifyRequest(BaseModel):
    """Signed challenge submitted by the wallet holder."""

    model_config = ConfigDict(populate_by_name=True)

    wallet_address: str = Field(
        ...,
        alias="walletAddress",
        max_length=64,
        description="Solana wallet address (base58)",
    )
    signature: str = Field(
        ...,
        max_length=256,
        description="Ed25519 signature over the challenge (base58)",
    )
    nonce: str = Field(..., max_length=256, description="Nonce from /api/nonce")
    message: Optional[str] = Field(
        None,
        max_length=512,
        description="Optional echo of the signed message",
    )


class VerifyResponse(BaseModel):
    """Successful verification."""

    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    invite_link: str = Field(..., alias="inviteLink")
    balance: str = Field(..., description="Observed token balance")
    expires_in: int = Field(..., alias="expiresIn", description="Seconds")
