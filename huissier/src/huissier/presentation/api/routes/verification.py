"""
Public verification routes.

Provides endpoints for the wallet verification flow:
- GET /nonce - Issue a challenge
- POST /verify - Submit a signed challenge, receive an invite
"""

from fastapi import APIRouter, Depends, Request, status

from huissier.application.use_cases.issue_nonce import IssueNonce
from huissier.application.use_cases.verify_wallet import (
    VerificationRequest,
    VerifyWallet,
)
from huissier.di.dependencies import get_issue_nonce, get_verify_wallet
from huissier.presentation.api.middleware.rate_limit_middleware import (
    get_client_ip,
)
from huissier.presentation.schemas.verification_schemas import (
    NonceResponse,
    VerifyRequest,
    VerifyResponse,
)

router = APIRouter(tags=["Verification"])

MAX_USER_AGENT_LENGTH = 512


@router.get(
    "/nonce",
    response_model=NonceResponse,
    status_code=status.HTTP_200_OK,
    summary="Issue a challenge nonce",
)
async def get_nonce(
    use_case: IssueNonce = Depends(get_issue_nonce),
) -> NonceResponse:
    challenge = use_case.execute()
    return NonceResponse(
        nonce=challenge.nonce,
        message=challenge.message,
        expires_in=challenge.expires_in,
    )


@router.post(
    "/verify",
    response_model=VerifyResponse,
    status_code=status.HTTP_200_OK,
    summary="Verify token ownership",
    description=(
        "Checks the signed challenge and token balance, then returns a "
        "single-use channel invite. One invite per wallet, ever."
    ),
)
async def verify(
    body: VerifyRequest,
    request: Request,
    use_case: VerifyWallet = Depends(get_verify_wallet),
) -> VerifyResponse:
    """
    Verify wallet and issue invite.

    Raises:
        ValidationError: 400 on missing/malformed fields
        InvalidNonceError / InvalidSignatureError: 400
        AlreadyVerifiedError / InsufficientBalanceError: 400
        UpstreamError: 502 if Solana RPC or Telegram is unavailable
    """
    user_agent = request.headers.get("User-Agent")
    result = await use_case.execute(
        VerificationRequest(
            wallet_address=body.wallet_address,
            signature=body.signature,
            nonce=body.nonce,
            message=body.message,
            ip_address=get_client_ip(request),
            user_agent=user_agent[:MAX_USER_AGENT_LENGTH] if user_agent else None,
        )
    )
    return VerifyResponse(
        invite_link=result.invite_link,
        balance=str(result.balance),
        expires_in=result.expires_in,
    )
