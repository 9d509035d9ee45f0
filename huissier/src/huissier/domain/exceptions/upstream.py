"""
Upstream (external collaborator) exceptions.

Raised on transport failures or unusable responses from the Solana RPC
node or the Telegram Bot API. Never attributable to the requester.
"""

from huissier.domain.exceptions.base import HuissierException


class UpstreamError(HuissierException):
    """Base for external service failures."""

    def __init__(self, service: str, detail: str):
        self.service = service
        self.detail = detail
        super().__init__(
            "Upstream service unavailable, please retry later",
            code="UPSTREAM_ERROR",
        )

    def __str__(self) -> str:
        return f"{self.service}: {self.detail}"


class BalanceOracleError(UpstreamError):
    """Balance lookup failed (distinct from a zero balance)."""

    def __init__(self, detail: str):
        super().__init__("solana_rpc", detail)


class InviteIssuerError(UpstreamError):
    """Telegram Bot API call failed."""

    def __init__(self, detail: str, error_code: int | None = None):
        self.error_code = error_code
        super().__init__("telegram", detail)
