"""
Domain exceptions package.
"""

# Auth exceptions
from huissier.domain.exceptions.auth import (
    AuthenticationError,
    AuthorizationError,
    ExpiredTokenError,
    InvalidTokenError,
)

# Base exceptions
from huissier.domain.exceptions.base import (
    HuissierException,
    RecordNotFoundError,
    ValidationError,
)

# Upstream exceptions
from huissier.domain.exceptions.upstream import (
    BalanceOracleError,
    InviteIssuerError,
    UpstreamError,
)

# Verification exceptions
from huissier.domain.exceptions.verification import (
    AlreadyVerifiedError,
    IdentityAlreadyLinkedError,
    InsufficientBalanceError,
    InvalidNonceError,
    InvalidSignatureError,
)

__all__ = [
    # Base
    "HuissierException",
    "RecordNotFoundError",
    "ValidationError",
    # Auth
    "AuthenticationError",
    "AuthorizationError",
    "ExpiredTokenError",
    "InvalidTokenError",
    # Upstream
    "UpstreamError",
    "BalanceOracleError",
    "InviteIssuerError",
    # Verification
    "InvalidNonceError",
    "InvalidSignatureError",
    "AlreadyVerifiedError",
    "InsufficientBalanceError",
    "IdentityAlreadyLinkedError",
]
