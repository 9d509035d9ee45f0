"""
Admin authentication exceptions.
"""

from huissier.domain.exceptions.base import HuissierException


class AuthenticationError(HuissierException):
    """Raised when admin credentials are missing."""

    def __init__(self, message: str = "Authentication required"):
        super().__init__(message, code="AUTHENTICATION_ERROR")


class AuthorizationError(HuissierException):
    """Raised when admin credentials are wrong or expired."""

    def __init__(self, message: str = "Invalid credentials"):
        super().__init__(message, code="AUTHORIZATION_ERROR")


class ExpiredTokenError(AuthorizationError):
    """Raised when admin token has expired."""

    def __init__(self):
        super().__init__("Admin token has expired")


class InvalidTokenError(AuthorizationError):
    """Raised when admin token is malformed or invalid."""

    def __init__(self):
        super().__init__("Invalid admin token")
