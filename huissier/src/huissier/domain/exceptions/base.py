"""
Base domain exceptions.
"""


class HuissierException(Exception):
    """Base exception for all Huissier domain errors."""

    def __init__(self, message: str, code: str | None = None):
        self.message = message
        self.code = code or self.__class__.__name__
        super().__init__(self.message)

    def details(self) -> dict:
        """Extra fields safe to return to the client."""
        return {}


class ValidationError(HuissierException):
    """Raised when request input is missing or malformed."""

    def __init__(self, field: str, reason: str):
        self.field = field
        message = f"Validation failed for {field}: {reason}"
        super().__init__(message, code="VALIDATION_ERROR")


class RecordNotFoundError(HuissierException):
    """Raised when no verification record exists for a wallet."""

    def __init__(self, wallet_address: str):
        self.wallet_address = wallet_address
        super().__init__(
            f"No verification record for wallet {wallet_address}",
            code="NOT_FOUND",
        )
