"""
Global error handling.

Every failure leaves the service as
``{"success": false, "error": <message>, "code": <CODE>, ...details}``.
"""

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from huissier.config.settings import get_settings
from huissier.domain.exceptions import HuissierException, UpstreamError
from huissier.infrastructure.monitoring.logger import get_logger

logger = get_logger(__name__)

STATUS_CODE_MAP = {
    "VALIDATION_ERROR": status.HTTP_400_BAD_REQUEST,
    "INVALID_NONCE": status.HTTP_400_BAD_REQUEST,
    "INVALID_SIGNATURE": status.HTTP_400_BAD_REQUEST,
    "ALREADY_VERIFIED": status.HTTP_400_BAD_REQUEST,
    "INSUFFICIENT_BALANCE": status.HTTP_400_BAD_REQUEST,
    "AUTHENTICATION_ERROR": status.HTTP_401_UNAUTHORIZED,
    "AUTHORIZATION_ERROR": status.HTTP_403_FORBIDDEN,
    "NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "ALREADY_LINKED": status.HTTP_409_CONFLICT,
    "UPSTREAM_ERROR": status.HTTP_502_BAD_GATEWAY,
}


def error_body(message: str, code: str, **details) -> dict:
    return {"success": False, "error": message, "code": code, **details}


async def huissier_exception_handler(
    request: Request, exc: HuissierException
) -> JSONResponse:
    """
    Handle Huissier domain exceptions.

    Converts domain exceptions to appropriate HTTP responses.
    """
    status_code = STATUS_CODE_MAP.get(
        exc.code, status.HTTP_500_INTERNAL_SERVER_ERROR
    )

    if isinstance(exc, UpstreamError):
        # Detail stays in the logs, the client gets the generic message
        logger.error(f"Upstream failure on {request.url.path}: {exc}")

    headers = None
    if status_code == status.HTTP_401_UNAUTHORIZED:
        headers = {"WWW-Authenticate": "Bearer"}

    return JSONResponse(
        status_code=status_code,
        content=error_body(exc.message, exc.code, **exc.details()),
        headers=headers,
    )


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Report the first invalid field as a 400, like domain validation errors."""
    errors = exc.errors()
    field = "body"
    reason = "invalid request"
    if errors:
        loc = [str(part) for part in errors[0].get("loc", ()) if part != "body"]
        field = loc[-1] if loc else field
        reason = errors[0].get("msg", reason)

    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_body(
            f"Validation failed for {field}: {reason}",
            "VALIDATION_ERROR",
            field=field,
        ),
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    details = {}
    if get_settings().DEBUG:
        details["detail"] = f"{type(exc).__name__}: {exc}"
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body("Internal server error", "INTERNAL_ERROR", **details),
    )
