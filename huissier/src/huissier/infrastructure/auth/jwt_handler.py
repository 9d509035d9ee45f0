"""
JWT token handler for admin sessions.
Provides token creation and validation.
"""

import hmac
from datetime import datetime, timedelta, timezone
from typing import Dict

from jose import ExpiredSignatureError, JWTError, jwt

from huissier.config.settings import get_settings
from huissier.domain.exceptions.auth import ExpiredTokenError, InvalidTokenError

ADMIN_SUBJECT = "admin"


def check_admin_password(password: str) -> bool:
    """Constant-time comparison against the configured admin password."""
    expected = get_settings().ADMIN_PASSWORD.encode("utf-8")
    return hmac.compare_digest(expected, (password or "").encode("utf-8"))


def create_admin_token() -> str:
    """
    Create JWT access token for the admin dashboard.

    Returns:
        Encoded JWT token string
    """
    settings = get_settings()
    now = datetime.now(timezone.utc)
    payload = {
        "sub": ADMIN_SUBJECT,
        "iat": now,
        "exp": now + timedelta(hours=settings.JWT_EXPIRATION_HOURS),
        "type": "admin",
    }
    return jwt.encode(
        payload, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM
    )


def decode_admin_token(token: str) -> Dict[str, str]:
    """
    Decode and validate admin JWT.

    Args:
        token: JWT token string

    Returns:
        Decoded payload

    Raises:
        ExpiredTokenError: If token has expired
        InvalidTokenError: If token is invalid or not an admin token
    """
    settings = get_settings()
    try:
        payload = jwt.decode(
            token,
            settings.JWT_SECRET_KEY,
            algorithms=[settings.JWT_ALGORITHM],
        )
    except ExpiredSignatureError:
        raise ExpiredTokenError()
    except JWTError:
        raise InvalidTokenError()

    if payload.get("sub") != ADMIN_SUBJECT or payload.get("type") != "admin":
        raise InvalidTokenError()
    return payload
