"""
Admin authentication dependency.
"""

from typing import Dict, Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from huissier.domain.exceptions import AuthenticationError
from huissier.infrastructure.auth.jwt_handler import decode_admin_token

# Missing credentials are reported through our own error body
security = HTTPBearer(auto_error=False)


async def require_admin(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> Dict[str, str]:
    """
    Require a valid admin bearer token.

    Raises:
        AuthenticationError: No bearer token (401)
        AuthorizationError: Token invalid or expired (403)
    """
    if credentials is None or not credentials.credentials:
        raise AuthenticationError()
    return decode_admin_token(credentials.credentials)
