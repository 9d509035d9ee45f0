"""
Request ID middleware for request tracking.
"""

from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from huissier.infrastructure.monitoring.logger import set_request_id

MAX_REQUEST_ID_LENGTH = 128


class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    Generates or propagates X-Request-ID.

    The ID is bound to the logging context for the whole request.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        incoming = request.headers.get("X-Request-ID")
        if incoming and len(incoming) > MAX_REQUEST_ID_LENGTH:
            incoming = None
        request_id = set_request_id(incoming)

        response = await call_next(request)
        response.headers["X-Request-ID"] = request_id
        return response
